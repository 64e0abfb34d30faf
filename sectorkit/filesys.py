"""A flat file system: a free map and a root directory on a block device."""

from __future__ import annotations

from contextlib import contextmanager
from types import TracebackType
from typing import Iterator

from sectorkit.block import Block
from sectorkit.directory import Directory, create_directory, open_root
from sectorkit.file import File
from sectorkit.freemap import FREE_MAP_SECTOR, ROOT_DIR_SECTOR, FreeMap, FreeMapError
from sectorkit.inode import InodeTable

_ROOT_ENTRIES = 16


class FileSystemError(Exception):
    """Raised when the file system cannot be set up or has no space."""


class FileSystem:
    """The file system on DEVICE, optionally formatted first."""

    def __init__(self, device: Block | None, format: bool = False) -> None:
        if device is None:
            raise FileSystemError(
                "No file system device found, can't initialize file system."
            )
        self.device = device
        self.free_map = FreeMap(len(device))
        self.inodes = InodeTable(device, self.free_map)
        self._closed = False
        if format:
            self._format()
        try:
            self.free_map.load(File(self.inodes.open(FREE_MAP_SECTOR)))
        except FreeMapError as exc:
            raise FileSystemError("can't read free map") from exc

    def _format(self) -> None:
        try:
            self.inodes.create(FREE_MAP_SECTOR, self.free_map.file_size())
            self.free_map.attach(File(self.inodes.open(FREE_MAP_SECTOR)))
            create_directory(self.inodes, ROOT_DIR_SECTOR, _ROOT_ENTRIES)
        except FreeMapError as exc:
            raise FileSystemError("formatting failed") from exc
        self.free_map.close()

    @contextmanager
    def _root(self) -> Iterator[Directory]:
        if self._closed:
            raise FileSystemError("file system is closed")
        root = open_root(self.inodes)
        try:
            yield root
        finally:
            root.close()

    def close(self) -> None:
        """Shut down the file system, closing the free map file."""
        if not self._closed:
            self._closed = True
            self.free_map.close()

    def create(self, name: str, initial_size: int = 0) -> None:
        """Create a file NAME of INITIAL_SIZE zeroed bytes.

        Raises FileExistsError if NAME exists, ValueError for a bad name,
        OSError if the root directory is full and FileSystemError if
        there is not enough free space.
        """
        with self._root() as root:
            sector = None
            try:
                try:
                    sector = self.free_map.allocate(1)
                    self.inodes.create(sector, initial_size)
                except FreeMapError as exc:
                    raise FileSystemError(f"{name}: no space") from exc
                root.add(name, sector)
            except Exception:
                if sector is not None:
                    self.free_map.release(sector, 1)
                raise

    def open(self, name: str) -> File:
        """Open file NAME; raises FileNotFoundError if it does not exist."""
        with self._root() as root:
            inode = root.lookup(name)
        if inode is None:
            raise FileNotFoundError(name)
        return File(inode)

    def remove(self, name: str) -> None:
        """Delete file NAME; raises FileNotFoundError if it does not exist."""
        with self._root() as root:
            root.remove(name)

    def listdir(self) -> list[str]:
        """Return the names in the root directory, in slot order."""
        with self._root() as root:
            return list(root)

    def __enter__(self) -> FileSystem:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()