"""Directories: fixed-size entries stored in an inode's data."""

from __future__ import annotations

import errno
import struct
from dataclasses import dataclass
from typing import Iterator

from sectorkit.freemap import ROOT_DIR_SECTOR
from sectorkit.inode import Inode, InodeTable

NAME_MAX = 14
"""Maximum length of a file name, in bytes."""

_ENTRY = struct.Struct("<I15s?")
ENTRY_SIZE = _ENTRY.size
"""Size of one on-disk directory entry, in bytes."""


@dataclass(frozen=True)
class DirEntry:
    """A single directory entry."""

    inode_sector: int
    name: str
    in_use: bool

    def encode(self) -> bytes:
        name = self.name.encode("utf-8")[:NAME_MAX]
        return _ENTRY.pack(self.inode_sector, name, self.in_use)

    @staticmethod
    def decode(data: bytes) -> DirEntry:
        if len(data) != ENTRY_SIZE:
            raise ValueError(
                f"directory entry must be {ENTRY_SIZE} bytes, got {len(data)}"
            )
        sector, raw_name, in_use = _ENTRY.unpack(data)
        name = raw_name.split(b"\0", 1)[0].decode("utf-8", "replace")
        return DirEntry(sector, name, bool(in_use))


class Directory:
    """An open directory over an inode, of which it takes ownership."""

    def __init__(self, inode: Inode | None) -> None:
        if inode is None:
            raise ValueError("cannot open a directory without an inode")
        self.inode = inode
        self.pos = 0
        self._closed = False

    def reopen(self) -> Directory:
        """Return a new directory for the same inode."""
        return Directory(self.inode.reopen())

    def close(self) -> None:
        """Close the directory and release its inode."""
        if not self._closed:
            self._closed = True
            self.inode.close()

    def _entries(self) -> Iterator[tuple[int, DirEntry]]:
        offset = 0
        while True:
            data = self.inode.read_at(ENTRY_SIZE, offset)
            if len(data) != ENTRY_SIZE:
                return
            yield offset, DirEntry.decode(data)
            offset += ENTRY_SIZE

    def _find(self, name: str) -> tuple[int, DirEntry] | None:
        return next(
            (
                (offset, entry)
                for offset, entry in self._entries()
                if entry.in_use and entry.name == name
            ),
            None,
        )

    def lookup(self, name: str) -> Inode | None:
        """Return an open inode for NAME, or None if there is no such entry.

        The caller must close the inode.
        """
        found = self._find(name)
        if found is None:
            return None
        return self.inode.table.open(found[1].inode_sector)

    def add(self, name: str, inode_sector: int) -> None:
        """Add an entry NAME for the inode in INODE_SECTOR.

        Raises ValueError for an empty or too long name, FileExistsError
        if NAME is already present and OSError if the directory is full.
        """
        encoded = name.encode("utf-8")
        if not encoded or len(encoded) > NAME_MAX:
            raise ValueError(f"invalid file name {name!r}")
        if self._find(name) is not None:
            raise FileExistsError(errno.EEXIST, "file exists", name)

        slot = None
        end = 0
        for offset, entry in self._entries():
            if not entry.in_use:
                slot = offset
                break
            end = offset + ENTRY_SIZE
        if slot is None:
            slot = end

        data = DirEntry(inode_sector, name, True).encode()
        if self.inode.write_at(data, slot) != ENTRY_SIZE:
            raise OSError(errno.ENOSPC, "directory is full", name)

    def remove(self, name: str) -> None:
        """Remove the entry for NAME and mark its inode for deletion.

        Raises FileNotFoundError if there is no such entry.
        """
        found = self._find(name)
        if found is None:
            raise FileNotFoundError(errno.ENOENT, "no such file", name)
        offset, entry = found
        inode = self.inode.table.open(entry.inode_sector)
        try:
            erased = DirEntry(entry.inode_sector, entry.name, False).encode()
            if self.inode.write_at(erased, offset) != ENTRY_SIZE:
                raise OSError(errno.EIO, "could not erase directory entry", name)
            inode.remove()
        finally:
            inode.close()

    def readdir(self) -> str | None:
        """Return the next name in the directory, or None at its end."""
        while True:
            data = self.inode.read_at(ENTRY_SIZE, self.pos)
            if len(data) != ENTRY_SIZE:
                return None
            self.pos += ENTRY_SIZE
            entry = DirEntry.decode(data)
            if entry.in_use:
                return entry.name

    def __iter__(self) -> Iterator[str]:
        while (name := self.readdir()) is not None:
            yield name


def create_directory(table: InodeTable, sector: int, entry_count: int) -> None:
    """Create a directory with room for ENTRY_COUNT entries at SECTOR."""
    table.create(sector, entry_count * ENTRY_SIZE)


def open_root(table: InodeTable) -> Directory:
    """Open the root directory."""
    return Directory(table.open(ROOT_DIR_SECTOR))