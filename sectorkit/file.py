"""Open files: a position and write-denial state over a shared inode."""

from __future__ import annotations

from types import TracebackType

from sectorkit.inode import Inode


class File:
    """An open file over an inode, of which it takes ownership."""

    def __init__(self, inode: Inode | None) -> None:
        if inode is None:
            raise ValueError("cannot open a file without an inode")
        self.inode = inode
        self._pos = 0
        self._deny_write = False
        self._closed = False

    def reopen(self) -> File:
        """Return a new file for the same inode, at position 0."""
        return File(self.inode.reopen())

    def close(self) -> None:
        """Close the file, re-allowing writes it denied."""
        if self._closed:
            return
        self.allow_write()
        self.inode.close()
        self._closed = True

    def read(self, size: int) -> bytes:
        """Read up to SIZE bytes at the current position and advance."""
        data = self.inode.read_at(size, self._pos)
        self._pos += len(data)
        return data

    def read_at(self, size: int, offset: int) -> bytes:
        """Read up to SIZE bytes at OFFSET, leaving the position alone."""
        return self.inode.read_at(size, offset)

    def write(self, data: bytes) -> int:
        """Write DATA at the current position and advance past it."""
        written = self.inode.write_at(data, self._pos)
        self._pos += written
        return written

    def write_at(self, data: bytes, offset: int) -> int:
        """Write DATA at OFFSET, leaving the position alone."""
        return self.inode.write_at(data, offset)

    def deny_write(self) -> None:
        """Deny writes to the inode until allowed again or closed."""
        if not self._deny_write:
            self._deny_write = True
            self.inode.deny_write()

    def allow_write(self) -> None:
        """Withdraw this file's write denial, if any."""
        if self._deny_write:
            self._deny_write = False
            self.inode.allow_write()

    def seek(self, position: int) -> None:
        """Set the current position, in bytes from the start."""
        if position < 0:
            raise ValueError("position must not be negative")
        self._pos = position

    def tell(self) -> int:
        """Return the current position."""
        return self._pos

    def __len__(self) -> int:
        return len(self.inode)

    def __enter__(self) -> File:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()