"""The free-sector map: one bit per sector of the file system device."""

from __future__ import annotations

from typing import Protocol

FREE_MAP_SECTOR = 0
"""Sector of the free map file's inode."""

ROOT_DIR_SECTOR = 1
"""Sector of the root directory's inode."""


class FreeMapError(Exception):
    """Raised when sectors cannot be allocated, released or persisted."""


class _BackingFile(Protocol):
    def read_at(self, size: int, offset: int) -> bytes: ...

    def write_at(self, data: bytes, offset: int) -> int: ...

    def close(self) -> None: ...


class FreeMap:
    """Tracks which sectors of a device are in use.

    The sectors holding the free map's inode and the root directory's
    inode are marked as used from the start.
    """

    def __init__(self, sector_count: int) -> None:
        if sector_count <= ROOT_DIR_SECTOR:
            raise ValueError(
                f"device of {sector_count} sectors is too small for a free map"
            )
        self.sector_count = sector_count
        self._used = bytearray(sector_count)
        self._used[FREE_MAP_SECTOR] = 1
        self._used[ROOT_DIR_SECTOR] = 1
        self._file: _BackingFile | None = None

    def file_size(self) -> int:
        """Return the number of bytes the map occupies in its file."""
        return (self.sector_count + 7) // 8

    def _encode(self) -> bytes:
        out = bytearray(self.file_size())
        for index, used in enumerate(self._used):
            if used:
                out[index // 8] |= 1 << (index % 8)
        return bytes(out)

    def _decode(self, data: bytes) -> None:
        self._used = bytearray(
            (data[index // 8] >> (index % 8)) & 1
            for index in range(self.sector_count)
        )

    def _write(self) -> bool:
        if self._file is None:
            return False
        encoded = self._encode()
        return self._file.write_at(encoded, 0) == len(encoded)

    def _find_free_run(self, count: int) -> int | None:
        if count == 0:
            return 0
        run = 0
        for index, used in enumerate(self._used):
            run = 0 if used else run + 1
            if run == count:
                return index - count + 1
        return None

    def _set_range(self, sector: int, count: int, value: int) -> None:
        self._used[sector:sector + count] = bytes([value]) * count

    def allocate(self, count: int) -> int:
        """Allocate COUNT consecutive sectors and return the first.

        Raises FreeMapError if no run of that length is free or if the
        updated map cannot be written to its file.
        """
        if count < 0:
            raise ValueError("sector count must not be negative")
        sector = self._find_free_run(count)
        if sector is None:
            raise FreeMapError(f"no run of {count} free sectors available")
        self._set_range(sector, count, 1)
        if self._file is not None and not self._write():
            self._set_range(sector, count, 0)
            raise FreeMapError("free map could not be written")
        return sector

    def release(self, sector: int, count: int) -> None:
        """Make COUNT sectors starting at SECTOR available again."""
        if sector < 0 or count < 0 or sector + count > self.sector_count:
            raise FreeMapError(
                f"sectors {sector}..{sector + count} outside the free map"
            )
        if not all(self._used[sector:sector + count]):
            raise FreeMapError(
                f"releasing sectors {sector}..{sector + count} "
                "that are not all allocated"
            )
        self._set_range(sector, count, 0)
        if self._file is not None:
            self._write()

    def attach(self, file: _BackingFile) -> None:
        """Use FILE as the map's backing file and write the map to it."""
        self._file = file
        if not self._write():
            raise FreeMapError("can't write free map")

    def load(self, file: _BackingFile) -> None:
        """Use FILE as the map's backing file and read the map from it."""
        self._file = file
        size = self.file_size()
        data = file.read_at(size, 0)
        if len(data) != size:
            raise FreeMapError("can't read free map")
        self._decode(data)

    def save(self) -> None:
        """Write the map to its backing file."""
        if self._file is None:
            raise FreeMapError("free map has no backing file")
        if not self._write():
            raise FreeMapError("can't write free map")

    def close(self) -> None:
        """Close the backing file, if any."""
        if self._file is not None:
            self._file.close()
            self._file = None