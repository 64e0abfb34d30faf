"""Inodes: on-disk file headers and the table of open inodes."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from sectorkit.block import BLOCK_SECTOR_SIZE, Block
from sectorkit.freemap import FreeMap

INODE_MAGIC = 0x494E4F44
"""Identifies an on-disk inode."""

_HEADER = struct.Struct("<IiI")


def bytes_to_sectors(size: int) -> int:
    """Return the number of sectors needed to hold SIZE bytes."""
    return -(-size // BLOCK_SECTOR_SIZE)


@dataclass
class InodeDisk:
    """On-disk inode, exactly one sector long."""

    start: int
    length: int
    magic: int = INODE_MAGIC

    def encode(self) -> bytes:
        header = _HEADER.pack(self.start, self.length, self.magic)
        return header + bytes(BLOCK_SECTOR_SIZE - len(header))

    @staticmethod
    def decode(data: bytes) -> InodeDisk:
        if len(data) != BLOCK_SECTOR_SIZE:
            raise ValueError(
                f"inode must be {BLOCK_SECTOR_SIZE} bytes, got {len(data)}"
            )
        start, length, magic = _HEADER.unpack_from(data)
        return InodeDisk(start, length, magic)


@dataclass(eq=False)
class Inode:
    """In-memory inode, shared by everyone who has its sector open."""

    table: InodeTable
    sector: int
    data: InodeDisk
    open_count: int = 1
    removed: bool = False
    deny_write_count: int = 0

    def reopen(self) -> Inode:
        """Count one more opener and return this inode."""
        self.open_count += 1
        return self

    def inumber(self) -> int:
        """Return the inode number: the sector holding the inode."""
        return self.sector

    def remove(self) -> None:
        """Mark the inode to be deleted when its last opener closes it."""
        self.removed = True

    def close(self) -> None:
        """Drop one opener; the last one frees the blocks of a removed inode."""
        if self.open_count <= 0:
            raise RuntimeError(f"inode {self.sector} is already closed")
        self.open_count -= 1
        if self.open_count == 0:
            self.table._forget(self)
            if self.removed:
                free_map = self.table.free_map
                free_map.release(self.sector, 1)
                free_map.release(
                    self.data.start, bytes_to_sectors(self.data.length)
                )

    def _byte_to_sector(self, pos: int) -> int:
        return self.data.start + pos // BLOCK_SECTOR_SIZE

    def _chunk(self, wanted: int, offset: int) -> tuple[int, int]:
        sector_ofs = offset % BLOCK_SECTOR_SIZE
        inode_left = len(self) - offset
        sector_left = BLOCK_SECTOR_SIZE - sector_ofs
        return sector_ofs, min(wanted, inode_left, sector_left)

    def read_at(self, size: int, offset: int) -> bytes:
        """Read up to SIZE bytes at OFFSET; short at end of file."""
        if offset < 0:
            raise ValueError("offset must not be negative")
        device = self.table.device
        chunks: list[bytes] = []
        while size > 0:
            sector_ofs, chunk = self._chunk(size, offset)
            if chunk <= 0:
                break
            sector = device.read(self._byte_to_sector(offset))
            chunks.append(sector[sector_ofs:sector_ofs + chunk])
            size -= chunk
            offset += chunk
        return b"".join(chunks)

    def write_at(self, data: bytes, offset: int) -> int:
        """Write DATA at OFFSET and return the number of bytes written.

        The inode does not grow: writing stops at its end.  Nothing is
        written while writes are denied.
        """
        if offset < 0:
            raise ValueError("offset must not be negative")
        if self.deny_write_count:
            return 0
        data = bytes(data)
        device = self.table.device
        written = 0
        while written < len(data):
            sector_ofs, chunk = self._chunk(len(data) - written, offset)
            if chunk <= 0:
                break
            sector_idx = self._byte_to_sector(offset)
            piece = data[written:written + chunk]
            if sector_ofs == 0 and chunk == BLOCK_SECTOR_SIZE:
                device.write(sector_idx, piece)
            else:
                bounce = bytearray(device.read(sector_idx))
                bounce[sector_ofs:sector_ofs + chunk] = piece
                device.write(sector_idx, bytes(bounce))
            written += chunk
            offset += chunk
        return written

    def deny_write(self) -> None:
        """Deny writes; at most once per opener."""
        if self.deny_write_count >= self.open_count:
            raise RuntimeError("more write denials than openers")
        self.deny_write_count += 1

    def allow_write(self) -> None:
        """Undo one earlier deny_write()."""
        if self.deny_write_count <= 0:
            raise RuntimeError("writes are not denied")
        self.deny_write_count -= 1

    def __len__(self) -> int:
        return self.data.length


class InodeTable:
    """Creates inodes on a device and keeps one Inode per open sector."""

    def __init__(self, device: Block, free_map: FreeMap) -> None:
        self.device = device
        self.free_map = free_map
        self._open: dict[int, Inode] = {}

    def create(self, sector: int, length: int) -> None:
        """Write a new inode of LENGTH zeroed bytes to SECTOR.

        Raises FreeMapError if the data sectors cannot be allocated.
        """
        if length < 0:
            raise ValueError("length must not be negative")
        sectors = bytes_to_sectors(length)
        start = self.free_map.allocate(sectors)
        self.device.write(sector, InodeDisk(start, length).encode())
        zeros = bytes(BLOCK_SECTOR_SIZE)
        for data_sector in range(start, start + sectors):
            self.device.write(data_sector, zeros)

    def open(self, sector: int) -> Inode:
        """Return the inode stored at SECTOR, shared if already open."""
        inode = self._open.get(sector)
        if inode is not None:
            return inode.reopen()
        inode = Inode(self, sector, InodeDisk.decode(self.device.read(sector)))
        self._open[sector] = inode
        return inode

    def _forget(self, inode: Inode) -> None:
        if self._open.get(inode.sector) is inode:
            del self._open[inode.sector]