"""Block devices: sector-addressed storage and a registry of devices."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Protocol, TextIO

BLOCK_SECTOR_SIZE = 512
"""Size of a block device sector in bytes."""

_NAME_MAX = 15
ROLE_COUNT = 4
"""Number of block types that can be assigned as a role."""


class BlockType(IntEnum):
    """Type of a block device; the first four are roles."""

    KERNEL = 0
    FILESYS = 1
    SCRATCH = 2
    SWAP = 3
    RAW = 4
    FOREIGN = 5

    @property
    def is_role(self) -> bool:
        return self < ROLE_COUNT


_TYPE_NAMES = {
    BlockType.KERNEL: "kernel",
    BlockType.FILESYS: "filesys",
    BlockType.SCRATCH: "scratch",
    BlockType.SWAP: "swap",
    BlockType.RAW: "raw",
    BlockType.FOREIGN: "foreign",
}


class BlockError(Exception):
    """Raised on an invalid access to a block device."""


class Driver(Protocol):
    """Low-level operations a block device delegates to."""

    def read(self, sector: int) -> bytes: ...

    def write(self, sector: int, data: bytes) -> None: ...


def block_type_name(block_type: int) -> str:
    """Return a human-readable name for BLOCK_TYPE."""
    return _TYPE_NAMES[BlockType(block_type)]


def _check_sector_data(data: bytes) -> bytes:
    data = bytes(data)
    if len(data) != BLOCK_SECTOR_SIZE:
        raise ValueError(
            f"sector data must be {BLOCK_SECTOR_SIZE} bytes, got {len(data)}"
        )
    return data


class MemoryDisk:
    """A driver that keeps its sectors in memory, initially zeroed."""

    def __init__(self, sector_count: int) -> None:
        if sector_count < 0:
            raise ValueError("sector count must not be negative")
        self.sector_count = sector_count
        self._data = bytearray(sector_count * BLOCK_SECTOR_SIZE)

    def _span(self, sector: int) -> slice:
        if not 0 <= sector < self.sector_count:
            raise BlockError(
                f"sector {sector} outside disk of {self.sector_count} sectors"
            )
        start = sector * BLOCK_SECTOR_SIZE
        return slice(start, start + BLOCK_SECTOR_SIZE)

    def read(self, sector: int) -> bytes:
        return bytes(self._data[self._span(sector)])

    def write(self, sector: int, data: bytes) -> None:
        span = self._span(sector)
        self._data[span] = _check_sector_data(data)


@dataclass(eq=False)
class Block:
    """A registered block device."""

    name: str
    block_type: BlockType
    size: int
    driver: Driver
    read_count: int = 0
    write_count: int = 0

    def _check_sector(self, sector: int) -> None:
        if not 0 <= sector < self.size:
            raise BlockError(
                f"Access past end of device {self.name} "
                f"(sector={sector}, size={self.size})"
            )

    def read(self, sector: int) -> bytes:
        """Read one sector and return its bytes."""
        self._check_sector(sector)
        data = self.driver.read(sector)
        self.read_count += 1
        return data

    def write(self, sector: int, data: bytes) -> None:
        """Write one sector of exactly BLOCK_SECTOR_SIZE bytes."""
        self._check_sector(sector)
        if self.block_type == BlockType.FOREIGN:
            raise BlockError(f"{self.name}: device is owned by another system")
        self.driver.write(sector, _check_sector_data(data))
        self.write_count += 1

    def __len__(self) -> int:
        return self.size


def _human_readable_size(size: int) -> str:
    if size == 1:
        return "1 byte"
    units = ("bytes", "kB", "MB", "GB", "TB")
    unit_index = 0
    while size >= 1024 and unit_index + 1 < len(units):
        size //= 1024
        unit_index += 1
    return f"{size} {units[unit_index]}"


class BlockRegistry:
    """All registered block devices, in probe order, and their roles."""

    def __init__(self, out: TextIO | None = None) -> None:
        self._out = out
        self._blocks: list[Block] = []
        self._roles: dict[BlockType, Block] = {}

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def register(
        self,
        name: str,
        block_type: BlockType,
        size: int,
        driver: Driver,
        extra_info: str | None = None,
    ) -> Block:
        """Register a new device and announce it on the output stream."""
        block = Block(name[:_NAME_MAX], BlockType(block_type), size, driver)
        self._blocks.append(block)
        line = (
            f"{block.name}: {block.size:,} sectors "
            f"({_human_readable_size(block.size * BLOCK_SECTOR_SIZE)})"
        )
        if extra_info is not None:
            line += f", {extra_info}"
        print(line, file=self.out)
        return block

    @staticmethod
    def _require_role(role: BlockType) -> BlockType:
        role = BlockType(role)
        if not role.is_role:
            raise ValueError(f"{block_type_name(role)} is not a block role")
        return role

    def get_role(self, role: BlockType) -> Block | None:
        """Return the device assigned ROLE, or None."""
        return self._roles.get(self._require_role(role))

    def set_role(self, role: BlockType, block: Block | None) -> None:
        """Assign BLOCK to ROLE; None clears the role."""
        role = self._require_role(role)
        if block is None:
            self._roles.pop(role, None)
        else:
            self._roles[role] = block

    def by_name(self, name: str) -> Block | None:
        """Return the device called NAME, or None."""
        return next((b for b in self._blocks if b.name == name), None)

    def __iter__(self) -> Iterator[Block]:
        return iter(list(self._blocks))

    def print_stats(self) -> None:
        """Print read and write counts for every device with a role."""
        for role in sorted(self._roles):
            block = self._roles[role]
            print(
                f"{block.name} ({block_type_name(block.block_type)}): "
                f"{block.read_count} reads, {block.write_count} writes",
                file=self.out,
            )