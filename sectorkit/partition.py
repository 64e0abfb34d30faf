"""MBR partition tables: parsing and registering partitions as devices."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from sectorkit.block import BLOCK_SECTOR_SIZE, Block, BlockRegistry, BlockType

_ENTRY = struct.Struct("<B3sB3sII")
_TABLE_START = 446
_TABLE_END = _TABLE_START + 4 * _ENTRY.size
_SIGNATURE = 0xAA55
_EXTENDED_TYPES = frozenset({0x05, 0x0F, 0x85, 0xC5})
_ROLE_TYPES = {
    0x20: BlockType.KERNEL,
    0x21: BlockType.FILESYS,
    0x22: BlockType.SCRATCH,
    0x23: BlockType.SWAP,
}

_TYPE_NAMES = {
    0x00: "Empty",
    0x01: "FAT12",
    0x02: "XENIX root",
    0x03: "XENIX usr",
    0x04: "FAT16 <32M",
    0x05: "Extended",
    0x06: "FAT16",
    0x07: "HPFS/NTFS",
    0x08: "AIX",
    0x09: "AIX bootable",
    0x0A: "OS/2 Boot Manager",
    0x0B: "W95 FAT32",
    0x0C: "W95 FAT32 (LBA)",
    0x0E: "W95 FAT16 (LBA)",
    0x0F: "W95 Ext'd (LBA)",
    0x10: "OPUS",
    0x11: "Hidden FAT12",
    0x12: "Compaq diagnostics",
    0x14: "Hidden FAT16 <32M",
    0x16: "Hidden FAT16",
    0x17: "Hidden HPFS/NTFS",
    0x18: "AST SmartSleep",
    0x1B: "Hidden W95 FAT32",
    0x1C: "Hidden W95 FAT32 (LBA)",
    0x1E: "Hidden W95 FAT16 (LBA)",
    0x20: "Pintos OS kernel",
    0x21: "Pintos file system",
    0x22: "Pintos scratch",
    0x23: "Pintos swap",
    0x24: "NEC DOS",
    0x39: "Plan 9",
    0x3C: "PartitionMagic recovery",
    0x40: "Venix 80286",
    0x41: "PPC PReP Boot",
    0x42: "SFS",
    0x4D: "QNX4.x",
    0x4E: "QNX4.x 2nd part",
    0x4F: "QNX4.x 3rd part",
    0x50: "OnTrack DM",
    0x51: "OnTrack DM6 Aux1",
    0x52: "CP/M",
    0x53: "OnTrack DM6 Aux3",
    0x54: "OnTrackDM6",
    0x55: "EZ-Drive",
    0x56: "Golden Bow",
    0x5C: "Priam Edisk",
    0x61: "SpeedStor",
    0x63: "GNU HURD or SysV",
    0x64: "Novell Netware 286",
    0x65: "Novell Netware 386",
    0x70: "DiskSecure Multi-Boot",
    0x75: "PC/IX",
    0x80: "Old Minix",
    0x81: "Minix / old Linux",
    0x82: "Linux swap / Solaris",
    0x83: "Linux",
    0x84: "OS/2 hidden C: drive",
    0x85: "Linux extended",
    0x86: "NTFS volume set",
    0x87: "NTFS volume set",
    0x88: "Linux plaintext",
    0x8E: "Linux LVM",
    0x93: "Amoeba",
    0x94: "Amoeba BBT",
    0x9F: "BSD/OS",
    0xA0: "IBM Thinkpad hibernation",
    0xA5: "FreeBSD",
    0xA6: "OpenBSD",
    0xA7: "NeXTSTEP",
    0xA8: "Darwin UFS",
    0xA9: "NetBSD",
    0xAB: "Darwin boot",
    0xB7: "BSDI fs",
    0xB8: "BSDI swap",
    0xBB: "Boot Wizard hidden",
    0xBE: "Solaris boot",
    0xBF: "Solaris",
    0xC1: "DRDOS/sec (FAT-12)",
    0xC4: "DRDOS/sec (FAT-16 < 32M)",
    0xC6: "DRDOS/sec (FAT-16)",
    0xC7: "Syrinx",
    0xDA: "Non-FS data",
    0xDB: "CP/M / CTOS / ...",
    0xDE: "Dell Utility",
    0xDF: "BootIt",
    0xE1: "DOS access",
    0xE3: "DOS R/O",
    0xE4: "SpeedStor",
    0xEB: "BeOS fs",
    0xEE: "EFI GPT",
    0xEF: "EFI (FAT-12/16/32)",
    0xF0: "Linux/PA-RISC boot",
    0xF1: "SpeedStor",
    0xF4: "SpeedStor",
    0xF2: "DOS secondary",
    0xFD: "Linux raid autodetect",
    0xFE: "LANstep",
    0xFF: "BBT",
}

_SECTOR_LIMIT = 1 << 32


def partition_type_name(type_code: int) -> str:
    """Return a human-readable name for a partition type byte."""
    return _TYPE_NAMES.get(type_code, "Unknown")


@dataclass(frozen=True)
class PartitionEntry:
    """One entry of a partition table."""

    bootable: int
    start_chs: bytes
    type_code: int
    end_chs: bytes
    offset: int
    size: int

    @property
    def is_empty(self) -> bool:
        return self.size == 0 or self.type_code == 0

    @property
    def is_extended(self) -> bool:
        return self.type_code in _EXTENDED_TYPES


def parse_partition_table(sector_data: bytes) -> list[PartitionEntry]:
    """Parse the four entries of a partition table sector.

    Raises ValueError if the sector has the wrong size or signature.
    """
    if len(sector_data) != BLOCK_SECTOR_SIZE:
        raise ValueError(
            f"partition table must be {BLOCK_SECTOR_SIZE} bytes, "
            f"got {len(sector_data)}"
        )
    signature = int.from_bytes(sector_data[_TABLE_END:_TABLE_END + 2], "little")
    if signature != _SIGNATURE:
        raise ValueError(f"invalid partition table signature {signature:#06x}")
    return [
        PartitionEntry(*fields)
        for fields in _ENTRY.iter_unpack(sector_data[_TABLE_START:_TABLE_END])
    ]


@dataclass
class Partition:
    """Driver mapping sectors of a partition onto its underlying device."""

    block: Block
    start: int

    def read(self, sector: int) -> bytes:
        return self.block.read(self.start + sector)

    def write(self, sector: int, data: bytes) -> None:
        self.block.write(self.start + sector, data)


@dataclass
class _Scan:
    registry: BlockRegistry
    block: Block
    part_nr: int = 0
    found: list[Block] = field(default_factory=list)
    visited: set[int] = field(default_factory=set)

    def say(self, message: str) -> None:
        print(message, file=self.registry.out)

    def read_table(self, sector: int, primary_extended_sector: int) -> None:
        name = self.block.name
        if sector >= len(self.block):
            self.say(
                f"{name}: Partition table at sector {sector} past end of device."
            )
            return
        if sector in self.visited:
            return
        self.visited.add(sector)

        try:
            entries = parse_partition_table(self.block.read(sector))
        except ValueError:
            if primary_extended_sector == 0:
                self.say(f"{name}: Invalid partition table signature")
            else:
                self.say(
                    f"{name}: Invalid extended partition table in sector {sector}"
                )
            return

        for entry in entries:
            if entry.is_empty:
                continue
            if entry.is_extended:
                self.say(f"{name}: Extended partition in sector {sector}")
                # An extended entry in the MBR holds an absolute sector;
                # deeper ones are relative to the primary extended partition.
                if sector == 0:
                    self.read_table(entry.offset, entry.offset)
                else:
                    self.read_table(
                        (entry.offset + primary_extended_sector) % _SECTOR_LIMIT,
                        primary_extended_sector,
                    )
            else:
                self.part_nr += 1
                self.found_partition(
                    entry.type_code,
                    (entry.offset + sector) % _SECTOR_LIMIT,
                    entry.size,
                )

    def found_partition(self, type_code: int, start: int, size: int) -> None:
        device_size = len(self.block)
        label = f"{self.block.name}{self.part_nr}"
        end = start + size
        if start >= device_size:
            self.say(
                f"{label}: Partition starts past end of device (sector {start})"
            )
        elif end >= _SECTOR_LIMIT or end > device_size:
            self.say(
                f"{label}: Partition end ({end % _SECTOR_LIMIT}) "
                f"past end of device ({device_size})"
            )
        else:
            block_type = _ROLE_TYPES.get(type_code, BlockType.FOREIGN)
            extra_info = f"{partition_type_name(type_code)} ({type_code:02x})"
            self.found.append(
                self.registry.register(
                    label,
                    block_type,
                    size,
                    Partition(self.block, start),
                    extra_info,
                )
            )


def scan_partitions(registry: BlockRegistry, block: Block) -> list[Block]:
    """Register every primary and logical partition found on BLOCK.

    Returns the partition devices registered, in the order found.
    """
    scan = _Scan(registry, block)
    scan.read_table(0, 0)
    if scan.part_nr == 0:
        scan.say(f"{block.name}: Device contains no partitions")
    return scan.found