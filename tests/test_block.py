import io

import pytest

from sectorkit.block import (
    BLOCK_SECTOR_SIZE,
    BlockError,
    BlockRegistry,
    BlockType,
    MemoryDisk,
    block_type_name,
)


def make_registry():
    out = io.StringIO()
    return BlockRegistry(out), out


def test_type_names():
    assert block_type_name(BlockType.FILESYS) == "filesys"
    assert block_type_name(BlockType.FOREIGN) == "foreign"
    assert block_type_name(BlockType.KERNEL) == "kernel"


def test_type_name_rejects_unknown():
    with pytest.raises(ValueError):
        block_type_name(99)


def test_memory_disk_starts_zeroed():
    disk = MemoryDisk(4)
    assert disk.read(3) == bytes(BLOCK_SECTOR_SIZE)


def test_memory_disk_round_trip():
    disk = MemoryDisk(4)
    payload = bytes(range(256)) * 2
    disk.write(2, payload)
    assert disk.read(2) == payload
    assert disk.read(1) == bytes(BLOCK_SECTOR_SIZE)


def test_memory_disk_rejects_out_of_range():
    disk = MemoryDisk(2)
    with pytest.raises(BlockError):
        disk.read(2)


def test_memory_disk_rejects_wrong_length():
    disk = MemoryDisk(2)
    with pytest.raises(ValueError):
        disk.write(0, b"short")


def test_register_announces_device():
    registry, out = make_registry()
    registry.register("hda", BlockType.RAW, 2048, MemoryDisk(2048), 'model "X"')
    assert out.getvalue() == 'hda: 2,048 sectors (1 MB), model "X"\n'


def test_register_without_extra_info():
    registry, out = make_registry()
    registry.register("hdb", BlockType.RAW, 8, MemoryDisk(8))
    text = out.getvalue()
    assert text.startswith("hdb: ")
    assert text.endswith(")\n")
    assert "," not in text.split("(")[1]


def test_register_truncates_long_name():
    registry, _ = make_registry()
    long_name = "abcdefghijklmnopqrstuvwxyz"
    block = registry.register(long_name, BlockType.RAW, 1, MemoryDisk(1))
    assert len(block.name) < len(long_name)
    assert block.name == long_name[: len(block.name)]
    assert registry.by_name(block.name) is block


def test_block_round_trip_counts():
    registry, _ = make_registry()
    block = registry.register("hda", BlockType.RAW, 4, MemoryDisk(4))
    payload = b"\xab" * BLOCK_SECTOR_SIZE
    block.write(1, payload)
    assert block.read(1) == payload
    assert block.read_count == 1
    assert block.write_count == 1
    assert len(block) == 4


def test_block_access_past_end():
    registry, _ = make_registry()
    block = registry.register("hda", BlockType.RAW, 4, MemoryDisk(8))
    with pytest.raises(BlockError):
        block.read(4)
    with pytest.raises(BlockError):
        block.write(4, bytes(BLOCK_SECTOR_SIZE))
    assert block.read_count == 0


def test_write_to_foreign_device_refused():
    registry, _ = make_registry()
    block = registry.register("hda1", BlockType.FOREIGN, 4, MemoryDisk(4))
    with pytest.raises(BlockError):
        block.write(0, bytes(BLOCK_SECTOR_SIZE))
    assert block.write_count == 0


def test_iteration_in_registration_order():
    registry, _ = make_registry()
    names = ["hda", "hdb", "hdc"]
    for name in names:
        registry.register(name, BlockType.RAW, 1, MemoryDisk(1))
    assert [b.name for b in registry] == names


def test_by_name_missing():
    registry, _ = make_registry()
    registry.register("hda", BlockType.RAW, 1, MemoryDisk(1))
    assert registry.by_name("hdz") is None


def test_roles():
    registry, _ = make_registry()
    block = registry.register("hda", BlockType.RAW, 1, MemoryDisk(1))
    assert registry.get_role(BlockType.SCRATCH) is None
    registry.set_role(BlockType.SCRATCH, block)
    assert registry.get_role(BlockType.SCRATCH) is block
    registry.set_role(BlockType.SCRATCH, None)
    assert registry.get_role(BlockType.SCRATCH) is None


def test_non_role_type_rejected():
    registry, _ = make_registry()
    with pytest.raises(ValueError):
        registry.get_role(BlockType.RAW)


def test_print_stats():
    registry, out = make_registry()
    block = registry.register("hda", BlockType.FILESYS, 4, MemoryDisk(4))
    registry.register("hdb", BlockType.RAW, 4, MemoryDisk(4))
    registry.set_role(BlockType.FILESYS, block)
    block.write(0, bytes(BLOCK_SECTOR_SIZE))
    block.write(1, bytes(BLOCK_SECTOR_SIZE))
    block.read(0)
    out.seek(0)
    out.truncate()
    registry.print_stats()
    assert out.getvalue() == "hda (filesys): 1 reads, 2 writes\n"