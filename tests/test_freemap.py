import pytest

from sectorkit.block import Block, BlockType, MemoryDisk
from sectorkit.file import File
from sectorkit.freemap import FREE_MAP_SECTOR, FreeMap, FreeMapError
from sectorkit.inode import InodeTable


class _MemoryFile:
    def __init__(self, size):
        self.data = bytearray(size)
        self.fail_writes = False
        self.closed = False

    def read_at(self, size, offset):
        return bytes(self.data[offset:offset + size])

    def write_at(self, data, offset):
        if self.fail_writes:
            return 0
        count = min(len(data), len(self.data) - offset)
        self.data[offset:offset + count] = data[:count]
        return count

    def close(self):
        self.closed = True


def test_first_allocation_skips_reserved_sectors():
    assert FreeMap(64).allocate(1) == 2


def test_consecutive_allocations_do_not_overlap():
    free_map = FreeMap(64)
    first = free_map.allocate(3)
    second = free_map.allocate(2)
    assert second == first + 3


def test_allocation_too_large_raises():
    free_map = FreeMap(16)
    with pytest.raises(FreeMapError):
        free_map.allocate(15)


def test_release_makes_sectors_reusable():
    free_map = FreeMap(64)
    sector = free_map.allocate(4)
    free_map.release(sector, 4)
    assert free_map.allocate(4) == sector


def test_release_of_free_sectors_raises():
    free_map = FreeMap(64)
    with pytest.raises(FreeMapError):
        free_map.release(10, 2)


def test_release_out_of_range_raises():
    free_map = FreeMap(8)
    with pytest.raises(FreeMapError):
        free_map.release(6, 4)


def test_file_size():
    assert FreeMap(64).file_size() == 8


def test_too_small_device_rejected():
    with pytest.raises(ValueError):
        FreeMap(1)


def test_attach_then_load_round_trip():
    free_map = FreeMap(64)
    backing = _MemoryFile(free_map.file_size())
    free_map.attach(backing)
    free_map.allocate(5)
    loaded = FreeMap(64)
    loaded.load(backing)
    assert loaded.allocate(1) == free_map.allocate(1)


def test_failed_write_rolls_back_allocation():
    free_map = FreeMap(64)
    backing = _MemoryFile(free_map.file_size())
    free_map.attach(backing)
    backing.fail_writes = True
    with pytest.raises(FreeMapError):
        free_map.allocate(3)
    backing.fail_writes = False
    first = free_map.allocate(3)
    fresh = FreeMap(64)
    assert first == fresh.allocate(3)


def test_attach_with_failing_file_raises():
    backing = _MemoryFile(8)
    backing.fail_writes = True
    with pytest.raises(FreeMapError):
        FreeMap(64).attach(backing)


def test_load_short_file_raises():
    with pytest.raises(FreeMapError):
        FreeMap(64).load(_MemoryFile(2))


def test_save_without_file_raises():
    with pytest.raises(FreeMapError):
        FreeMap(64).save()


def test_close_closes_backing_file():
    free_map = FreeMap(64)
    backing = _MemoryFile(free_map.file_size())
    free_map.attach(backing)
    free_map.close()
    assert backing.closed is True
    with pytest.raises(FreeMapError):
        free_map.save()


def test_persist_through_real_file():
    device = Block("fs", BlockType.FILESYS, 64, MemoryDisk(64))
    free_map = FreeMap(len(device))
    table = InodeTable(device, free_map)
    table.create(FREE_MAP_SECTOR, free_map.file_size())
    free_map.attach(File(table.open(FREE_MAP_SECTOR)))
    taken = free_map.allocate(6)
    free_map.close()

    reloaded = FreeMap(len(device))
    reloaded_table = InodeTable(device, reloaded)
    reloaded.load(File(reloaded_table.open(FREE_MAP_SECTOR)))
    assert reloaded.allocate(1) == taken + 6