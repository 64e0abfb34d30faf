import pytest

from sectorkit.block import Block, BlockType, MemoryDisk
from sectorkit.filesys import FileSystem, FileSystemError


def _device(sectors=128):
    return Block("hd0", BlockType.FILESYS, sectors, MemoryDisk(sectors))


@pytest.fixture
def fs():
    with FileSystem(_device(), format=True) as fs:
        yield fs


def test_fresh_filesystem_is_empty(fs):
    assert fs.listdir() == []


def test_create_write_read(fs):
    fs.create("a", 100)
    with fs.open("a") as f:
        assert len(f) == 100
        assert f.write(b"hello") == 5
    with fs.open("a") as f:
        assert f.read(5) == b"hello"
        assert f.read(200) == bytes(95)


def test_write_does_not_grow(fs):
    fs.create("a", 10)
    with fs.open("a") as f:
        assert f.write(b"x" * 50) == 10


def test_listdir_order(fs):
    for name in ("one", "two", "three"):
        fs.create(name)
    assert fs.listdir() == ["one", "two", "three"]


def test_duplicate_create(fs):
    fs.create("a")
    with pytest.raises(FileExistsError):
        fs.create("a")


def test_failed_create_releases_inode_sector(fs):
    fs.create("a")
    probe = fs.free_map.allocate(1)
    fs.free_map.release(probe, 1)
    with pytest.raises(FileExistsError):
        fs.create("a")
    assert fs.free_map.allocate(1) == probe


def test_bad_name(fs):
    with pytest.raises(ValueError):
        fs.create("a-name-that-is-too-long")


def test_no_space(fs):
    with pytest.raises(FileSystemError):
        fs.create("big", 1_000_000)
    assert fs.listdir() == []


def test_open_missing(fs):
    with pytest.raises(FileNotFoundError):
        fs.open("ghost")


def test_remove(fs):
    fs.create("a", 10)
    fs.remove("a")
    assert fs.listdir() == []
    with pytest.raises(FileNotFoundError):
        fs.open("a")
    with pytest.raises(FileNotFoundError):
        fs.remove("a")


def test_root_directory_fills_up(fs):
    for index in range(16):
        fs.create(f"f{index}")
    with pytest.raises(OSError):
        fs.create("extra")
    assert len(fs.listdir()) == 16


def test_persists_across_mounts():
    device = _device()
    with FileSystem(device, format=True) as fs:
        fs.create("keep", 20)
        with fs.open("keep") as f:
            f.write(b"persisted")
    with FileSystem(device) as fs:
        assert fs.listdir() == ["keep"]
        with fs.open("keep") as f:
            assert f.read(9) == b"persisted"


def test_missing_device():
    with pytest.raises(FileSystemError):
        FileSystem(None)


def test_unformatted_device():
    with pytest.raises(FileSystemError):
        FileSystem(_device())


def test_closed_filesystem(fs):
    fs.close()
    with pytest.raises(FileSystemError):
        fs.listdir()