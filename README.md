# sectorkit

A compact, sector-oriented storage stack in plain Python, together with
software models of a few classic PC devices and some small command-line
programs.

No third-party libraries are needed. Python 3.10 or newer is enough.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## What is inside

- `sectorkit.block`: 512-byte sectors (`BLOCK_SECTOR_SIZE`), the
  `BlockType` enum (`KERNEL`, `FILESYS`, `SCRATCH`, `SWAP`, `RAW`,
  `FOREIGN`), an in-memory driver `MemoryDisk`, and `BlockRegistry`. A
  registry keeps devices in the order they were registered, looks them up
  by name (`by_name`), assigns roles (`set_role`, `get_role`) and prints
  read and write counts for every device that has a role (`print_stats`).
  `Block.read` and `Block.write` raise `BlockError` on an access past the
  end of a device, and `Block.write` also raises it on a `FOREIGN`
  device.
- `sectorkit.partition`: `parse_partition_table` decodes the four entries
  of an MBR sector into `PartitionEntry` objects and raises `ValueError`
  on a bad size or signature. `scan_partitions(registry, block)` follows
  extended partitions, registers every primary or logical partition as a
  device of its own (named after the disk plus a number, for example
  `hda1`) and returns the new devices. `partition_type_name` gives the
  name of a partition type byte.
- `sectorkit.freemap`: `FreeMap`, one bit per sector, which allocates
  runs of consecutive sectors and raises `FreeMapError` when it cannot.
- `sectorkit.inode`: `InodeDisk` (the one-sector on-disk header),
  `Inode` and `InodeTable`, which shares one `Inode` among everyone who
  opens the same sector and frees a removed inode's sectors when its last
  opener closes it.
- `sectorkit.file`: `File`, an open file with a position, `read`,
  `write`, `read_at`, `write_at`, `seek`, `tell`, write denial and use as
  a context manager.
- `sectorkit.directory`: `Directory`, a list of fixed-size entries with
  names of at most 14 bytes (`NAME_MAX`); `lookup`, `add`, `remove`,
  `readdir` and iteration over names.
- `sectorkit.filesys`: `FileSystem`, which formats a device (when asked),
  then creates, opens, lists and removes files in its root directory.
- `sectorkit.intq`: `InterruptQueue`, a thread-safe byte FIFO holding at
  most 63 bytes whose `getc` waits while it is empty and `putc` waits while
  it is full.
- `sectorkit.kbd`: `Keyboard`, which turns keyboard scancodes into
  characters, handling Shift, Ctrl, Alt, Caps Lock and the 0xe0 prefix,
  and calls a callback on Ctrl+Alt+Del. By default it delivers characters
  to an `InterruptQueue`.
- `sectorkit.rtc`: `bcd_to_bin`, `rtc_to_epoch` (clock fields to Unix
  time; two-digit years below 70 count as 20xx) and `read_time`, which
  reads the clock registers through a function you supply.
- `sectorkit.pit`: `pit_counter`, `pit_control_byte` and
  `configure_channel`, which returns a `PitSetting` whose `writes()` lists
  the port writes that would load it.
- `sectorkit.vga`: `TextScreen`, an 80×25 character grid with a cursor
  that handles newline, form feed, backspace, carriage return, tab and
  bell, and scrolls at the bottom.
- `sectorkit.insult` and `sectorkit.tools`: the command-line programs
  described below.

## Using the file system

```python
import io

from sectorkit.block import BlockRegistry, BlockType, MemoryDisk
from sectorkit.filesys import FileSystem

log = io.StringIO()
registry = BlockRegistry(log)
disk = MemoryDisk(4096)
device = registry.register("hda", BlockType.FILESYS, 4096, disk, None)
registry.set_role(BlockType.FILESYS, device)

with FileSystem(device, True) as fs:
    fs.create("hello.txt", 12)
    with fs.open("hello.txt") as f:
        f.write(b"hello, disk!")
        f.seek(0)
        print(f.read(12))
    print(fs.listdir())
    fs.remove("hello.txt")
```

`FileSystem.create` raises `FileExistsError` for a name already present,
`ValueError` for an empty or too long name, `OSError` when the root
directory is full and `FileSystemError` when there is no free space.
`FileSystem.open` and `FileSystem.remove` raise `FileNotFoundError` for a
missing name. The root directory is formatted with room for 16 entries.

## Command-line programs

`sectorkit-insult` prints random insults from a fixed grammar, with seed
4951 and four sentences unless told otherwise:

```
sectorkit-insult
sectorkit-insult -s 42 -n 2
sectorkit-insult -f insults.txt
sectorkit-insult -h
```

`-h` is honoured only as the first argument; it prints the usage text and
exits with status 0. Bad options print a message and the usage text and
exit with status 1.

`sectorkit-tools` runs one of several small utilities, named by its first
argument:

```
sectorkit-tools cat notes.txt
sectorkit-tools cmp a.bin b.bin
sectorkit-tools cp old.txt new.txt
sectorkit-tools echo hello world
sectorkit-tools lineup notes.txt
sectorkit-tools rm old.txt
sectorkit-tools bubsort
sectorkit-tools matmult
```

- `cat` copies files to standard output.
- `cmp` reports the first differing byte of two files, or that they are
  identical.
- `cp` copies a file to a new one; it fails if the destination exists.
- `echo` prints every argument, the word `echo` included, each followed by
  a space.
- `lineup` upper-cases a file in place.
- `rm` deletes files.
- `bubsort` bubble-sorts 128 integers and exits with the smallest (0).
- `matmult` multiplies two 128×128 matrices and exits with the last
  element of the product.

The same utilities are functions in `sectorkit.tools`: `cat(paths, out)`,
`compare_files(path_a, path_b, out)`, `copy_file(source, destination,
out)`, `echo(args, out)`, `lineup(path)`, `remove_files(paths, out)`,
`bubble_sort(values)` and `matmult(dim)`. Each command function returns
its exit status.

## What it does not do

- Storage lives in memory: `MemoryDisk` is the only driver provided, and
  nothing reads or writes a disk image file. Any object with `read(sector)`
  and `write(sector, data)` methods can be registered as a driver instead.
- The file system is flat and fixed-size: there are no subdirectories, and
  files keep the size they were created with, so writes past the end are
  cut short.
- The device modules are models only. They compute values and interpret
  input you give them; none of them touches real hardware, and there is
  no kernel, scheduler, shell or interactive console here.