"""Small file utilities: cat, cmp, cp, echo, lineup, rm and two workloads."""

from __future__ import annotations

import os
import sys
from typing import BinaryIO, Iterable, Sequence

_CHUNK = 1024
SORT_SIZE = 128
"""Number of integers the bubsort workload sorts."""
MATRIX_DIM = 128
"""Dimension of the matrices the matmult workload multiplies."""

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def _out(out: BinaryIO | None) -> BinaryIO:
    return out if out is not None else sys.stdout.buffer


def _say(out: BinaryIO, text: str) -> None:
    out.write(text.encode())


def cat(paths: Iterable[str], out: BinaryIO | None = None) -> int:
    """Copy each file in PATHS to OUT; return the exit status."""
    out = _out(out)
    success = True
    for path in paths:
        try:
            handle = open(path, "rb")
        except OSError:
            _say(out, f"{path}: open failed\n")
            success = False
            continue
        with handle:
            while chunk := handle.read(_CHUNK):
                out.write(chunk)
    return EXIT_SUCCESS if success else EXIT_FAILURE


def compare_files(path_a: str, path_b: str, out: BinaryIO | None = None) -> int:
    """Compare two files byte by byte, reporting the first difference."""
    out = _out(out)
    try:
        file_a = open(path_a, "rb")
    except OSError:
        _say(out, f"{path_a}: open failed\n")
        return EXIT_FAILURE
    with file_a:
        try:
            file_b = open(path_b, "rb")
        except OSError:
            _say(out, f"{path_b}: open failed\n")
            return EXIT_FAILURE
        with file_b:
            while True:
                pos = file_a.tell()
                chunk_a = file_a.read(_CHUNK)
                chunk_b = file_b.read(_CHUNK)
                common = min(len(chunk_a), len(chunk_b))
                if common == 0:
                    break
                mismatch = next(
                    (
                        (i, a, b)
                        for i, (a, b) in enumerate(zip(chunk_a, chunk_b))
                        if a != b
                    ),
                    None,
                )
                if mismatch is not None:
                    i, a, b = mismatch
                    out.write(
                        f"Byte {pos + i} is {a:02x} ('".encode()
                        + bytes([a])
                        + f"') in {path_a} but {b:02x} ('".encode()
                        + bytes([b])
                        + f"') in {path_b}\n".encode()
                    )
                    return EXIT_FAILURE
                if common < len(chunk_b):
                    _say(out, f"{path_a} is shorter than {path_b}\n")
                elif common < len(chunk_a):
                    _say(out, f"{path_b} is shorter than {path_a}\n")
    _say(out, f"{path_a} and {path_b} are identical\n")
    return EXIT_SUCCESS


def copy_file(source: str, destination: str, out: BinaryIO | None = None) -> int:
    """Copy SOURCE to a new file DESTINATION, which must not exist yet."""
    out = _out(out)
    try:
        src = open(source, "rb")
    except OSError:
        _say(out, f"{source}: open failed\n")
        return EXIT_FAILURE
    with src:
        try:
            dst = open(destination, "xb")
        except OSError:
            _say(out, f"{destination}: create failed\n")
            return EXIT_FAILURE
        with dst:
            while chunk := src.read(_CHUNK):
                if dst.write(chunk) != len(chunk):
                    _say(out, f"{destination}: write failed\n")
                    return EXIT_FAILURE
    return EXIT_SUCCESS


def echo(args: Iterable[str], out: BinaryIO | None = None) -> int:
    """Print each of ARGS followed by a space, then a newline."""
    out = _out(out)
    _say(out, "".join(f"{arg} " for arg in args) + "\n")
    return EXIT_SUCCESS


def lineup(path: str) -> int:
    """Convert the file at PATH to upper case in place.

    Returns 2 if the file cannot be opened, otherwise 0.
    """
    try:
        handle = open(path, "r+b")
    except OSError:
        return 2
    with handle:
        while chunk := handle.read(_CHUNK):
            handle.seek(handle.tell() - len(chunk))
            if handle.write(chunk.upper()) != len(chunk):
                print("write failed")
    return EXIT_SUCCESS


def remove_files(paths: Iterable[str], out: BinaryIO | None = None) -> int:
    """Delete each file in PATHS; return the exit status."""
    out = _out(out)
    success = True
    for path in paths:
        try:
            os.remove(path)
        except OSError:
            _say(out, f"{path}: remove failed\n")
            success = False
    return EXIT_SUCCESS if success else EXIT_FAILURE


def bubble_sort(values: Iterable[int]) -> list[int]:
    """Return VALUES sorted in ascending order by bubble sort."""
    items = list(values)
    for done in range(len(items) - 1):
        for j in range(len(items) - 1 - done):
            if items[j] > items[j + 1]:
                items[j], items[j + 1] = items[j + 1], items[j]
    return items


def matmult(dim: int = MATRIX_DIM) -> list[list[int]]:
    """Multiply A (A[i][j] = i) by B (B[i][j] = j), both DIM by DIM."""
    if dim < 0:
        raise ValueError("dimension must not be negative")
    a = [[i] * dim for i in range(dim)]
    b = [list(range(dim)) for _ in range(dim)]
    columns = list(zip(*b))
    return [
        [sum(x * y for x, y in zip(row, column)) for column in columns]
        for row in a
    ]


_TOOLS = ("cat", "cmp", "cp", "echo", "lineup", "rm", "bubsort", "matmult")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the tool named by the first argument; return its exit status."""
    if argv is None:
        argv = sys.argv[1:]
    out = sys.stdout.buffer
    if not argv or argv[0] not in _TOOLS:
        _say(out, f"usage: TOOL [ARG]...\ntools: {', '.join(_TOOLS)}\n")
        return EXIT_FAILURE
    tool, args = argv[0], list(argv[1:])

    if tool == "cat":
        return cat(args, out)
    if tool == "cmp":
        if len(args) != 2:
            _say(out, "usage: cmp A B\n")
            return EXIT_FAILURE
        return compare_files(args[0], args[1], out)
    if tool == "cp":
        if len(args) != 2:
            _say(out, "usage: cp OLD NEW\n")
            return EXIT_FAILURE
        return copy_file(args[0], args[1], out)
    if tool == "echo":
        return echo(argv, out)
    if tool == "lineup":
        if len(args) != 1:
            return EXIT_FAILURE
        return lineup(args[0])
    if tool == "rm":
        return remove_files(args, out)
    if tool == "bubsort":
        result = bubble_sort(range(SORT_SIZE - 1, -1, -1))
        _say(out, f"sort exiting with code {result[0]}\n")
        return result[0]
    return matmult(MATRIX_DIM)[-1][-1]