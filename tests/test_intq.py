import threading
import time

import pytest

from sectorkit.intq import INTQ_BUFSIZE, InterruptQueue


def test_new_queue_is_empty():
    q = InterruptQueue()
    assert q.is_empty()
    assert not q.is_full()


def test_fifo_order():
    q = InterruptQueue()
    for byte in (1, 2, 3):
        q.putc(byte)
    assert [q.getc(), q.getc(), q.getc()] == [1, 2, 3]
    assert q.is_empty()


def test_full_after_bufsize_minus_one():
    q = InterruptQueue()
    for byte in range(INTQ_BUFSIZE - 1):
        q.putc(byte)
    assert q.is_full()
    assert len(q) == INTQ_BUFSIZE - 1
    q.getc()
    assert not q.is_full()


@pytest.mark.parametrize("byte", [-1, 256])
def test_byte_range(byte):
    with pytest.raises(ValueError):
        InterruptQueue().putc(byte)


def test_getc_waits_for_byte():
    q = InterruptQueue()

    def _late_writer():
        time.sleep(0.05)
        q.putc(42)

    writer = threading.Thread(target=_late_writer)
    writer.start()
    assert q.getc() == 42
    writer.join(timeout=5)
    assert q.is_empty()


def test_putc_waits_for_room():
    q = InterruptQueue()
    for byte in range(q.capacity):
        q.putc(byte)
    writer = threading.Thread(target=lambda: q.putc(99))
    writer.start()
    assert q.getc() == 0
    writer.join(timeout=5)
    drained = [q.getc() for _ in range(q.capacity)]
    assert drained[-1] == 99
    assert q.is_empty()