"""Real-time clock: BCD register decoding and conversion to Unix time."""

from __future__ import annotations

from typing import Callable

REG_SEC = 0
"""CMOS register holding the second, 0x00...0x59 in BCD."""
REG_MIN = 2
"""CMOS register holding the minute, 0x00...0x59 in BCD."""
REG_HOUR = 4
"""CMOS register holding the hour, 0x00...0x23 in BCD."""
REG_MDAY = 7
"""CMOS register holding the day of the month, 0x01...0x31 in BCD."""
REG_MON = 8
"""CMOS register holding the month, 0x01...0x12 in BCD."""
REG_YEAR = 9
"""CMOS register holding the year, 0x00...0x99 in BCD."""

_TIME_REGISTERS = (REG_SEC, REG_MIN, REG_HOUR, REG_MDAY, REG_MON, REG_YEAR)

DAYS_PER_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

_DAY = 24 * 60 * 60


def bcd_to_bin(value: int) -> int:
    """Return the integer value of the BCD byte VALUE (0x59 means 59)."""
    if not 0 <= value <= 0xFF:
        raise ValueError(f"not a byte: {value}")
    return (value & 0x0F) + (value >> 4) * 10


def _leap_days_before(year: int) -> int:
    # Division truncating toward zero, so that year 0 counts no leap days.
    numerator = year - 1
    return numerator // 4 if numerator >= 0 else -(-numerator // 4)


def rtc_to_epoch(
    sec: int, minute: int, hour: int, mday: int, mon: int, year: int
) -> int:
    """Convert clock fields to seconds since the Unix epoch.

    YEAR counts from 1900 modulo 100; values below 70 are taken to be
    after 2000.  MON runs from 1 to 12 and MDAY from 1.
    """
    if not 0 <= year <= 99:
        raise ValueError(f"year out of range: {year}")
    if not 1 <= mon <= 12:
        raise ValueError(f"month out of range: {mon}")
    if not 1 <= mday <= 31:
        raise ValueError(f"day of month out of range: {mday}")
    if not (0 <= hour <= 23 and 0 <= minute <= 59 and 0 <= sec <= 59):
        raise ValueError(f"time of day out of range: {hour}:{minute}:{sec}")

    if year < 70:
        year += 100
    year -= 70

    time = (year * 365 + _leap_days_before(year)) * _DAY
    time += sum(DAYS_PER_MONTH[:mon]) * _DAY
    if mon > 2 and year % 4 == 0:
        time += _DAY
    time += (mday - 1) * _DAY
    time += hour * 60 * 60
    time += minute * 60
    time += sec
    return time


def read_time(cmos_read: Callable[[int], int]) -> int:
    """Read the clock through CMOS_READ and return seconds since the epoch.

    CMOS_READ takes a register index and returns its byte.  The fields
    are read again until the second is unchanged from one read to the
    next, in case the first read falls in the middle of an update.
    """
    while True:
        fields = [bcd_to_bin(cmos_read(register)) for register in _TIME_REGISTERS]
        if fields[0] == bcd_to_bin(cmos_read(REG_SEC)):
            break
    return rtc_to_epoch(*fields)