"""The 8254 programmable interval timer: counter and control values."""

from __future__ import annotations

from dataclasses import dataclass

PIT_HZ = 1193180
"""PIT clock cycles per second."""

PIT_PORT_CONTROL = 0x43
"""Control port."""

_VALID_CHANNELS = (0, 2)
_VALID_MODES = (2, 3)


def pit_port_counter(channel: int) -> int:
    """Return the counter port of CHANNEL."""
    return 0x40 + channel


def pit_counter(frequency: int) -> int:
    """Return the 16-bit counter value producing FREQUENCY periods per second.

    Frequencies below 19 Hz give 0, which the PIT treats as 65536;
    frequencies above PIT_HZ give 2, since 1 is illegal in mode 2.
    """
    if frequency < 19:
        return 0
    if frequency > PIT_HZ:
        return 2
    return (PIT_HZ + frequency // 2) // frequency


def _check(channel: int, mode: int) -> None:
    if channel not in _VALID_CHANNELS:
        raise ValueError(f"PIT channel must be 0 or 2, got {channel}")
    if mode not in _VALID_MODES:
        raise ValueError(f"PIT mode must be 2 or 3, got {mode}")


def pit_control_byte(channel: int, mode: int) -> int:
    """Return the control byte selecting CHANNEL, MODE and a 16-bit load."""
    _check(channel, mode)
    return (channel << 6) | 0x30 | (mode << 1)


@dataclass(frozen=True)
class PitSetting:
    """A channel configuration ready to be loaded into the PIT."""

    channel: int
    mode: int
    count: int
    control: int

    def writes(self) -> list[tuple[int, int]]:
        """Return the (port, byte) writes that load this setting."""
        port = pit_port_counter(self.channel)
        return [
            (PIT_PORT_CONTROL, self.control),
            (port, self.count & 0xFF),
            (port, (self.count >> 8) & 0xFF),
        ]


def configure_channel(channel: int, mode: int, frequency: int) -> PitSetting:
    """Configure CHANNEL (0 or 2) in MODE (2 or 3) at FREQUENCY Hz."""
    _check(channel, mode)
    return PitSetting(
        channel=channel,
        mode=mode,
        count=pit_counter(frequency),
        control=pit_control_byte(channel, mode),
    )