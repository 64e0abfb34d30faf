import pytest

from sectorkit.pit import (
    PIT_HZ,
    PIT_PORT_CONTROL,
    configure_channel,
    pit_control_byte,
    pit_counter,
    pit_port_counter,
)


@pytest.mark.parametrize("frequency", [-5, 0, 1, 18])
def test_low_frequency_gives_zero(frequency):
    assert pit_counter(frequency) == 0


@pytest.mark.parametrize("frequency", [PIT_HZ + 1, PIT_HZ * 3])
def test_high_frequency_gives_two(frequency):
    assert pit_counter(frequency) == 2


def test_frequency_equal_to_clock():
    assert pit_counter(PIT_HZ) == 1


@pytest.mark.parametrize("frequency", [19, 20, 100, 440, 1000, 20000, 596590])
def test_counter_is_rounded_quotient(frequency):
    count = pit_counter(frequency)
    assert 0 < count <= 0xFFFF
    assert abs(count * frequency - PIT_HZ) <= frequency // 2 + 1


def test_control_bytes():
    assert pit_control_byte(0, 2) == 0x34
    assert pit_control_byte(2, 3) == 0xB6


@pytest.mark.parametrize("channel,mode", [(1, 2), (3, 3), (0, 1), (2, 4)])
def test_invalid_channel_or_mode(channel, mode):
    with pytest.raises(ValueError):
        pit_control_byte(channel, mode)
    with pytest.raises(ValueError):
        configure_channel(channel, mode, 100)


def test_configure_channel_writes_count_low_then_high():
    setting = configure_channel(2, 3, 440)
    writes = setting.writes()
    assert writes[0] == (PIT_PORT_CONTROL, pit_control_byte(2, 3))
    assert writes[1][0] == writes[2][0] == pit_port_counter(2)
    assert writes[1][1] | (writes[2][1] << 8) == setting.count
    assert setting.count == pit_counter(440)


def test_counter_ports():
    assert pit_port_counter(0) == 0x40
    assert pit_port_counter(2) == 0x42