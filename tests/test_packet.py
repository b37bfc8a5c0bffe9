import pytest

from mdu.command import Command
from mdu.crc import crc8, crc32
from mdu.packet import (
    MAX_PACKET_SIZE,
    make_binary_tree_search_packet,
    make_busy_packet,
    make_config_transfer_rate_packet,
    make_cv_read_packet,
    make_cv_write_packet,
    make_ping_packet,
    make_short_ping_packet,
    make_zsu_erase_packet,
    make_zsu_salsa20_iv_packet,
    make_zsu_update_packet,
    packet2command,
)
from mdu.timing import TransferRate
from mdu.utility import data2uint16, data2uint32

SERIAL_NUMBER = 0x70411AFC
DECODER_ID = 0x06043200

CRC8_PACKETS = [
    (make_short_ping_packet(0x06), Command.PING),
    (make_ping_packet(SERIAL_NUMBER, DECODER_ID), Command.PING),
    (make_config_transfer_rate_packet(TransferRate.FAST), Command.CONFIG_TRANSFER_RATE),
    (make_binary_tree_search_packet(255), Command.BINARY_TREE_SEARCH),
    (make_cv_read_packet(8, 3), Command.CV_READ),
    (make_cv_write_packet(8, 0xFE), Command.CV_WRITE),
    (make_busy_packet(), Command.BUSY),
    (make_zsu_salsa20_iv_packet(bytes(range(8))), Command.ZSU_SALSA20_IV),
    (make_zsu_erase_packet(0, 0x1000), Command.ZSU_ERASE),
]


@pytest.mark.parametrize("packet, command", CRC8_PACKETS)
def test_crc8_packets_check_to_zero(packet, command):
    assert packet2command(packet) is command
    assert crc8(packet) == 0


def test_busy_packet_wire_bytes():
    packet = make_busy_packet()
    assert packet[:4] == b"\xff\xff\xff\xf2"
    assert len(packet) == 5


def test_short_ping_carries_decoder_byte():
    packet = make_short_ping_packet(0x06)
    assert packet[4] == 0x06
    assert len(packet) == 6


def test_long_ping_carries_ids():
    packet = make_ping_packet(SERIAL_NUMBER, DECODER_ID)
    assert data2uint32(packet[4:]) == SERIAL_NUMBER
    assert data2uint32(packet[8:]) == DECODER_ID


def test_config_transfer_rate_byte():
    assert make_config_transfer_rate_packet(TransferRate.DEFAULT)[4] == TransferRate.DEFAULT


def test_cv_read_layout():
    packet = make_cv_read_packet(105, 7)
    assert data2uint16(packet[4:]) == 105
    assert packet[6] == 7


def test_zsu_erase_addresses():
    packet = make_zsu_erase_packet(0x100, 0x2000)
    assert data2uint32(packet[4:]) == 0x100
    assert data2uint32(packet[8:]) == 0x2000


def test_zsu_update_packet_layout_and_crc32():
    data = bytes(range(64))
    packet = make_zsu_update_packet(42, data)
    assert packet2command(packet) is Command.ZSU_UPDATE
    assert data2uint32(packet[4:]) == 42
    assert packet[8:72] == data
    assert crc32(packet) == 0
    assert len(packet) <= MAX_PACKET_SIZE


def test_zsu_update_requires_64_bytes():
    with pytest.raises(ValueError):
        make_zsu_update_packet(0, bytes(63))


def test_salsa20_iv_requires_8_bytes():
    with pytest.raises(ValueError):
        make_zsu_salsa20_iv_packet(bytes(9))


def test_unknown_command_is_returned_as_int():
    assert packet2command(b"\x12\x34\x56\x78\x00") == 0x12345678


def test_too_short_packet_raises():
    with pytest.raises(ValueError):
        packet2command(b"\xff\xff")