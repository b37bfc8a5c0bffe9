"""Builders for MDU packets as sent by a command station."""

from __future__ import annotations

from collections.abc import Sequence

from .command import Command
from .crc import crc8, crc32
from .timing import TransferRate
from .utility import data2uint32, uint16_to_bytes, uint32_to_bytes

#: Largest possible packet: command, address, 256 data bytes and a CRC32.
MAX_PACKET_SIZE = 4 + 4 + 256 + 4


def packet2command(packet: Sequence[int]) -> Command | int:
    """Command of a packet; unknown codes are returned as plain integers."""
    code = data2uint32(packet)
    try:
        return Command(code)
    except ValueError:
        return code


def _with_crc8(body: bytes) -> bytes:
    return body + bytes([crc8(body)])


def _with_crc32(body: bytes) -> bytes:
    return body + uint32_to_bytes(crc32(body))


def make_short_ping_packet(decoder_id: int) -> bytes:
    """Ping addressed by the top byte of a decoder ID (0 pings all)."""
    return _with_crc8(uint32_to_bytes(Command.PING) + bytes([decoder_id]))


def make_ping_packet(serial_number: int, decoder_id: int) -> bytes:
    """Ping addressed by serial number and decoder ID (0 matches any)."""
    return _with_crc8(
        uint32_to_bytes(Command.PING)
        + uint32_to_bytes(serial_number)
        + uint32_to_bytes(decoder_id)
    )


def make_config_transfer_rate_packet(transfer_rate: TransferRate | int) -> bytes:
    return _with_crc8(
        uint32_to_bytes(Command.CONFIG_TRANSFER_RATE) + bytes([int(transfer_rate)])
    )


def make_binary_tree_search_packet(byte: int) -> bytes:
    return _with_crc8(uint32_to_bytes(Command.BINARY_TREE_SEARCH) + bytes([byte]))


def make_cv_read_packet(cv_number: int, pos: int) -> bytes:
    return _with_crc8(
        uint32_to_bytes(Command.CV_READ) + uint16_to_bytes(cv_number) + bytes([pos])
    )


def make_cv_write_packet(cv_number: int, byte: int) -> bytes:
    return _with_crc8(
        uint32_to_bytes(Command.CV_WRITE) + uint16_to_bytes(cv_number) + bytes([byte])
    )


def make_busy_packet() -> bytes:
    return _with_crc8(uint32_to_bytes(Command.BUSY))


def make_zsu_salsa20_iv_packet(iv: bytes) -> bytes:
    iv = bytes(iv)
    if len(iv) != 8:
        raise ValueError("initialization vector must be 8 bytes")
    return _with_crc8(uint32_to_bytes(Command.ZSU_SALSA20_IV) + iv)


def make_zsu_erase_packet(begin_addr: int, end_addr: int) -> bytes:
    return _with_crc8(
        uint32_to_bytes(Command.ZSU_ERASE)
        + uint32_to_bytes(begin_addr)
        + uint32_to_bytes(end_addr)
    )


def make_zsu_update_packet(addr: int, data: bytes) -> bytes:
    """ZSU update of exactly 64 (encrypted) bytes, protected by CRC32."""
    data = bytes(data)
    if len(data) != 64:
        raise ValueError("ZSU update carries exactly 64 bytes")
    return _with_crc32(uint32_to_bytes(Command.ZSU_UPDATE) + uint32_to_bytes(addr) + data)