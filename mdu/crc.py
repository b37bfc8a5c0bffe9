"""Checksums used on the wire: Dallas/Maxim CRC8 and the MDU "CRC32"."""

from __future__ import annotations

from collections.abc import Iterable

_CRC8_TERMS = (0x5E, 0xBC, 0x61, 0xC2, 0x9D, 0x23, 0x46, 0x8C)
_CRC32_POLY = 0x04C11DB7
_MASK32 = 0xFFFFFFFF


def _as_bytes(data: int | Iterable[int]) -> Iterable[int]:
    if isinstance(data, int):
        if not 0 <= data <= 0xFF:
            raise ValueError(f"byte out of range: {data}")
        return (data,)
    return data


class Crc8:
    """Dallas/Maxim CRC8 with polynomial representation 0x31."""

    __slots__ = ("_crc",)

    def __init__(self) -> None:
        self._crc = 0

    def update(self, data: int | Iterable[int]) -> None:
        """Feed a single byte or a sequence of bytes."""
        for byte in _as_bytes(data):
            crc = self._crc ^ byte
            self._crc = 0
            for bit, term in enumerate(_CRC8_TERMS):
                if crc >> bit & 1:
                    self._crc ^= term

    def reset(self) -> None:
        self._crc = 0

    def value(self) -> int:
        return self._crc

    def __int__(self) -> int:
        return self.value()


class Crc32:
    """The MDU "CRC32": a shift register augmented by four zero bytes."""

    __slots__ = ("_crc",)

    def __init__(self) -> None:
        self._crc = _MASK32

    @staticmethod
    def _advance(crc: int, data: Iterable[int]) -> int:
        for byte in data:
            for _ in range(8):
                carry = crc & 0x80000000
                crc = ((crc << 1) & _MASK32) | (byte >> 7 & 1)
                if carry:
                    crc ^= _CRC32_POLY
                byte = (byte << 1) & 0xFF
        return crc

    def update(self, data: int | Iterable[int]) -> None:
        """Feed a single byte or a sequence of bytes."""
        self._crc = self._advance(self._crc, _as_bytes(data))

    def reset(self) -> None:
        self._crc = _MASK32

    def value(self) -> int:
        """Checksum of everything fed so far; the running state is kept."""
        return self._advance(self._crc, bytes(4))

    def __int__(self) -> int:
        return self.value()


def crc8(data: Iterable[int]) -> int:
    """CRC8 (Dallas/Maxim) of ``data``."""
    crc = Crc8()
    crc.update(data)
    return crc.value()


def crc32(data: Iterable[int]) -> int:
    """MDU "CRC32" of ``data``."""
    crc = Crc32()
    crc.update(data)
    return crc.value()