"""Big-endian integer helpers and the decoder specific Salsa20 cipher."""

from __future__ import annotations

from collections.abc import Sequence

from Crypto.Cipher import Salsa20


def _take(data: Sequence[int], count: int) -> bytes:
    if len(data) < count:
        raise ValueError(f"need {count} bytes, got {len(data)}")
    return bytes(data[:count])


def data2uint16(data: Sequence[int]) -> int:
    """Read a big-endian 16 bit integer from the start of ``data``."""
    return int.from_bytes(_take(data, 2), "big")


def data2uint32(data: Sequence[int]) -> int:
    """Read a big-endian 32 bit integer from the start of ``data``."""
    return int.from_bytes(_take(data, 4), "big")


def data2uint64(data: Sequence[int]) -> int:
    """Read a big-endian 64 bit integer from the start of ``data``."""
    return int.from_bytes(_take(data, 8), "big")


def uint16_to_bytes(hword: int) -> bytes:
    """Big-endian bytes of the low 16 bits of ``hword``."""
    return (hword & 0xFFFF).to_bytes(2, "big")


def uint32_to_bytes(word: int) -> bytes:
    """Big-endian bytes of the low 32 bits of ``word``."""
    return (word & 0xFFFFFFFF).to_bytes(4, "big")


def make_salsa20_cipher(decoder_id: int, iv: bytes, master_key: bytes | str):
    """Salsa20 cipher keyed for one decoder.

    The decoder key is the master-key encryption of the little-endian
    decoder ID repeated to 32 bytes, using the same IV.
    """
    if isinstance(master_key, str):
        master_key = master_key.encode("ascii")
    iv = bytes(iv)
    if len(iv) != 8:
        raise ValueError("initialization vector must be 8 bytes")
    if len(master_key) < 32:
        raise ValueError("master key must be at least 32 bytes")
    plain = (decoder_id & 0xFFFFFFFF).to_bytes(4, "little") * 8
    crypt_key = Salsa20.new(key=bytes(master_key[:32]), nonce=iv).encrypt(plain)
    return Salsa20.new(key=crypt_key, nonce=iv)