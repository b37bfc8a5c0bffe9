import pytest

from mdu.utility import (
    data2uint16,
    data2uint32,
    data2uint64,
    make_salsa20_cipher,
    uint16_to_bytes,
    uint32_to_bytes,
)

MASTER_KEY = "placeholder" * 4
IV = bytes(range(8))


def test_uint16_layout():
    assert uint16_to_bytes(0x1234) == b"\x12\x34"


def test_uint32_layout():
    assert uint32_to_bytes(0xFFFFFFF2) == b"\xff\xff\xff\xf2"


@pytest.mark.parametrize("value", [0, 1, 0xABCD, 0xFFFF])
def test_uint16_round_trip(value):
    assert data2uint16(uint16_to_bytes(value)) == value


@pytest.mark.parametrize("value", [0, 0x70411AFC, 0x06043200, 0xFFFFFFFF])
def test_uint32_round_trip(value):
    assert data2uint32(list(uint32_to_bytes(value))) == value


def test_uint64_combines_two_words():
    upper, lower = 0x06043200, 0x70411AFC
    data = uint32_to_bytes(upper) + uint32_to_bytes(lower)
    assert data2uint64(data) == upper << 32 | lower


def test_reads_only_leading_bytes():
    assert data2uint16(b"\x12\x34\x56") == 0x1234


def test_short_data_raises():
    with pytest.raises(ValueError):
        data2uint32(b"\x00\x01")


def test_cipher_round_trip():
    plain = bytes(range(64))
    encrypted = make_salsa20_cipher(42, IV, MASTER_KEY).encrypt(plain)
    assert encrypted != plain
    assert make_salsa20_cipher(42, IV, MASTER_KEY).decrypt(encrypted) == plain


def test_cipher_is_deterministic_and_accepts_bytes_key():
    a = make_salsa20_cipher(7, IV, MASTER_KEY).encrypt(bytes(64))
    b = make_salsa20_cipher(7, IV, MASTER_KEY.encode()).encrypt(bytes(64))
    assert a == b


def test_cipher_depends_on_decoder_id():
    a = make_salsa20_cipher(1, IV, MASTER_KEY).encrypt(bytes(64))
    b = make_salsa20_cipher(2, IV, MASTER_KEY).encrypt(bytes(64))
    assert a != b


def test_short_master_key_raises():
    with pytest.raises(ValueError):
        make_salsa20_cipher(1, IV, "token")


def test_wrong_iv_length_raises():
    with pytest.raises(ValueError):
        make_salsa20_cipher(1, b"\x00" * 7, MASTER_KEY)