import pytest

from mdu.rx.entry_point import EntryConfig, EntryPoint

SERIAL_NUMBER = 0x12345678
DECODER_ID = 0x87654321


def _bytes(word):
    return [(word >> shift) & 0xFF for shift in (24, 16, 8, 0)]


def _halves(word):
    b = _bytes(word)
    return [(104, b[0]), (105, b[1]), (104, b[2]), (105, b[3])]


ZERO = [(104, 0), (105, 0), (104, 0), (105, 0)]
ZPP_FIRST = [(104, 0xAA), (105, 0x55), (104, 0x55), (105, 0xAA)]


@pytest.fixture
def recorder():
    calls = []
    point = EntryPoint(
        EntryConfig(
            serial_number=SERIAL_NUMBER,
            decoder_id=DECODER_ID,
            zpp_entry=lambda: calls.append("zpp"),
            zsu_entry=lambda: calls.append("zsu"),
        )
    )
    return point, calls


def _verify(point, sequence):
    for cv_addr, byte in sequence:
        point.verify(cv_addr, byte)


def test_zpp_entry_all(recorder):
    point, calls = recorder
    _verify(point, [(7, 0xFE)] + ZPP_FIRST + ZERO)
    assert calls == ["zpp"]


def test_zpp_entry_specific_sn(recorder):
    point, calls = recorder
    _verify(point, [(7, 0xFE)] + ZPP_FIRST + _halves(SERIAL_NUMBER))
    assert calls == ["zpp"]


def test_zsu_entry_specific_id(recorder):
    point, calls = recorder
    _verify(point, [(7, 0xFF)] + _halves(DECODER_ID) + ZERO)
    assert calls == ["zsu"]


def test_zsu_entry_specific_sn(recorder):
    point, calls = recorder
    _verify(point, [(7, 0xFF)] + ZERO + _halves(SERIAL_NUMBER))
    assert calls == ["zsu"]


def test_zsu_entry_all(recorder):
    point, calls = recorder
    _verify(point, [(7, 0xFF)] + ZERO + ZERO)
    assert calls == ["zsu"]


def test_zsu_missing_reset(recorder):
    point, calls = recorder
    _verify(point, _halves(DECODER_ID) + ZERO)
    assert calls == []


def test_zsu_missing_verify(recorder):
    point, calls = recorder
    halves = _halves(DECODER_ID)
    _verify(point, [(7, 0xFF), halves[0], halves[2], halves[3]] + ZERO)
    assert calls == []


def test_zsu_wrong_index(recorder):
    point, calls = recorder
    halves = _halves(DECODER_ID)
    wrong = (106, halves[1][1])
    _verify(point, [(7, 0xFF), halves[0], wrong, halves[2], halves[3]] + ZERO)
    assert calls == []


def test_zsu_wrong_decoder_id(recorder):
    point, calls = recorder
    halves = _halves(DECODER_ID)
    wrong = (104, (42 & 0xFF00) >> 8)
    _verify(point, [(7, 0xFF), halves[0], halves[1], wrong, halves[3]] + ZERO)
    assert calls == []


def test_zsu_entry_after_reset(recorder):
    point, calls = recorder
    halves = _halves(DECODER_ID)
    broken = [(7, 0xFF), halves[0], (106, halves[1][1]), halves[2], halves[3]] + ZERO
    good = [(7, 0xFF)] + halves + ZERO
    _verify(point, broken + good)
    assert calls == ["zsu"]


def test_zpp_wrong_first_half(recorder):
    point, calls = recorder
    _verify(point, [(7, 0xFE)] + ZERO + ZERO)
    assert calls == []


def test_repetitions_are_ignored(recorder):
    point, calls = recorder
    sequence = [(7, 0xFF)] + ZERO + ZERO
    doubled = [item for entry in sequence for item in (entry, entry)]
    _verify(point, doubled)
    assert calls == ["zsu"]


def test_missing_hook_is_skipped():
    calls = []
    point = EntryPoint(
        EntryConfig(
            serial_number=SERIAL_NUMBER,
            decoder_id=DECODER_ID,
            zpp_entry=lambda: calls.append("zpp"),
        )
    )
    _verify(point, [(7, 0xFF)] + ZERO + ZERO)
    _verify(point, [(7, 0xFE)] + ZPP_FIRST + ZERO)
    assert calls == ["zpp"]