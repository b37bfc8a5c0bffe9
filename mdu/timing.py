"""Transfer rates, bit timings and time-to-bit classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class TransferRate(IntEnum):
    """Supported transfer rates."""

    FALLBACK = 0
    FAST = 1
    MEDIUM = 2
    SLOW = 3
    DEFAULT = 4

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, int):
            return NotImplemented
        if self is TransferRate.FALLBACK:
            return False
        return int(self) < int(other)


class Bit(IntEnum):
    """Classification of a received half-period."""

    ZERO = 0
    ONE = 1
    ACKREQ = 2
    INVALID = 3


@dataclass(frozen=True)
class Timing:
    """Bit timings in µs with closed-interval lower and upper bounds."""

    one_min: int = 0
    one: int = 0
    one_max: int = 0
    zero_min: int = 0
    zero: int = 0
    zero_max: int = 0
    ackreq_min: int = 0
    ackreq: int = 0
    ackreq_max: int = 0
    ack: int = 0


def make_timing(one: int, zero: int, ackreq: int, ack: int, tolerance: float) -> Timing:
    """Build a timing whose bounds lie ``tolerance`` around each nominal value."""

    def bounds(nominal: int) -> tuple[int, int]:
        return int(nominal * (1.0 - tolerance)), int(nominal * (1.0 + tolerance))

    one_min, one_max = bounds(one)
    zero_min, zero_max = bounds(zero)
    ackreq_min, ackreq_max = bounds(ackreq)
    return Timing(
        one_min=one_min,
        one=one,
        one_max=one_max,
        zero_min=zero_min,
        zero=zero,
        zero_max=zero_max,
        ackreq_min=ackreq_min,
        ackreq=ackreq,
        ackreq_max=ackreq_max,
        ack=ack,
    )


#: Timings indexed by transfer rate.
TIMINGS: tuple[Timing, ...] = (
    make_timing(1200, 2400, 3600, 100, 0.1),
    make_timing(10, 20, 60, 40, 0.3),
    make_timing(20, 40, 60, 40, 0.2),
    make_timing(40, 80, 120, 80, 0.2),
    make_timing(75, 150, 225, 100, 0.1),
)

FALLBACK_TIMING = TIMINGS[TransferRate.FALLBACK]


def is_fallback_one(time: int) -> bool:
    return FALLBACK_TIMING.one_min <= time <= FALLBACK_TIMING.one_max


def is_one(time: int, transfer_rate_index: int) -> bool:
    timing = TIMINGS[transfer_rate_index]
    return timing.one_min <= time <= timing.one_max or is_fallback_one(time)


def is_fallback_zero(time: int) -> bool:
    return FALLBACK_TIMING.zero_min <= time <= FALLBACK_TIMING.zero_max


def is_zero(time: int, transfer_rate_index: int) -> bool:
    timing = TIMINGS[transfer_rate_index]
    return timing.zero_min <= time <= timing.zero_max or is_fallback_zero(time)


def is_fallback_ackreq(time: int) -> bool:
    return FALLBACK_TIMING.ackreq_min <= time <= FALLBACK_TIMING.ackreq_max


def is_ackreq(time: int, transfer_rate_index: int) -> bool:
    timing = TIMINGS[transfer_rate_index]
    return timing.ackreq_min <= time <= timing.ackreq_max or is_fallback_ackreq(time)


def time2bit(time: int, transfer_rate_index: int) -> Bit:
    """Classify a time in µs at the given transfer rate."""
    if is_zero(time, transfer_rate_index):
        return Bit.ZERO
    if is_one(time, transfer_rate_index):
        return Bit.ONE
    if is_ackreq(time, transfer_rate_index):
        return Bit.ACKREQ
    return Bit.INVALID