"""Encoding of MDU packets into level/duration symbols for a pulse generator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import NamedTuple

from ..timing import TransferRate

#: Number of preamble bits a transmitter may send, inclusive bounds.
TX_MIN_PREAMBLE_BITS = 14
TX_MAX_PREAMBLE_BITS = 255

#: Number of ackreq bits a transmitter may send (or 0), inclusive bounds.
TX_MIN_ACKREQ_BITS = 10
TX_MAX_ACKREQ_BITS = 255

# One, zero and ackreq bit durations in µs, indexed by transfer rate.
_BIT_DURATIONS = {
    TransferRate.FALLBACK: (1200, 2400, 3600),
    TransferRate.FAST: (10, 20, 60),
    TransferRate.MEDIUM: (20, 40, 60),
    TransferRate.SLOW: (40, 80, 120),
    TransferRate.DEFAULT: (75, 150, 225),
}


class EncodeState(IntFlag):
    """State reported after an encoding step."""

    RESET = 0
    COMPLETE = 1
    MEM_FULL = 2


@dataclass(frozen=True)
class Symbol:
    """One half-period: two durations at a constant output level."""

    duration0: int
    level0: int
    duration1: int
    level1: int

    @property
    def duration(self) -> int:
        """Total duration in µs."""
        return self.duration0 + self.duration1


def _symbol_pair(duration: int) -> tuple[Symbol, Symbol]:
    """Low and high symbol of one bit duration."""
    first, second = duration // 2, (duration + 1) // 2
    return Symbol(first, 0, second, 0), Symbol(first, 1, second, 1)


@dataclass(frozen=True)
class EncoderConfig:
    """Transfer rate, preamble length and number of ackreq bits."""

    transfer_rate: int = TransferRate.FALLBACK
    num_preamble: int = 20
    num_ackreq: int = 10

    def __post_init__(self) -> None:
        if int(self.transfer_rate) not in _BIT_DURATIONS:
            raise ValueError(f"invalid transfer rate: {self.transfer_rate}")
        if not TX_MIN_PREAMBLE_BITS <= self.num_preamble <= TX_MAX_PREAMBLE_BITS:
            raise ValueError(f"invalid number of preamble bits: {self.num_preamble}")
        if self.num_ackreq != 0 and not (
            TX_MIN_ACKREQ_BITS <= self.num_ackreq <= TX_MAX_ACKREQ_BITS
        ):
            raise ValueError(f"invalid number of ackreq bits: {self.num_ackreq}")


class EncodeResult(NamedTuple):
    symbols: list[Symbol]
    state: EncodeState


class MduEncoder:
    """Turns an MDU packet into symbols, a limited amount of space at a time.

    A packet is sent as preamble, then each byte as a zero start bit and
    eight data bits (most significant first), an end bit and the ackreq
    bits. Every symbol toggles the output level, starting low.
    """

    def __init__(self, config: EncoderConfig) -> None:
        self._config = config
        one, zero, ackreq = _BIT_DURATIONS[TransferRate(int(config.transfer_rate))]
        self._one = _symbol_pair(one)
        self._zero = _symbol_pair(zero)
        self._ackreq = _symbol_pair(ackreq)
        self._pending: list[Symbol] | None = None
        self._offset = 0

    @property
    def config(self) -> EncoderConfig:
        return self._config

    def _bits(self, data: bytes):
        yield from [self._one] * self._config.num_preamble
        for byte in data:
            yield self._zero
            for shift in range(7, -1, -1):
                yield self._one if byte >> shift & 1 else self._zero
        yield self._one
        yield from [self._ackreq] * self._config.num_ackreq

    def _symbols(self, data: bytes) -> list[Symbol]:
        return [pair[index % 2] for index, pair in enumerate(self._bits(data))]

    def encode(self, data: bytes, space: int) -> EncodeResult:
        """Encode at most ``space`` further symbols of the packet ``data``.

        The packet is taken on the first call of a transmission; later calls
        continue where the previous one stopped until the packet is complete.
        """
        if space < 0:
            raise ValueError("space must not be negative")
        if self._pending is None:
            data = bytes(data)
            if not data:
                raise ValueError("packet must not be empty")
            self._pending = self._symbols(data)
            self._offset = 0

        end = min(self._offset + space, len(self._pending))
        symbols = self._pending[self._offset : end]
        self._offset = end

        state = EncodeState.RESET
        if self._offset >= len(self._pending):
            state |= EncodeState.COMPLETE
            self.reset()
        if len(symbols) == space:
            state |= EncodeState.MEM_FULL
        return EncodeResult(symbols, state)

    def reset(self) -> None:
        """Drop any partly encoded packet; the next one starts afresh."""
        self._pending = None
        self._offset = 0


def encode_packet(data: bytes, config: EncoderConfig) -> list[Symbol]:
    """All symbols of one packet."""
    encoder = MduEncoder(config)
    result = encoder.encode(data, TX_MAX_PREAMBLE_BITS + TX_MAX_ACKREQ_BITS + 9 * len(bytes(data)) + 1)
    return result.symbols