"""Detection of the CV verify sequences that enter ZPP or ZSU update mode."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

_CV8 = 8 - 1
_CV105 = 105 - 1
_CV106 = 106 - 1
_ZPP_MARKER = (_CV8, 0xFE)
_ZSU_MARKER = (_CV8, 0xFF)
_SEQUENCE_LENGTH = 9

_ZPP_SEQUENCE = ((_CV105, 0xAA), (_CV106, 0x55), (_CV105, 0x55), (_CV106, 0xAA))
_ZERO_SEQUENCE = ((_CV105, 0x00), (_CV106, 0x00), (_CV105, 0x00), (_CV106, 0x00))


def _word_sequence(word: int) -> tuple[tuple[int, int], ...]:
    high, mid_high, mid_low, low = (word & 0xFFFFFFFF).to_bytes(4, "big")
    return ((_CV105, high), (_CV106, mid_high), (_CV105, mid_low), (_CV106, low))


@dataclass(frozen=True)
class EntryConfig:
    """Identity of the decoder and the hooks to run on a matching sequence."""

    serial_number: int = 0
    decoder_id: int = 0
    zpp_entry: Callable[[], object] | None = None
    zsu_entry: Callable[[], object] | None = None


class EntryPoint:
    """Watches CV verify commands for the ZPP and ZSU entry sequences."""

    def __init__(self, config: EntryConfig) -> None:
        self._config = config
        self._sn_sequence = _word_sequence(config.serial_number)
        self._id_sequence = _word_sequence(config.decoder_id)
        self._history: deque[tuple[int, int]] = deque(maxlen=_SEQUENCE_LENGTH)

    def verify(self, cv_addr: int, byte: int) -> None:
        """Feed one CV verify (0-based CV address and value)."""
        if cv_addr not in (_CV8, _CV105, _CV106):
            self._history.clear()
            return
        entry = (cv_addr, byte & 0xFF)
        if self._history and self._history[-1] == entry:
            return

        self._history.append(entry)
        items = tuple(self._history)
        n = len(items)
        first_half = items[1:]
        second_half = items[5:]

        def second_half_matches() -> bool:
            return second_half in (self._sn_sequence[: n - 5], _ZERO_SEQUENCE[: n - 5])

        if items[0] == _ZPP_MARKER:
            if (n <= 5 and first_half == _ZPP_SEQUENCE[: n - 1]) or (
                n > 5 and second_half_matches()
            ):
                if n == _SEQUENCE_LENGTH:
                    self._enter(self._config.zpp_entry)
                return
        elif items[0] == _ZSU_MARKER:
            if (
                n <= 5
                and first_half in (self._id_sequence[: n - 1], _ZERO_SEQUENCE[: n - 1])
            ) or (n > 5 and second_half_matches()):
                if n == _SEQUENCE_LENGTH:
                    self._enter(self._config.zsu_entry)
                return

        self._history.clear()

    @staticmethod
    def _enter(hook: Callable[[], object] | None) -> None:
        if hook is not None:
            hook()