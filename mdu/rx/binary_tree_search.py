"""Decoder side of the MDU binary tree search."""

from __future__ import annotations

#: Bit position that starts a new search.
RESTART = 255

_LAST_BIT = 62


class BinaryTreeSearch:
    """Answers binary tree search requests for one decoder.

    The 64 bit number searched for is the decoder ID in the upper and the
    serial number in the lower 32 bits. Positions are interpreted as:

    * ``0..62``: acknowledge if the bit is set
    * ``64..126``: acknowledge if the bit is clear
    * ``128..190``: ignore all further requests if the bit is set
    * ``192..254``: ignore all further requests if the bit is clear
    * ``255``: start a new search (always acknowledged)
    """

    __slots__ = ("_ignore",)

    def __init__(self) -> None:
        self._ignore = True

    def __call__(self, serial_number: int, decoder_id: int, pos: int) -> bool:
        """Return whether an ackbit is sent in channel 2 for ``pos``."""
        if pos == RESTART:
            self._ignore = False
            return True
        if self._ignore:
            return False

        number = (decoder_id & 0xFFFFFFFF) << 32 | (serial_number & 0xFFFFFFFF)

        def bit(offset: int) -> bool:
            return bool(number >> (pos - offset) & 1)

        if pos <= _LAST_BIT:
            return bit(0)
        if 64 <= pos <= 64 + _LAST_BIT:
            return not bit(64)
        if 128 <= pos <= 128 + _LAST_BIT:
            self._ignore = bit(128)
        elif 192 <= pos <= 192 + _LAST_BIT:
            self._ignore = not bit(192)
        return False