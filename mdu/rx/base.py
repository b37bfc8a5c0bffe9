"""Receiving side of the MDU protocol: bit decoding, packet queue, core commands."""

from __future__ import annotations

import abc
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass

from ..command import Command
from ..crc import Crc8, Crc32
from ..packet import MAX_PACKET_SIZE, packet2command
from ..timing import (
    FALLBACK_TIMING,
    TIMINGS,
    Bit,
    TransferRate,
    is_fallback_ackreq,
    time2bit,
)
from ..utility import data2uint16, data2uint32
from .binary_tree_search import BinaryTreeSearch

#: Minimal number of preamble bits a receiver accepts.
RX_MIN_PREAMBLE_BITS = 10

_QUEUE_SIZE = 2
_MIXIN_HOOK = "_execute_mixin"
_CRC32_COMMANDS = (Command.ZSU_UPDATE, Command.ZPP_UPDATE)


@dataclass(frozen=True)
class ReceiverConfig:
    """Identity and fastest supported transfer rate of a decoder."""

    serial_number: int = 0
    decoder_id: int = 0
    transfer_rate: TransferRate = TransferRate.DEFAULT


class Receiver(abc.ABC):
    """Decodes MDU packets from measured half-period times and executes them.

    Subclasses provide the hardware hooks :meth:`ackbit`, :meth:`read_cv`
    and :meth:`write_cv`. Mixins placed before this class contribute further
    commands by defining ``_execute_mixin(self, command, packet, decoder_id)``
    in their own class body; it returns whether to acknowledge in channel 2.
    """

    def __init__(self, config: ReceiverConfig | None = None) -> None:
        self._config = config if config is not None else ReceiverConfig()
        self._state = self._on_preamble
        self._bit_count = 0
        self._ackreqbit_count = 0
        self._byte = 0
        self._crc8 = Crc8()
        self._crc32 = Crc32()
        self._packets: deque[bytes] = deque()
        self._current = bytearray()
        self._transfer_rate_index = int(TransferRate.DEFAULT)
        self._binary_tree_search = BinaryTreeSearch()
        self._selected = True
        self._active = False
        self._nack = False
        self._ack = False

    # Hooks -----------------------------------------------------------------

    @abc.abstractmethod
    def ackbit(self, us: int) -> None:
        """Generate a current pulse of ``us`` microseconds."""

    @abc.abstractmethod
    def read_cv(self, cv_addr: int, pos: int) -> bool:
        """Return whether bit ``pos`` of the CV at ``cv_addr`` is set."""

    @abc.abstractmethod
    def write_cv(self, cv_addr: int, byte: int) -> bool:
        """Write ``byte`` to the CV at ``cv_addr``; return success."""

    # Public interface ------------------------------------------------------

    def receive(self, time: int) -> None:
        """Feed one measured time in µs."""
        bit = time2bit(time, self._transfer_rate_index)
        if bit is Bit.ACKREQ:
            self._state = self._on_ackreq
        self._state(time, bit)

    def execute(self) -> None:
        """Execute the oldest received packet, if any."""
        if not self._packets:
            return
        packet = self._packets[0]
        try:
            self._dispatch(packet)
        finally:
            self._packets.popleft()

    def active(self) -> bool:
        """True once at least one preamble was received."""
        return self._active

    def selected(self) -> bool:
        return self._selected

    def select(self, selected: bool) -> None:
        self._selected = bool(selected)

    def pending(self) -> int:
        """Number of received packets waiting to be executed."""
        return len(self._packets)

    def shift_in(self, bit: int) -> bool:
        """Shift one data bit in; return True when a byte got complete."""
        if bit not in (0, 1):
            raise ValueError(f"data bit must be 0 or 1, got {bit}")
        self._byte |= bit << (7 - self._bit_count)
        self._bit_count += 1
        if self._bit_count >= 8:
            if len(self._current) >= MAX_PACKET_SIZE:
                self._reset()
                return False
            self._crc8.update(self._byte)
            self._crc32.update(self._byte)
            self._current.append(self._byte)
            self._bit_count = 0
            self._byte = 0
        return self._bit_count == 0

    # Bit level state machine -----------------------------------------------

    def _on_preamble(self, _time: int, bit: Bit) -> None:
        # Preamble can only set nack, never clear it
        if bit is Bit.ONE:
            self._bit_count += 1
            self._nack = self._bit_count >= 2 or self._nack
        elif self._bit_count < RX_MIN_PREAMBLE_BITS:
            self._reset()
        else:
            self._bit_count = 0
            self._active = True
            self._state = self._on_data

    def _on_data(self, _time: int, bit: Bit) -> None:
        if bit > Bit.ONE:
            self._reset()
        elif self.shift_in(int(bit)):
            self._state = self._on_endbit

    def _on_endbit(self, _time: int, bit: Bit) -> None:
        if bit is Bit.ZERO:
            self._state = self._on_data
            return
        if bit is not Bit.ONE:
            self._reset()
            return
        if self._packet_valid():
            self._packets.append(bytes(self._current))
            self._current = bytearray()
        self._bit_count = 0
        self._state = self._on_ackreq

    def _on_ackreq(self, time: int, bit: Bit) -> None:
        if not self._selected or bit is not Bit.ACKREQ:
            self._reset()
            return
        self._ackreqbit_count += 1
        count = self._ackreqbit_count
        if count < 2:
            return
        timing = (
            FALLBACK_TIMING
            if is_fallback_ackreq(time)
            else TIMINGS[self._transfer_rate_index]
        )
        # Channel 1: incomplete packets or CRC errors
        if 2 <= count <= 4:
            if self._nack:
                self.ackbit(timing.ack)
        # Channel 2
        elif 6 <= count <= 8 and self._ack:
            self.ackbit(timing.ack)

    def _reset(self) -> None:
        self._current.clear()
        self._bit_count = 0
        self._ackreqbit_count = 0
        self._byte = 0
        self._ack = False
        self._crc8.reset()
        self._crc32.reset()
        self._state = self._on_preamble

    # Packet validation -----------------------------------------------------

    def _packet_valid(self) -> bool:
        if len(self._current) < 4:
            self._nack = True
            return False
        almost_full = len(self._packets) >= _QUEUE_SIZE - 1
        command = packet2command(self._current)
        return not self._busy(command, almost_full) and self._crc_check(command)

    def _busy(self, command: Command | int, almost_full: bool) -> bool:
        if command == Command.BUSY:
            crc = self._crc8.value()
            self._nack = bool(crc)
            if not crc:
                self._ack = almost_full
        return almost_full

    def _crc_check(self, command: Command | int) -> bool:
        # Commands protected by CRC32 also report failures in channel 2
        if command in _CRC32_COMMANDS:
            crc = self._crc32.value()
            self._ack = bool(crc)
        else:
            crc = self._crc8.value()
            if command == Command.ZSU_SALSA20_IV:
                self._ack = bool(crc)
        self._nack = bool(crc)
        return not crc

    # Command execution -----------------------------------------------------

    def _dispatch(self, packet: bytes) -> None:
        command = packet2command(packet)

        # Ping must always work, even when not selected
        if command == Command.PING:
            self._execute_ping(packet)
            return
        if not self._selected:
            return

        if command == Command.CONFIG_TRANSFER_RATE:
            self._execute_config_transfer_rate(packet[4])
        elif command == Command.BINARY_TREE_SEARCH:
            self._ack = self._binary_tree_search(
                self._config.serial_number, self._config.decoder_id, packet[4]
            )
        elif command in (Command.CV_READ, Command.CV_WRITE):
            number = data2uint16(packet[4:])
            if number == 0:
                raise ValueError("CV numbers start at 1")
            cv_addr = number - 1
            value = packet[6]
            if command == Command.CV_READ:
                self._ack = bool(self.read_cv(cv_addr, value))
            else:
                self._ack = not self.write_cv(cv_addr, value)
        else:
            self._ack = self._mixins_ack(command, packet)

    def _mixins_ack(self, command: Command | int, packet: Sequence[int]) -> bool:
        decoder_id = self._config.decoder_id
        return any(
            cls.__dict__[_MIXIN_HOOK](self, command, packet, decoder_id)
            for cls in type(self).__mro__
            if _MIXIN_HOOK in cls.__dict__
        )

    def _execute_ping(self, packet: Sequence[int]) -> None:
        serial_number = 0
        decoder_id = 0
        if len(packet) < 9:
            if packet[4]:
                decoder_id = packet[4] << 24 | (self._config.decoder_id & 0x00FFFFFF)
        else:
            serial_number = data2uint32(packet[4:8])
            if len(packet) >= 12:
                decoder_id = data2uint32(packet[8:12])

        cfg = self._config
        if serial_number and decoder_id:
            self._selected = (
                serial_number == cfg.serial_number and decoder_id == cfg.decoder_id
            )
        elif serial_number:
            self._selected = serial_number == cfg.serial_number
        elif decoder_id:
            self._selected = decoder_id == cfg.decoder_id
        else:
            self._selected = True
        self._ack = self._selected

    def _execute_config_transfer_rate(self, rate: int) -> None:
        if rate != TransferRate.FALLBACK and rate < int(self._config.transfer_rate):
            self._ack = True
        elif rate < len(TIMINGS):
            self._transfer_rate_index = rate