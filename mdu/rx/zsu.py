"""ZSU (firmware) update support for MDU receivers."""

from __future__ import annotations

import abc
from collections.abc import Sequence

from ..command import Command
from ..crc import Crc32
from ..utility import data2uint32, make_salsa20_cipher
from .base import Receiver, ReceiverConfig
from .zpp import ZppMixin

_UPDATE_SIZE = 64
_CRC32_SIZE = 4


class ZsuMixin(abc.ABC):
    """Adds the ZSU update commands to a :class:`~mdu.rx.base.Receiver`.

    Update data is Salsa20 encrypted; the decoder specific cipher is set up
    by the ZsuSalsa20IV command. Data arriving before that command is passed
    to :meth:`write_zsu` as received.
    """

    def __init__(
        self,
        config: ReceiverConfig | None,
        salsa20_master_key: bytes | str,
        *args,
        **kwargs,
    ) -> None:
        self._salsa20_master_key = salsa20_master_key
        self._zsu_crc32 = Crc32()
        self._zsu_cipher = None
        self._zsu_first_addr: int | None = None
        self._zsu_last_addr: int | None = None
        self._zsu_crc32_valid = False
        super().__init__(config, *args, **kwargs)

    # Hooks -----------------------------------------------------------------

    @abc.abstractmethod
    def erase_zsu(self, begin_addr: int, end_addr: int) -> bool:
        """Erase ZSU flash in ``[begin_addr, end_addr)``."""

    @abc.abstractmethod
    def write_zsu(self, addr: int, data: bytes) -> bool:
        """Write 64 decrypted bytes to ZSU flash at ``addr``."""

    @abc.abstractmethod
    def exit_zsu(self) -> None:
        """Leave ZSU update mode."""

    # Command execution -----------------------------------------------------

    def _execute_mixin(
        self, command: Command | int, packet: Sequence[int], decoder_id: int
    ) -> bool:
        if command == Command.ZSU_SALSA20_IV:
            iv = bytes(packet[4:12])
            self._zsu_cipher = make_salsa20_cipher(decoder_id, iv, self._salsa20_master_key)
            return False
        if command == Command.ZSU_ERASE:
            return not self.erase_zsu(data2uint32(packet[4:8]), data2uint32(packet[8:12]))
        if command == Command.ZSU_UPDATE:
            data = bytes(packet[8 : len(packet) - _CRC32_SIZE])
            if len(data) != _UPDATE_SIZE:
                raise ValueError(f"ZSU update carries {_UPDATE_SIZE} bytes, got {len(data)}")
            return self._execute_update(data2uint32(packet[4:8]), data)
        if command == Command.ZSU_CRC32_START:
            return self._execute_crc32_start(
                data2uint32(packet[4:8]),
                data2uint32(packet[8:12]),
                data2uint32(packet[12:16]),
            )
        if command == Command.ZSU_CRC32_RESULT:
            return self._execute_crc32_result(False)
        if command == Command.ZSU_CRC32_RESULT_EXIT:
            return self._execute_crc32_result(True)
        return False

    def _execute_update(self, addr: int, data: bytes) -> bool:
        if self._zsu_first_addr is None:
            self._zsu_first_addr = addr
        last = self._zsu_last_addr
        # Lost packet
        if last is not None and last < addr:
            return True
        # Already written
        if last is not None and last > addr:
            return False
        decrypted = self._zsu_cipher.decrypt(data) if self._zsu_cipher else data
        if self.write_zsu(addr, decrypted):
            self._zsu_last_addr = addr + len(decrypted)
            self._zsu_crc32.update(data)
            return False
        return True

    def _execute_crc32_start(self, begin_addr: int, end_addr: int, crc32: int) -> bool:
        if (
            begin_addr != self._zsu_first_addr
            or (end_addr + 1) & 0xFFFFFFFF != self._zsu_last_addr
        ):
            return True
        self._zsu_crc32_valid = crc32 == self._zsu_crc32.value()
        return False

    def _execute_crc32_result(self, leave: bool) -> bool:
        if leave and self._zsu_crc32_valid:
            self.exit_zsu()
            return False
        return not self._zsu_crc32_valid


class ZsuReceiver(ZsuMixin, Receiver):
    """Receiver supporting the core commands and ZSU updates."""


class ZppZsuReceiver(ZppMixin, ZsuMixin, Receiver):
    """Receiver supporting the core commands, ZPP and ZSU updates.

    ZPP commands are consulted first; as long as no valid ZPP was announced
    they acknowledge every other command in channel 2.
    """