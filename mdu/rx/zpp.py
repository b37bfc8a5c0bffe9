"""ZPP (sound project) update support for MDU receivers."""

from __future__ import annotations

import abc
from collections.abc import Sequence

from ..command import Command
from ..utility import data2uint32
from .base import Receiver

_CRC32_SIZE = 4


class ZppMixin(abc.ABC):
    """Adds the ZPP update commands to a :class:`~mdu.rx.base.Receiver`.

    Subclasses provide the flash hooks. Every method returning a bool
    reports success (or validity) of the operation.
    """

    def __init__(self, *args, **kwargs) -> None:
        self._zpp_first_addr: int | None = None
        self._zpp_last_addr: int | None = None
        self._zpp_addrs_valid = False
        self._zpp_is_valid = False
        super().__init__(*args, **kwargs)

    # Hooks -----------------------------------------------------------------

    @abc.abstractmethod
    def zpp_valid(self, zpp_id: str, zpp_flash_size: int) -> bool:
        """Return whether a ZPP with this ID and flash size can be loaded."""

    @abc.abstractmethod
    def load_code_valid(self, developer_code: bytes) -> bool:
        """Return whether the 4 byte developer code is valid."""

    @abc.abstractmethod
    def erase_zpp(self, begin_addr: int, end_addr: int) -> bool:
        """Erase ZPP flash in ``[begin_addr, end_addr)``."""

    @abc.abstractmethod
    def write_zpp(self, addr: int, data: bytes) -> bool:
        """Write ``data`` to ZPP flash at ``addr``."""

    @abc.abstractmethod
    def end_zpp(self) -> bool:
        """Called once the update is complete."""

    @abc.abstractmethod
    def exit_zpp(self, reset_cvs: bool) -> None:
        """Leave ZPP update mode, optionally resetting CVs."""

    # Command execution -----------------------------------------------------

    def _execute_mixin(
        self, command: Command | int, packet: Sequence[int], decoder_id: int
    ) -> bool:
        # These commands run without ZPP validation
        if command == Command.ZPP_VALID_QUERY:
            zpp_id = bytes(packet[4:6]).decode("latin-1")
            return self._execute_valid_query(zpp_id, data2uint32(packet[6:10]))
        if command == Command.ZPP_EXIT:
            return self._execute_exit(False)
        if command == Command.ZPP_EXIT_RESET:
            return self._execute_exit(True)

        # All others need a valid ZPP
        if not self._zpp_is_valid:
            return True
        if command == Command.ZPP_LC_DC_QUERY:
            return not self.load_code_valid(bytes(packet[4:8]))
        if command == Command.ZPP_ERASE:
            return not self.erase_zpp(data2uint32(packet[4:8]), data2uint32(packet[8:12]))
        if command == Command.ZPP_UPDATE:
            addr = data2uint32(packet[4:8])
            return self._execute_update(addr, bytes(packet[8 : len(packet) - _CRC32_SIZE]))
        if command == Command.ZPP_UPDATE_END:
            return self._execute_end(data2uint32(packet[4:8]), data2uint32(packet[8:12]))
        return False

    def _execute_valid_query(self, zpp_id: str, zpp_flash_size: int) -> bool:
        self._zpp_is_valid = bool(self.zpp_valid(zpp_id, zpp_flash_size))
        return not self._zpp_is_valid

    def _execute_update(self, addr: int, data: bytes) -> bool:
        if self._zpp_first_addr is None:
            self._zpp_first_addr = addr
        last = self._zpp_last_addr
        # Lost packet
        if last is not None and last < addr:
            return True
        # Already written
        if last is not None and last > addr:
            return False
        if self.write_zpp(addr, data):
            self._zpp_last_addr = addr + len(data)
            return False
        return True

    def _execute_end(self, begin_addr: int, end_addr: int) -> bool:
        if self._zpp_first_addr is None or self._zpp_last_addr is None:
            return False
        self._zpp_addrs_valid = (
            begin_addr == self._zpp_first_addr and end_addr == self._zpp_last_addr
        )
        if not self._zpp_addrs_valid:
            return True
        self._zpp_first_addr = self._zpp_last_addr = None
        return not self.end_zpp()

    def _execute_exit(self, reset_cvs: bool) -> bool:
        first, last = self._zpp_first_addr, self._zpp_last_addr
        if self._zpp_addrs_valid or (first is None and last is None):
            self.exit_zpp(reset_cvs)
            return False
        begin_addr = first if first is not None else last
        end_addr = last if last is not None else first
        while not self.erase_zpp(begin_addr, end_addr):
            pass
        self._zpp_first_addr = self._zpp_last_addr = None
        return True


class ZppReceiver(ZppMixin, Receiver):
    """Receiver supporting the core commands and ZPP updates."""