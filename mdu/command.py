"""MDU command codes."""

from enum import IntEnum


class Command(IntEnum):
    """Command codes as sent in the first four bytes of a packet."""

    PING = 0xFFFFFFFF
    CONFIG_TRANSFER_RATE = 0xFFFFFFFE
    BINARY_TREE_SEARCH = 0xFFFFFFFA
    CV_READ = 0xFFFFFFF6
    CV_WRITE = 0xFFFFFFF9
    BUSY = 0xFFFFFFF2
    ZSU_SALSA20_IV = 0xFFFFFFF7
    ZSU_ERASE = 0xFFFFFFF5
    ZSU_UPDATE = 0xFFFFFFF8
    ZSU_CRC32_START = 0xFFFFFFFB
    ZSU_CRC32_RESULT = 0xFFFFFFFC
    ZSU_CRC32_RESULT_EXIT = 0xFFFFFFFD
    ZPP_VALID_QUERY = 0xFFFFFF06
    ZPP_LC_DC_QUERY = 0xFFFFFF07
    ZPP_ERASE = 0xFFFFFF05
    ZPP_UPDATE = 0xFFFFFF08
    ZPP_UPDATE_END = 0xFFFFFF0B
    ZPP_EXIT = 0xFFFFFF0C
    ZPP_EXIT_RESET = 0xFFFFFF0D