"""
File-to-Host Byte Order Conversion
====================================

Header structures are unpacked in host byte order, exactly as they sit
in memory after a raw read, and then converted field by field: a value
is byte-reversed only when the file's encoding differs from the host's.

Each width has its own reversal so that a 16-bit field can never be
treated as a 32-bit one by accident.
"""

from __future__ import annotations

import sys

from elfsize.core.models import ElfEncoding
from shared.math_utils import U16_MAX, U32_MAX, U64_MAX


HOST_ENCODING: ElfEncoding = (
    ElfEncoding.LSB if sys.byteorder == "little" else ElfEncoding.MSB
)


# ========================== Byte reversal ==================================


def bswap_16(value: int) -> int:
    """Reverse the two bytes of a 16-bit value."""
    value &= U16_MAX
    return ((value & 0xFF) << 8) | (value >> 8)


def bswap_32(value: int) -> int:
    """Reverse the four bytes of a 32-bit value."""
    value &= U32_MAX
    return (bswap_16(value & 0xFFFF) << 16) | bswap_16(value >> 16)


def bswap_64(value: int) -> int:
    """Reverse the eight bytes of a 64-bit value."""
    value &= U64_MAX
    return (bswap_32(value & U32_MAX) << 32) | bswap_32(value >> 32)


_SWAPS = {16: bswap_16, 32: bswap_32, 64: bswap_64}


# ========================== File -> host ===================================


def file_to_cpu(value: int, width: int, encoding: ElfEncoding) -> int:
    """Convert a *width*-bit field read in host order from file order.

    Args:
        value: Field as unpacked with the host's native byte order.
        width: 16, 32 or 64.
        encoding: The file's ``EI_DATA`` encoding.

    Raises:
        ValueError: For any other *width*.
    """
    try:
        swap = _SWAPS[width]
    except KeyError:
        raise ValueError(f"Unsupported field width: {width}") from None
    if encoding != HOST_ENCODING:
        return swap(value)
    return value
