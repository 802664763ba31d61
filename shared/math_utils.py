"""
elfsize Arithmetic Utilities
==============================

Fixed-width unsigned integer helpers used wherever on-disk offsets and
sizes are combined.  Python integers never wrap, so every helper here
checks its result against the target width and raises
:class:`OverflowError` instead of silently producing a value that the
equivalent C expression would have truncated.

References:
    - ISO/IEC 9899:2018, 6.2.5p9 -- unsigned arithmetic is modulo 2**N.
    - System V Application Binary Interface, Edition 4.1 (ELF data types).
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
#  Width limits
# ---------------------------------------------------------------------------
U16_MAX: int = 0xFFFF
U32_MAX: int = 0xFFFF_FFFF
U64_MAX: int = 0xFFFF_FFFF_FFFF_FFFF


# ========================== Range checks ===================================


def fits_u64(value: int) -> bool:
    """Return ``True`` if *value* is representable as an unsigned 64-bit int."""
    return 0 <= value <= U64_MAX


def _require_u64(value: int, name: str) -> None:
    if not fits_u64(value):
        raise OverflowError(f"{name}={value} is outside the u64 range")


# ========================== Checked operations =============================


def checked_add_u64(a: int, b: int) -> int:
    """Add two unsigned 64-bit operands.

    Args:
        a: Left operand, ``0 <= a <= U64_MAX``.
        b: Right operand, ``0 <= b <= U64_MAX``.

    Returns:
        ``a + b``.

    Raises:
        OverflowError: If an operand or the sum does not fit in 64 bits.
    """
    _require_u64(a, "a")
    _require_u64(b, "b")
    result = a + b
    if result > U64_MAX:
        raise OverflowError(f"{a} + {b} overflows u64")
    return result


def checked_mul_u64(a: int, b: int) -> int:
    """Multiply two unsigned 64-bit operands.

    Raises:
        OverflowError: If an operand or the product does not fit in 64 bits.
    """
    _require_u64(a, "a")
    _require_u64(b, "b")
    result = a * b
    if result > U64_MAX:
        raise OverflowError(f"{a} * {b} overflows u64")
    return result


def checked_table_offset(base: int, entry_size: int, count: int) -> int:
    """Compute ``base + entry_size * count`` with u64 overflow checks.

    This is the shape of every table-walk offset in the ELF format: the
    start of entry *count* in a table of *entry_size*-byte records that
    begins at file offset *base*.
    """
    return checked_add_u64(base, checked_mul_u64(entry_size, count))
