"""
Bounded byte-range reads.

Companion helper to the size calculator for callers that, having found
where the ELF content ends, want the bytes around or after it.
"""

from __future__ import annotations

import os

from shared.logger import ElfSizeLogger

logger = ElfSizeLogger("byte_range")


def read_byte_range(
    path: str | os.PathLike[str], offset: int, length: int
) -> bytes | None:
    """Read *length* bytes of *path* starting at *offset*.

    The result always holds exactly *length* bytes: if the file ends
    before ``offset + length`` the remainder is zero-filled.

    Args:
        path: File to read.
        offset: Starting file offset.
        length: Number of bytes to return.

    Returns:
        The bytes, or ``None`` if *path* cannot be opened.

    Raises:
        ValueError: If *offset* or *length* is negative.
    """
    if offset < 0 or length < 0:
        raise ValueError(f"offset and length must be >= 0 (got {offset}, {length})")

    try:
        fh = open(path, "rb")
    except OSError as exc:
        logger.debug("Cannot open %s: %s", path, exc.strerror or exc)
        return None

    with fh:
        try:
            fh.seek(offset)
            data = fh.read(length)
        except (OverflowError, ValueError):
            data = b""

    if len(data) < length:
        data += bytes(length - len(data))
    return data
