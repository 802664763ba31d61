import struct

import pytest


def build_elf(
    bits=64,
    byteorder="little",
    shoff=64,
    shentsize=None,
    shnum=1,
    sh_offset=0,
    sh_size=0,
    ei_class=None,
    ei_data=None,
    pad_to=0,
    write_table=True,
):
    """Build a minimal ELF image with only the fields the calculator reads.

    The section header table is written at *shoff* (zero-filled entries),
    with the last entry carrying *sh_offset* and *sh_size*.
    """
    e = "<" if byteorder == "little" else ">"
    if ei_class is None:
        ei_class = 1 if bits == 32 else 2
    if ei_data is None:
        ei_data = 1 if byteorder == "little" else 2
    if shentsize is None:
        shentsize = 40 if bits == 32 else 64

    ident = b"\x7fELF" + bytes([ei_class, ei_data, 1, 0]) + b"\x00" * 8
    if bits == 32:
        ehdr = struct.pack(
            e + "HHIIIIIHHHHHH",
            2, 3, 1, 0, 0, shoff, 0, 52, 0, 0, shentsize, shnum, 0,
        )
        shdr = struct.pack(e + "IIIIIIIIII", 1, 1, 0, 0, sh_offset, sh_size, 0, 0, 1, 0)
    else:
        ehdr = struct.pack(
            e + "HHIQQQIHHHHHH",
            2, 62, 1, 0, 0, shoff, 0, 64, 0, 0, shentsize, shnum, 0,
        )
        shdr = struct.pack(e + "IIQQQQIIQQ", 1, 1, 0, 0, sh_offset, sh_size, 0, 0, 1, 0)

    buf = bytearray(ident + ehdr)
    if write_table and shnum > 0:
        table_end = shoff + shentsize * shnum
        last = shoff + shentsize * (shnum - 1)
        needed = max(table_end, last + len(shdr))
        if len(buf) < needed:
            buf.extend(b"\x00" * (needed - len(buf)))
        buf[last:last + len(shdr)] = shdr
    if len(buf) < pad_to:
        buf.extend(b"\x00" * (pad_to - len(buf)))
    return bytes(buf)


@pytest.fixture
def make_elf(tmp_path):
    """Write a synthetic ELF built by :func:`build_elf` and return its path."""
    counter = {"n": 0}

    def _make(name=None, **kwargs):
        counter["n"] += 1
        path = tmp_path / (name or f"sample{counter['n']}.elf")
        path.write_bytes(build_elf(**kwargs))
        return path

    return _make
