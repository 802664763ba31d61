"""
ELF Header Reader
==================

Struct-based reader for the handful of ELF header fields that locate the
end of an ELF object: the identification block, the section header table
geometry in the ELF header, and the last entry of that table.

Nothing else is parsed.  Both ELF32 and ELF64 layouts are described by a
single :class:`HeaderReader` type; the two instances differ only in
their struct layouts and field widths, and both produce the same
width-independent models.

Every read goes through an explicit seek on the caller's handle, so no
state is kept between calls and separate files can be inspected
concurrently.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
    - Linux man page: elf(5).
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO

from elfsize.core.errors import (
    MalformedSectionTableError,
    TruncatedFileError,
    UnreadableFileError,
    UnsupportedClassError,
    UnsupportedEncodingError,
)
from elfsize.core.models import (
    ElfClass,
    ElfEncoding,
    Identification,
    NormalizedElfHeader,
    NormalizedSectionHeader,
)
from elfsize.parsers.byteorder import file_to_cpu
from shared.math_utils import checked_table_offset


# ---------------------------------------------------------------------------
# ELF Constants
# ---------------------------------------------------------------------------

EI_NIDENT: int = 16
EI_CLASS: int = 4
EI_DATA: int = 5

ELFCLASS32: int = 1
ELFCLASS64: int = 2

ELFDATA2LSB: int = 1  # Little-endian
ELFDATA2MSB: int = 2  # Big-endian

# Host-order layouts ("=": native order, standard sizes, no padding).
# Elf32_Ehdr: e_ident, e_type, e_machine, e_version, e_entry, e_phoff,
# e_shoff, e_flags, e_ehsize, e_phentsize, e_phnum, e_shentsize, e_shnum,
# e_shstrndx
_ELF32_EHDR = struct.Struct("=16sHHIIIIIHHHHHH")  # 52 bytes
_ELF64_EHDR = struct.Struct("=16sHHIQQQIHHHHHH")  # 64 bytes

# Elf32_Shdr / Elf64_Shdr: sh_name, sh_type, sh_flags, sh_addr, sh_offset,
# sh_size, sh_link, sh_info, sh_addralign, sh_entsize
_ELF32_SHDR = struct.Struct("=IIIIIIIIII")  # 40 bytes
_ELF64_SHDR = struct.Struct("=IIQQQQIIQQ")  # 64 bytes


# ---------------------------------------------------------------------------
# Raw I/O
# ---------------------------------------------------------------------------

def read_exact(
    fh: BinaryIO,
    offset: int,
    size: int,
    what: str,
    path: str | None = None,
) -> bytes:
    """Seek to *offset* and read exactly *size* bytes.

    Raises:
        TruncatedFileError: Fewer than *size* bytes are available, or
            *offset* lies beyond anything the platform can seek to.
        UnreadableFileError: The underlying seek or read failed.
    """
    try:
        fh.seek(offset)
        data = fh.read(size)
    except (OverflowError, ValueError):
        # offset beyond the platform's off_t range
        raise TruncatedFileError(what, size, 0, path=path) from None
    except OSError as exc:
        raise UnreadableFileError(
            f"Read of {what} failed: {exc.strerror or exc}", path=path
        ) from exc
    if len(data) != size:
        raise TruncatedFileError(what, size, len(data), path=path)
    return data


# ---------------------------------------------------------------------------
# Identification
# ---------------------------------------------------------------------------

def identify(fh: BinaryIO, path: str | None = None) -> Identification:
    """Decode class and encoding from the identification block.

    *fh* must be positioned at the start of the file.  The encoding is
    validated before the class.

    Raises:
        TruncatedFileError: The file is shorter than ``EI_NIDENT`` bytes.
        UnsupportedEncodingError: ``e_ident[EI_DATA]`` is not 1 or 2.
        UnsupportedClassError: ``e_ident[EI_CLASS]`` is not 1 or 2.
    """
    try:
        ident = fh.read(EI_NIDENT)
    except OSError as exc:
        raise UnreadableFileError(
            f"Read of e_ident failed: {exc.strerror or exc}", path=path
        ) from exc
    if len(ident) != EI_NIDENT:
        raise TruncatedFileError("e_ident", EI_NIDENT, len(ident), path=path)

    ei_data = ident[EI_DATA]
    if ei_data not in (ELFDATA2LSB, ELFDATA2MSB):
        raise UnsupportedEncodingError(ei_data, path=path)

    ei_class = ident[EI_CLASS]
    if ei_class not in (ELFCLASS32, ELFCLASS64):
        raise UnsupportedClassError(ei_class, path=path)

    return Identification(
        elf_class=ElfClass(ei_class),
        encoding=ElfEncoding(ei_data),
    )


# ---------------------------------------------------------------------------
# Section table geometry
# ---------------------------------------------------------------------------

def last_section_header_offset(
    header: NormalizedElfHeader, path: str | None = None
) -> int:
    """Return the file offset of section header ``shnum - 1``.

    Raises:
        MalformedSectionTableError: The table is empty, or the offset
            does not fit in 64 bits.
    """
    if header.shnum == 0:
        raise MalformedSectionTableError(
            "ELF header declares no section headers (e_shnum == 0)", path=path
        )
    try:
        return checked_table_offset(
            header.shoff, header.shentsize, header.shnum - 1
        )
    except OverflowError as exc:
        raise MalformedSectionTableError(
            f"Last section header offset overflows: {exc}", path=path
        ) from exc


# ---------------------------------------------------------------------------
# Class-specific reader
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class _Field:
    """Position of a field in an unpacked tuple and its width in bits."""
    index: int
    width: int

    def get(self, fields: tuple, encoding: ElfEncoding) -> int:
        return file_to_cpu(fields[self.index], self.width, encoding)


@dataclass(frozen=True, slots=True)
class HeaderReader:
    """Reads and normalizes the ELF and section headers of one ELF class.

    Attributes:
        elf_class: The class this reader handles.
        ehdr: Host-order layout of the ELF header.
        shdr: Host-order layout of one section header.
        shoff, shentsize, shnum: Field positions in the ELF header.
        sh_offset, sh_size: Field positions in a section header.
    """
    elf_class: ElfClass
    ehdr: struct.Struct
    shdr: struct.Struct
    shoff: _Field
    shentsize: _Field
    shnum: _Field
    sh_offset: _Field
    sh_size: _Field

    @property
    def ehdr_size(self) -> int:
        return self.ehdr.size

    @property
    def shdr_size(self) -> int:
        return self.shdr.size

    def read_header(
        self,
        fh: BinaryIO,
        encoding: ElfEncoding,
        path: str | None = None,
    ) -> NormalizedElfHeader:
        """Read the full ELF header from offset 0 and normalize it."""
        raw = read_exact(fh, 0, self.ehdr.size, "ELF header", path)
        fields = self.ehdr.unpack(raw)
        return NormalizedElfHeader(
            shoff=self.shoff.get(fields, encoding),
            shentsize=self.shentsize.get(fields, encoding),
            shnum=self.shnum.get(fields, encoding),
        )

    def read_last_section_header(
        self,
        fh: BinaryIO,
        header: NormalizedElfHeader,
        encoding: ElfEncoding,
        path: str | None = None,
    ) -> NormalizedSectionHeader:
        """Read and normalize section header ``header.shnum - 1``."""
        offset = last_section_header_offset(header, path)
        raw = read_exact(fh, offset, self.shdr.size, "ELF section header", path)
        fields = self.shdr.unpack(raw)
        return NormalizedSectionHeader(
            sh_offset=self.sh_offset.get(fields, encoding),
            sh_size=self.sh_size.get(fields, encoding),
        )


ELF32_READER = HeaderReader(
    elf_class=ElfClass.ELF32,
    ehdr=_ELF32_EHDR,
    shdr=_ELF32_SHDR,
    shoff=_Field(6, 32),
    shentsize=_Field(11, 16),
    shnum=_Field(12, 16),
    sh_offset=_Field(4, 32),
    sh_size=_Field(5, 32),
)

ELF64_READER = HeaderReader(
    elf_class=ElfClass.ELF64,
    ehdr=_ELF64_EHDR,
    shdr=_ELF64_SHDR,
    shoff=_Field(6, 64),
    shentsize=_Field(11, 16),
    shnum=_Field(12, 16),
    sh_offset=_Field(4, 64),
    sh_size=_Field(5, 64),
)

_READERS: dict[ElfClass, HeaderReader] = {
    ElfClass.ELF32: ELF32_READER,
    ElfClass.ELF64: ELF64_READER,
}


def reader_for(elf_class: ElfClass) -> HeaderReader:
    """Return the :class:`HeaderReader` for *elf_class*."""
    return _READERS[elf_class]
