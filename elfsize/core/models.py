"""
elfsize Data Models
====================

Pydantic models for the values handed from one pipeline step to the
next: the decoded identification block, the width-normalized ELF and
section headers, and the final :class:`ElfSizeResult`.

All offsets and sizes are plain Python ints constrained to the unsigned
64-bit range regardless of the file's ELF class.

References:
    - TIS Committee. (1995). Executable and Linkable Format (ELF)
      Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
"""

from __future__ import annotations

import enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, computed_field

from shared.math_utils import U64_MAX


U64 = Annotated[int, Field(ge=0, le=U64_MAX)]


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ElfClass(enum.IntEnum):
    """``e_ident[EI_CLASS]`` values."""
    ELF32 = 1
    ELF64 = 2

    @property
    def bits(self) -> int:
        return 32 if self is ElfClass.ELF32 else 64


class ElfEncoding(enum.IntEnum):
    """``e_ident[EI_DATA]`` values."""
    LSB = 1  # Little-endian
    MSB = 2  # Big-endian

    @property
    def byteorder(self) -> str:
        """Byte order name as used by :data:`sys.byteorder`."""
        return "little" if self is ElfEncoding.LSB else "big"


# ---------------------------------------------------------------------------
# Pipeline values
# ---------------------------------------------------------------------------

class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Identification(_Frozen):
    """Decoded fields of the 16-byte identification block.

    Attributes:
        elf_class: 32- or 64-bit field widths.
        encoding: Byte order of every multi-byte field in the file.
    """
    elf_class: ElfClass
    encoding: ElfEncoding

    @property
    def bits(self) -> int:
        return self.elf_class.bits

    @property
    def byteorder(self) -> str:
        return self.encoding.byteorder


class NormalizedElfHeader(_Frozen):
    """Section-header-table fields of the ELF header, in host order.

    Attributes:
        shoff: File offset of the section header table.
        shentsize: Size in bytes of one section header entry.
        shnum: Number of entries in the table.
    """
    shoff: U64
    shentsize: U64
    shnum: U64


class NormalizedSectionHeader(_Frozen):
    """Location fields of one section header, in host order.

    Attributes:
        sh_offset: File offset of the section's content.
        sh_size: Length of the section's content in bytes.
    """
    sh_offset: U64
    sh_size: U64


class ElfSizeResult(_Frozen):
    """Everything the calculator learned about one file.

    Attributes:
        path: The inspected file.
        identification: Decoded class and encoding.
        header: Normalized section-table fields of the ELF header.
        last_section: Normalized last section header.
        sht_end: End offset of the section header table.
        last_section_end: End offset of the last section's content.
        content_size: ``max(sht_end, last_section_end)``.
        file_size: On-disk size of the file.
    """
    path: str
    identification: Identification
    header: NormalizedElfHeader
    last_section: NormalizedSectionHeader
    sht_end: U64
    last_section_end: U64
    content_size: U64
    file_size: U64

    @computed_field  # type: ignore[prop-decorator]
    @property
    def trailing_bytes(self) -> int:
        """Bytes stored past the end of the ELF content."""
        return max(self.file_size - self.content_size, 0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_truncated(self) -> bool:
        """``True`` when the headers describe more bytes than the file holds."""
        return self.content_size > self.file_size
