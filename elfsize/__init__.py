"""
elfsize -- ELF Logical Content Size
====================================

Finds where the ELF object inside a file ends by reading only its
identification block, its ELF header and its last section header.
The result is the larger of the section header table end and the end
of the last section's content; bytes past it (signatures, archives,
padding) are not part of the ELF object.

Usage::

    from elfsize import compute_elf_content_size, ErrorKind, ElfSizeError

    try:
        size = compute_elf_content_size("firmware.elf")
    except ElfSizeError as exc:
        if exc.kind is ErrorKind.TRUNCATED_FILE:
            ...

References:
    - TIS Committee. (1995). ELF Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
"""

from elfsize.core.byte_range import read_byte_range
from elfsize.core.engine import (
    ElfSizeCalculator,
    analyze_elf_size,
    compute_elf_content_size,
)
from elfsize.core.errors import (
    ElfFileNotFoundError,
    ElfSizeError,
    ErrorKind,
    MalformedSectionTableError,
    TruncatedFileError,
    UnreadableFileError,
    UnsupportedClassError,
    UnsupportedEncodingError,
)
from elfsize.core.models import ElfClass, ElfEncoding, ElfSizeResult

__version__ = "1.0.0"
__all__ = [
    "ElfSizeCalculator",
    "ElfSizeResult",
    "ElfClass",
    "ElfEncoding",
    "ErrorKind",
    "ElfSizeError",
    "ElfFileNotFoundError",
    "UnreadableFileError",
    "TruncatedFileError",
    "UnsupportedEncodingError",
    "UnsupportedClassError",
    "MalformedSectionTableError",
    "analyze_elf_size",
    "compute_elf_content_size",
    "read_byte_range",
]
