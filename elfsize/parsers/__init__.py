"""
elfsize Parsers
================

Modules:
    byteorder   -- width-specific file-to-host byte order conversion
    elf_parser  -- identification block and class-specific header reads
"""

from elfsize.parsers.elf_parser import (
    ELF32_READER,
    ELF64_READER,
    HeaderReader,
    identify,
    reader_for,
)

__all__ = [
    "ELF32_READER",
    "ELF64_READER",
    "HeaderReader",
    "identify",
    "reader_for",
]
