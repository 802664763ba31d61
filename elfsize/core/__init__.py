"""
elfsize Core
=============

Error taxonomy, data models, the calculation engine and the byte-range
helper.
"""

from elfsize.core.byte_range import read_byte_range
from elfsize.core.engine import (
    ElfSizeCalculator,
    analyze_elf_size,
    compute_elf_content_size,
)

__all__ = [
    "ElfSizeCalculator",
    "analyze_elf_size",
    "compute_elf_content_size",
    "read_byte_range",
]
