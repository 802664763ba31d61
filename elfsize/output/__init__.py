"""
elfsize Output
===============

Modules:
    console -- Rich table of the pipeline values
    report  -- JSON report of an :class:`~elfsize.core.models.ElfSizeResult`
"""

from elfsize.output.console import ElfSizeConsoleOutput
from elfsize.output.report import ElfSizeReportGenerator

__all__ = [
    "ElfSizeConsoleOutput",
    "ElfSizeReportGenerator",
]
