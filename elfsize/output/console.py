"""
elfsize Console Output
=======================

Rich table rendering of an :class:`ElfSizeResult`, used by the CLI's
``--details`` mode.
"""

from __future__ import annotations

from shared.console import ToolConsole

from elfsize.core.models import ElfSizeResult


class ElfSizeConsoleOutput:
    """Render every value the calculator derived for one file.

    Usage::

        output = ElfSizeConsoleOutput()
        output.display(result)
    """

    def __init__(self, console: ToolConsole | None = None) -> None:
        self._console: ToolConsole = console or ToolConsole()

    def display(self, result: ElfSizeResult) -> None:
        """Display *result* as a two-column table followed by a verdict."""
        ident = result.identification
        self._console.table(
            title=f"ELF size: {result.path}",
            columns=("Field", "Value"),
            rows=self.rows(result),
            caption=(
                f"ELF{ident.bits}, {ident.byteorder}-endian"
            ),
            styles=("bold", ""),
        )

    @staticmethod
    def rows(result: ElfSizeResult) -> list[tuple[str, str]]:
        """Return the ``(field, value)`` rows shown by :meth:`display`."""
        header = result.header
        section = result.last_section
        return [
            ("e_shoff", _fmt(header.shoff)),
            ("e_shentsize", str(header.shentsize)),
            ("e_shnum", str(header.shnum)),
            ("last sh_offset", _fmt(section.sh_offset)),
            ("last sh_size", _fmt(section.sh_size)),
            ("section table end", _fmt(result.sht_end)),
            ("last section end", _fmt(result.last_section_end)),
            ("content size", _fmt(result.content_size)),
            ("file size", _fmt(result.file_size)),
            ("trailing bytes", str(result.trailing_bytes)),
            ("truncated", "yes" if result.is_truncated else "no"),
        ]


def _fmt(value: int) -> str:
    return f"{value} (0x{value:x})"
