"""
elfsize Console Interface
==========================

Rich-powered console abstraction used by the elfsize CLI.

Two Rich consoles are kept: results go to stdout, and every diagnostic
(errors, warnings, usage) goes to stderr so that the standard output of
a successful run is exactly the computed size.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

_TOOL_THEME = Theme(
    {
        "elfsize.warning": "bold yellow",
        "elfsize.error": "bold red",
    }
)


class ToolConsole:
    """Unified console interface for the elfsize CLI.

    Usage::

        con = ToolConsole()
        con.result("128")
        con.error("Cannot open /tmp/x: No such file or directory")
    """

    def __init__(self) -> None:
        self._out = Console(theme=_TOOL_THEME, highlight=False, soft_wrap=True)
        self._err = Console(
            theme=_TOOL_THEME,
            stderr=True,
            highlight=False,
            soft_wrap=True,
        )

    # ------------------------------------------------------------------ #
    #  Results (stdout)
    # ------------------------------------------------------------------ #

    def result(self, text: str) -> None:
        """Print *text* verbatim on stdout, without markup or styling."""
        self._out.print(text, markup=False, highlight=False)

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table on stdout.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Iterable of row tuples; each element is stringified.
            caption:  Optional footer caption.
            styles:   Optional per-column Rich style strings.
        """
        tbl = Table(
            title=escape(title),
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            style = styles[idx] if styles and idx < len(styles) else ""
            tbl.add_column(col_name, style=style)

        for row in rows:
            tbl.add_row(*(escape(str(cell)) for cell in row))

        self._out.print(tbl)

    # ------------------------------------------------------------------ #
    #  Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def error(self, message: str) -> None:
        """Print an error message on stderr."""
        self._err.print(f"[elfsize.error]Error:[/elfsize.error] {escape(message)}")

    def warning(self, message: str) -> None:
        """Print a warning message on stderr."""
        self._err.print(
            f"[elfsize.warning]Warning:[/elfsize.warning] {escape(message)}"
        )

    def usage(self, text: str) -> None:
        """Print raw usage text on stderr."""
        self._err.print(text, markup=False, highlight=False)
