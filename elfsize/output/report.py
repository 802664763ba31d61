"""
elfsize Report Generator
=========================

JSON rendering of an :class:`ElfSizeResult` for machine consumption,
either to stdout or to a file.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from elfsize.core.models import ElfSizeResult

REPORT_TYPE = "elfsize_content_size"
REPORT_VERSION = "1.0.0"


class ElfSizeReportGenerator:
    """Build JSON reports from calculator results."""

    def build(self, result: ElfSizeResult) -> dict[str, Any]:
        """Return the report as a plain dictionary."""
        ident = result.identification
        return {
            "report_type": REPORT_TYPE,
            "version": REPORT_VERSION,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "path": result.path,
            "class": f"ELF{ident.bits}",
            "encoding": ident.byteorder,
            "result": result.model_dump(mode="json"),
        }

    def render_json(self, result: ElfSizeResult) -> str:
        return json.dumps(self.build(result), indent=2)

    def generate_json(self, result: ElfSizeResult, output_path: str | Path) -> str:
        """Write the JSON report to *output_path*.

        Returns:
            The absolute path of the generated report.
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render_json(result) + "\n", encoding="utf-8")
        return str(path.resolve())
