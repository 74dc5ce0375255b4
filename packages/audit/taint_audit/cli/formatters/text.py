"""Plain text report: the header line followed by one line per finding."""

from pathlib import Path
from typing import List, Optional

from taint_core.models.finding import Finding, REPORT_HEADER


def format_text(findings: List[Finding]) -> str:
    lines = [REPORT_HEADER]
    lines.extend(f.render() for f in findings)
    return "\n".join(lines) + "\n"


def save_text(findings: List[Finding], output_path: Optional[Path]):
    """Write the text report to `output_path`."""
    if output_path:
        output_path.write_text(format_text(findings), encoding="utf-8")
