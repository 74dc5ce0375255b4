"""JSON output formatter."""

import json
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Dict, Any

from taint_core.models.finding import Finding
from taint_audit.version import __version__


class JSONFormatter:
    """JSON output formatter for scan results."""

    def __init__(self, pretty: bool = True):
        self.pretty = pretty

    def format(
        self,
        findings: List[Finding],
        scan_path: str = "",
        analyzed_files: int = 0
    ) -> Dict[str, Any]:
        """
        Format findings as JSON.

        Args:
            findings: Findings in discovery order
            scan_path: Path that was scanned
            analyzed_files: Number of files analyzed

        Returns:
            JSON-serializable dictionary
        """
        return {
            "version": __version__,
            "scan_timestamp": datetime.now(timezone.utc).isoformat(),
            "scan_path": scan_path,
            "analyzed_files": analyzed_files,
            "summary": self._create_summary(findings),
            "findings": [f.to_dict() for f in findings],
        }

    def format_to_string(
        self,
        findings: List[Finding],
        scan_path: str = "",
        analyzed_files: int = 0
    ) -> str:
        """Format findings as JSON string."""
        data = self.format(findings, scan_path, analyzed_files)
        indent = 2 if self.pretty else None
        return json.dumps(data, indent=indent, default=str)

    def save(
        self,
        findings: List[Finding],
        output_path: Path,
        scan_path: str = "",
        analyzed_files: int = 0
    ):
        """Save findings as JSON file."""
        json_str = self.format_to_string(findings, scan_path, analyzed_files)
        output_path.write_text(json_str, encoding="utf-8")

    def _create_summary(self, findings: List[Finding]) -> Dict[str, Any]:
        """Create summary statistics."""
        by_sink = Counter(f.sink for f in findings)
        by_function = Counter(f.function for f in findings if f.function)
        return {
            "total": len(findings),
            "by_sink": dict(by_sink),
            "by_function": dict(by_function),
        }


def format_json(
    findings: List[Finding],
    scan_path: str = "",
    analyzed_files: int = 0,
    pretty: bool = True
) -> str:
    """Convenience function to format findings as JSON."""
    formatter = JSONFormatter(pretty=pretty)
    return formatter.format_to_string(findings, scan_path, analyzed_files)
