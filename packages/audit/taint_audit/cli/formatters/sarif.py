"""SARIF 2.1.0 output formatter for code scanning services."""

import json
from pathlib import Path
from typing import List, Dict, Any

from taint_core.models.finding import Finding
from taint_audit.version import __version__


class SARIFFormatter:
    """
    SARIF 2.1.0 formatter.

    Every sink function becomes one rule; every finding one result.
    """

    SARIF_SCHEMA = "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/Schemata/sarif-schema-2.1.0.json"
    SARIF_VERSION = "2.1.0"

    def __init__(self, tool_name: str = "taint-audit"):
        self.tool_name = tool_name

    def format(self, findings: List[Finding]) -> Dict[str, Any]:
        """Format findings as a SARIF document."""
        return {
            "$schema": self.SARIF_SCHEMA,
            "version": self.SARIF_VERSION,
            "runs": [{
                "tool": {
                    "driver": {
                        "name": self.tool_name,
                        "version": __version__,
                        "rules": self._extract_rules(findings)
                    }
                },
                "results": [f.to_sarif() for f in findings]
            }]
        }

    def format_to_string(self, findings: List[Finding], indent: int = 2) -> str:
        """Format findings as SARIF JSON string."""
        return json.dumps(self.format(findings), indent=indent)

    def save(self, findings: List[Finding], output_path: Path):
        """Save findings as SARIF file."""
        output_path.write_text(self.format_to_string(findings), encoding="utf-8")

    def _extract_rules(self, findings: List[Finding]) -> List[Dict[str, Any]]:
        """Extract one rule per sink, in first-seen order."""
        rules_map: Dict[str, Dict[str, Any]] = {}

        for finding in findings:
            if finding.rule_id in rules_map:
                continue
            rule: Dict[str, Any] = {
                "id": finding.rule_id,
                "name": f"TaintedArgumentTo{finding.sink.title().replace('_', '')}",
                "shortDescription": {
                    "text": f"Tainted argument passed to {finding.sink}"
                },
                "fullDescription": {
                    "text": (
                        f"A value derived from a function parameter reaches a call "
                        f"to '{finding.sink}' without passing through a sanitizer."
                    )
                },
                "defaultConfiguration": {"level": "warning"},
            }
            if finding.cwe_id:
                rule["properties"] = {
                    "tags": ["security", f"external/cwe/{finding.cwe_id.lower()}"]
                }
            rules_map[finding.rule_id] = rule

        return list(rules_map.values())


def format_sarif(findings: List[Finding]) -> str:
    """Convenience function to format findings as SARIF."""
    return SARIFFormatter().format_to_string(findings)
