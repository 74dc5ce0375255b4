"""Finding model for taint analysis results."""

import hashlib
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


REPORT_HEADER = "WARNING: Tainted arguments passed to these functions:"


def _normalize_path(path: str) -> str:
    """Normalize path to use forward slashes for cross-platform consistency."""
    return path.replace("\\", "/")


@dataclass(frozen=True)
class Finding:
    """
    A call to a sink function that received at least one tainted argument.

    Identity is the (sink, line) pair. The remaining fields are context for
    reports and do not take part in equality.
    """
    sink: str
    line: int

    function: str = field(default="", compare=False)
    tainted_arguments: Tuple[str, ...] = field(default=(), compare=False)
    file_path: str = field(default="", compare=False)
    cwe_id: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        if self.file_path:
            object.__setattr__(self, "file_path", _normalize_path(self.file_path))

    def as_pair(self) -> Tuple[str, int]:
        return (self.sink, self.line)

    def render(self) -> str:
        """Render as `<sink> at line <line>`."""
        return f"{self.sink} at line {self.line}"

    @property
    def rule_id(self) -> str:
        return f"tainted-arg/{self.sink}"

    def fingerprint(self) -> str:
        """Compute a stable fingerprint for baseline comparison."""
        components = [
            self.sink,
            self.function,
            self.file_path,
            str(self.line),
        ]
        raw = "|".join(components)
        return hashlib.sha256(raw.encode()).hexdigest()[:16]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "sink": self.sink,
            "line": self.line,
            "function": self.function,
            "tainted_arguments": list(self.tainted_arguments),
            "file_path": self.file_path,
            "cwe_id": self.cwe_id,
            "message": self.render(),
        }

    def to_sarif(self) -> Dict[str, Any]:
        """Convert to SARIF 2.1.0 result format."""
        args = ", ".join(self.tainted_arguments) or "argument"
        where = f" in '{self.function}'" if self.function else ""
        result: Dict[str, Any] = {
            "ruleId": self.rule_id,
            "level": "warning",
            "message": {
                "text": f"Tainted {args} passed to '{self.sink}'{where}"
            },
            "locations": [{
                "physicalLocation": {
                    "artifactLocation": {"uri": self.file_path or "<unknown>"},
                    "region": {
                        "startLine": max(self.line, 1),
                    }
                }
            }],
            "fingerprints": {
                "primary": self.fingerprint()
            },
        }
        if self.function:
            result["locations"][0]["logicalLocations"] = [{
                "name": self.function,
                "kind": "function",
            }]
        if self.cwe_id:
            result["properties"] = {"cwe": self.cwe_id}
        return result
