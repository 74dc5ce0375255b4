"""Taint analysis engine."""

from taint_audit.analysis.taint_state import TaintState
from taint_audit.analysis.taint_tracker import (
    CallInspector,
    FindingsCollector,
    TaintAnalysisDriver,
    copy_taint,
    run_analysis,
)

__all__ = [
    "TaintState",
    "CallInspector",
    "FindingsCollector",
    "TaintAnalysisDriver",
    "copy_taint",
    "run_analysis",
]
