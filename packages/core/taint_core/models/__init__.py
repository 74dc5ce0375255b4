"""Core data models for taint-audit."""

from taint_core.models.program import (
    InstructionKind, Instruction, BasicBlock, Function, Program
)
from taint_core.models.finding import Finding, REPORT_HEADER
from taint_core.models.config import AnalysisConfig, DEFAULT_SINKS, DEFAULT_SANITIZERS

__all__ = [
    "InstructionKind",
    "Instruction",
    "BasicBlock",
    "Function",
    "Program",
    "Finding",
    "REPORT_HEADER",
    "AnalysisConfig",
    "DEFAULT_SINKS",
    "DEFAULT_SANITIZERS",
]
