"""
Taint Tracking Analyzer

Intraprocedural, single-pass taint propagation over a Program.

This module implements:
1. copy_taint - Copy-taint rule for store-like and load-like instructions
2. CallInspector - Classifies calls as sink / sanitizer / ordinary
3. FindingsCollector - Ordered, append-only findings of one run
4. TaintAnalysisDriver - Walks functions, blocks and instructions in order
5. run_analysis - Convenience entry point: run(program, config) -> findings

Key design decisions:
- Function parameters are the only taint sources and are always tainted
- One forward pass in layout order: no fixed point, no merge at joins,
  no loop back-edges. Later writes overwrite earlier ones
- Intra-procedural: calls only report (sinks) or clear (sanitizers)
- Never fails on unresolved callees, unknown names or unnamed operands
"""

from __future__ import annotations

import logging
from typing import List, Optional

from taint_core.models.config import AnalysisConfig
from taint_core.models.finding import Finding, REPORT_HEADER
from taint_core.models.program import Function, Instruction, InstructionKind, Program

from taint_audit.analysis.taint_state import TaintState

logger = logging.getLogger(__name__)


def copy_taint(source: str, destination: str, state: TaintState) -> None:
    """Give `destination` the current taint of `source` (last write wins)."""
    state.set_taint(destination, state.lookup(source))


class FindingsCollector:
    """Ordered list of findings discovered during one analysis run."""

    def __init__(self) -> None:
        self._findings: List[Finding] = []

    def record(self, finding: Finding) -> None:
        self._findings.append(finding)

    @property
    def findings(self) -> List[Finding]:
        """Copy of the findings in discovery order."""
        return list(self._findings)

    def __len__(self) -> int:
        return len(self._findings)

    def render(self) -> List[str]:
        """Render each finding as `<sink> at line <line>`."""
        return [finding.render() for finding in self._findings]

    def report(self) -> List[str]:
        """Header line followed by the rendered findings."""
        return [REPORT_HEADER] + self.render()


class CallInspector:
    """
    Applies sink and sanitizer semantics to call instructions.

    Sinks record a finding when any argument is tainted. Sanitizers clear
    taint on every tracked argument of the live state. All other calls,
    including indirect ones, have no effect.
    """

    def __init__(
        self,
        config: AnalysisConfig,
        collector: FindingsCollector,
        source_file: str = ""
    ) -> None:
        self.config = config
        self.collector = collector
        self.source_file = source_file

    def inspect(
        self,
        instruction: Instruction,
        state: TaintState,
        function_name: str = ""
    ) -> Optional[Finding]:
        """
        Process one call instruction against `state`.

        Returns the recorded finding, if any.
        """
        callee = instruction.callee
        if not callee:
            if self.config.debug:
                logger.debug(f"unresolved callee at line {instruction.line}, skipped")
            return None

        if self.config.debug:
            logger.debug(f"{instruction.describe()}\nname {callee}")

        if self.config.is_sink(callee):
            return self._check_sink(instruction, state, function_name)
        if self.config.is_sanitizer(callee):
            self._sanitize(instruction, state)
        return None

    def _check_sink(
        self,
        instruction: Instruction,
        state: TaintState,
        function_name: str
    ) -> Optional[Finding]:
        tainted = [arg for arg in instruction.arguments if state.lookup(arg)]

        if self.config.debug:
            for arg in instruction.arguments:
                logger.debug(f"in taintedArg {instruction.callee}: {arg or '<unnamed>'} {int(state.lookup(arg))}")

        if not tainted:
            return None

        finding = Finding(
            sink=instruction.callee or "",
            line=instruction.line,
            function=function_name,
            tainted_arguments=tuple(tainted),
            file_path=self.source_file,
            cwe_id=self.config.cwe_ids.get(instruction.callee or ""),
        )
        self.collector.record(finding)

        if self.config.debug:
            logger.debug(f"Tainted fn {finding.sink} line {finding.line}")
        return finding

    def _sanitize(self, instruction: Instruction, state: TaintState) -> None:
        for arg in instruction.arguments:
            if arg in state:
                state.set_taint(arg, False)
            if self.config.debug:
                logger.debug(f"{arg or '<unnamed>'} {int(state.lookup(arg))}")


class TaintAnalysisDriver:
    """
    Runs the analysis over every function of a program.

    Each run starts with an empty FindingsCollector, so a driver can be
    reused and re-running it on the same program yields the same findings.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        self.config = config or AnalysisConfig.default()
        self.collector = FindingsCollector()

    def run(self, program: Program) -> List[Finding]:
        """Analyze all functions in program order and return the findings."""
        self.collector = FindingsCollector()
        inspector = CallInspector(self.config, self.collector, program.source_file)

        for function in program.functions:
            self.analyze_function(function, inspector)

        logger.debug(
            f"Analyzed {len(program.functions)} functions"
            f"{' in ' + program.source_file if program.source_file else ''}: "
            f"{len(self.collector)} findings"
        )
        return self.collector.findings

    def analyze_function(self, function: Function, inspector: CallInspector) -> TaintState:
        """Analyze one function with a fresh TaintState and return it."""
        state = TaintState()
        state.seed_parameters(function.params)

        if self.config.debug:
            logger.debug(f"Hello from: {function.name}")
            for param in function.params:
                logger.debug(param or "<unnamed>")

        for instruction in function.instructions():
            self.dispatch(instruction, state, inspector, function.name)

        if self.config.debug:
            for name, tainted in state.items():
                logger.debug(f"{name} {int(tainted)}")

        return state

    def dispatch(
        self,
        instruction: Instruction,
        state: TaintState,
        inspector: CallInspector,
        function_name: str = ""
    ) -> None:
        """Route one instruction to the propagator or the call inspector."""
        kind = instruction.kind

        if kind in (InstructionKind.ASSIGN, InstructionKind.COPY):
            source, destination = instruction.source, instruction.destination
            copy_taint(source, destination, state)
            if self.config.debug:
                opname = "store" if kind == InstructionKind.ASSIGN else "load"
                logger.debug(instruction.describe())
                logger.debug(f"{opname} {source} {destination}")
                if source in state and destination in state:
                    logger.debug(
                        f"taint {source} {int(state.lookup(source))} "
                        f"{destination} {int(state.lookup(destination))}"
                    )
        elif kind == InstructionKind.CALL:
            inspector.inspect(instruction, state, function_name)

    def render(self) -> List[str]:
        """Report lines for the most recent run."""
        return self.collector.report()


def run_analysis(program: Program, config: Optional[AnalysisConfig] = None) -> List[Finding]:
    """Run the taint analysis on `program` and return findings in discovery order."""
    return TaintAnalysisDriver(config).run(program)
