"""Program representation consumed by the taint analysis.

A program is a sequence of functions, each a sequence of basic blocks, each a
sequence of instructions. Front-ends build these objects; the analysis only
reads them.

Operand and result names use the empty string for values that have no
identifier (constants, numbered temporaries). Such values are never tracked.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional


class InstructionKind(Enum):
    """Instruction kinds the analysis distinguishes."""
    ASSIGN = "assign"  # store-like: operands[0] written into operands[1]
    COPY = "copy"      # load-like: operands[0] read into result
    CALL = "call"      # operands are the ordered call arguments
    OTHER = "other"    # arithmetic, compares, branches... no taint effect

    @classmethod
    def parse(cls, value: str) -> "InstructionKind":
        """Parse a kind name, accepting the LLVM opcode aliases."""
        aliases = {
            "store": cls.ASSIGN,
            "load": cls.COPY,
        }
        lowered = value.strip().lower()
        if lowered in aliases:
            return aliases[lowered]
        return cls(lowered)


@dataclass
class Instruction:
    """A single instruction with the operand names the analysis needs."""
    kind: InstructionKind
    line: int = 0
    operands: List[str] = field(default_factory=list)
    result: str = ""
    callee: Optional[str] = None  # None for indirect / unresolved calls
    text: str = ""                # original source text, for display only

    @property
    def source(self) -> str:
        """Name the taint is copied from (ASSIGN and COPY)."""
        return self.operands[0] if self.operands else ""

    @property
    def destination(self) -> str:
        """Name the taint is copied to (ASSIGN and COPY)."""
        if self.kind == InstructionKind.COPY:
            return self.result
        if self.kind == InstructionKind.ASSIGN and len(self.operands) > 1:
            return self.operands[1]
        return ""

    @property
    def arguments(self) -> List[str]:
        """Call arguments in order."""
        return self.operands if self.kind == InstructionKind.CALL else []

    def describe(self) -> str:
        """Short human readable form used by debug traces and `inspect`."""
        if self.text:
            return self.text
        if self.kind == InstructionKind.ASSIGN:
            return f"store {self.source or '<unnamed>'} -> {self.destination or '<unnamed>'}"
        if self.kind == InstructionKind.COPY:
            return f"{self.destination or '<unnamed>'} = load {self.source or '<unnamed>'}"
        if self.kind == InstructionKind.CALL:
            args = ", ".join(a or "<unnamed>" for a in self.operands)
            return f"call {self.callee or '<indirect>'}({args})"
        return self.kind.value


@dataclass
class BasicBlock:
    """Straight-line sequence of instructions."""
    label: str
    instructions: List[Instruction] = field(default_factory=list)


@dataclass
class Function:
    """A function definition with named parameters and blocks in layout order."""
    name: str
    params: List[str] = field(default_factory=list)
    blocks: List[BasicBlock] = field(default_factory=list)

    def instructions(self) -> Iterator[Instruction]:
        """Iterate instructions in block layout order, then block order."""
        for block in self.blocks:
            yield from block.instructions

    @property
    def instruction_count(self) -> int:
        return sum(len(block.instructions) for block in self.blocks)


@dataclass
class Program:
    """An analyzed unit: functions in program order."""
    functions: List[Function] = field(default_factory=list)
    source_file: str = ""

    def get_function(self, name: str) -> Optional[Function]:
        for func in self.functions:
            if func.name == name:
                return func
        return None
