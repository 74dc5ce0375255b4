"""Reader for textual LLVM IR (.ll files).

Only what the taint analysis needs is decoded:
- `store T %v, ptr %p`          -> ASSIGN  operands [v, p]
- `%d = load T, ptr %p`         -> COPY    operands [p], result d
- `call T @f(args)` / `invoke`  -> CALL    callee f, operands = args
- anything else                 -> OTHER

Numbered values (`%0`, `%12`) and constants have no name, matching what
LLVM reports for them. Source lines come from `!dbg` attachments resolved
against `!DILocation` metadata, and are 0 when missing.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from taint_core.models.program import (
    BasicBlock, Function, Instruction, InstructionKind, Program
)
from taint_audit.frontends.base import BaseFrontend

logger = logging.getLogger(__name__)

_IDENT = r'(?:[-a-zA-Z$._][-a-zA-Z$._0-9]*|"[^"]*"|\d+)'

DEFINE_RE = re.compile(r'^define\b[^@]*@(' + _IDENT + r')\s*\(')
LABEL_RE = re.compile(r'^(' + r'[-a-zA-Z$._0-9]+|"[^"]*"' + r'):')
ASSIGNED_RE = re.compile(r'^%(' + _IDENT + r')\s*=\s*(.*)$')
CALLEE_RE = re.compile(r'([@%]' + _IDENT + r')\s*\(')
DBG_RE = re.compile(r'!dbg\s+!(\d+)')
DILOCATION_RE = re.compile(r'^!(\d+)\s*=\s*(?:distinct\s+)?!DILocation\(.*?\bline:\s*(\d+)')

ATOMIC_ORDERINGS = {"unordered", "monotonic", "acquire", "release", "acq_rel", "seq_cst"}

_OPENERS = {"(": ")", "[": "]", "{": "}", "<": ">"}
_CLOSERS = set(_OPENERS.values())


def split_top_level(text: str) -> List[str]:
    """Split on commas that are not nested in brackets or quotes."""
    parts: List[str] = []
    depth = 0
    in_quote = False
    current: List[str] = []
    for ch in text:
        if ch == '"':
            in_quote = not in_quote
        elif not in_quote:
            if ch in _OPENERS:
                depth += 1
            elif ch in _CLOSERS and depth > 0:
                depth -= 1
            elif ch == "," and depth == 0:
                parts.append("".join(current).strip())
                current = []
                continue
        current.append(ch)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return parts


def balanced_span(text: str, open_index: int) -> Tuple[str, int]:
    """
    Return the contents of the parenthesis opened at `open_index` and the
    index just past its closing parenthesis.
    """
    depth = 0
    in_quote = False
    for i in range(open_index, len(text)):
        ch = text[i]
        if ch == '"':
            in_quote = not in_quote
        elif not in_quote:
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    return text[open_index + 1:i], i + 1
    return text[open_index + 1:], len(text)


def strip_comment(line: str) -> str:
    in_quote = False
    for i, ch in enumerate(line):
        if ch == '"':
            in_quote = not in_quote
        elif ch == ";" and not in_quote:
            return line[:i]
    return line


def value_name(token: str) -> str:
    """Name of an IR value token; empty for numbered values and constants."""
    token = token.strip()
    if len(token) < 2 or token[0] not in "%@":
        return ""
    name = token[1:]
    if name.startswith('"') and name.endswith('"'):
        return name[1:-1]
    if name.isdigit():
        return ""
    return name


def operand_name(typed_operand: str) -> str:
    """Name of the value in a `<type> [attrs] <value>` operand."""
    tokens = [
        t for t in typed_operand.split()
        if t not in ATOMIC_ORDERINGS and not t.startswith("syncscope(")
    ]
    if not tokens:
        return ""
    return value_name(tokens[-1])


class LLVMIRFrontend(BaseFrontend):
    """Decodes textual LLVM IR into a Program."""

    name = "llvm-ir"
    suffixes = (".ll",)

    def parse(self, text: str, path: Path) -> Program:
        lines = text.splitlines()
        locations = self._collect_locations(lines)

        functions: List[Function] = []
        current: Optional[Function] = None

        for raw in lines:
            line = strip_comment(raw).strip()
            if not line:
                continue

            if current is None:
                define = DEFINE_RE.match(line)
                if define:
                    current = Function(
                        name=value_name("@" + define.group(1)),
                        params=self._parse_params(line, define.end() - 1),
                    )
                    functions.append(current)
                    if line.endswith("}"):
                        current = None
                continue

            if line == "}":
                current = None
                continue

            label = LABEL_RE.match(line)
            if label:
                current.blocks.append(BasicBlock(label=label.group(1).strip('"')))
                continue

            if not current.blocks:
                current.blocks.append(BasicBlock(label="entry"))
            current.blocks[-1].instructions.append(self.parse_instruction(line, locations))

        logger.debug(f"Decoded {len(functions)} functions from {path}")
        return Program(functions=functions)

    def _collect_locations(self, lines: List[str]) -> Dict[str, int]:
        """Map debug metadata ids to source lines."""
        locations: Dict[str, int] = {}
        for raw in lines:
            match = DILOCATION_RE.match(raw.strip())
            if match:
                locations[match.group(1)] = int(match.group(2))
        return locations

    def _parse_params(self, line: str, open_index: int) -> List[str]:
        params_text, _ = balanced_span(line, open_index)
        return [operand_name(param) for param in split_top_level(params_text) if param != "..."]

    def parse_instruction(self, line: str, locations: Dict[str, int]) -> Instruction:
        """Decode one instruction line."""
        dbg = DBG_RE.search(line)
        source_line = locations.get(dbg.group(1), 0) if dbg else 0

        result = ""
        body = line
        assigned = ASSIGNED_RE.match(line)
        if assigned:
            result = value_name("%" + assigned.group(1))
            body = assigned.group(2)

        opcode_tokens = body.split(None, 1)
        opcode = opcode_tokens[0] if opcode_tokens else ""
        rest = opcode_tokens[1] if len(opcode_tokens) > 1 else ""

        if opcode == "store":
            operands = self._store_operands(rest)
            return Instruction(InstructionKind.ASSIGN, source_line, operands, text=line)

        if opcode == "load":
            return Instruction(
                InstructionKind.COPY, source_line, self._load_operands(rest),
                result=result, text=line,
            )

        if self._is_call(opcode, body):
            callee, args = self._call_target(body)
            return Instruction(
                InstructionKind.CALL, source_line, args,
                result=result, callee=callee, text=line,
            )

        return Instruction(InstructionKind.OTHER, source_line, result=result, text=line)

    @staticmethod
    def _is_call(opcode: str, body: str) -> bool:
        if opcode in ("call", "invoke"):
            return True
        # tail / musttail / notail prefixes
        return opcode in ("tail", "musttail", "notail") and " call " in f" {body} "

    @staticmethod
    def _store_operands(rest: str) -> List[str]:
        parts = split_top_level(rest)
        values = [p for p in parts if not p.startswith(("align", "!"))]
        value = values[0] if values else ""
        pointer = values[1] if len(values) > 1 else ""
        return [operand_name(value), operand_name(pointer)]

    @staticmethod
    def _load_operands(rest: str) -> List[str]:
        # load [atomic] [volatile] <ty>, ptr <pointer>, ...
        parts = split_top_level(rest)
        pointer = parts[1] if len(parts) > 1 else ""
        return [operand_name(pointer)]

    @staticmethod
    def _call_target(body: str) -> Tuple[Optional[str], List[str]]:
        """Resolve the callee and the argument names of a call."""
        call_at = body.find("call ") if not body.startswith("invoke") else 0
        match = CALLEE_RE.search(body, max(call_at, 0))
        if not match:
            # inline asm or an unparseable target
            return None, []

        target = match.group(1)
        args_text, _ = balanced_span(body, match.end() - 1)
        args = [operand_name(arg) for arg in split_top_level(args_text)]

        if target.startswith("@"):
            return value_name(target) or None, args
        return None, args
