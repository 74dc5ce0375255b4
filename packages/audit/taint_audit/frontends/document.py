"""Reader for JSON / YAML program documents.

Document shape:

    functions:
      - name: f
        params: [x]
        blocks:
          - label: entry
            instructions:
              - {kind: copy, line: 5, operands: [x], result: y}
              - {kind: call, line: 10, callee: memcpy, operands: [y]}

A function may list `instructions` directly instead of `blocks`; they form a
single block labelled `entry`. Instructions also accept `source` /
`destination` for assign and copy, and `args` for calls.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from taint_core.models.program import (
    BasicBlock, Function, Instruction, InstructionKind, Program
)
from taint_audit.frontends.base import BaseFrontend, FrontendError

logger = logging.getLogger(__name__)


def _name(value: Any) -> str:
    """Operand name; null and non-string values are unnamed."""
    return value if isinstance(value, str) else ""


def _names(entry: Dict[str, Any], key: str, path: Path, owner: str) -> List[str]:
    """Names listed under `key`; a missing or null value is an empty list."""
    value = entry.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise FrontendError(path, f"{owner}: '{key}' must be a list")
    return [_name(v) for v in value]


def _line(value: Any, path: Path, owner: str) -> int:
    """Source line; missing means 0. Booleans and fractional numbers are rejected."""
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise FrontendError(path, f"{owner}: invalid line {value!r}")
    try:
        return int(value)
    except ValueError as e:
        raise FrontendError(path, f"{owner}: invalid line {value!r}") from e


class DocumentFrontend(BaseFrontend):
    """Reads programs serialized as JSON or YAML documents."""

    name = "document"
    suffixes = (".json", ".yaml", ".yml")

    def parse(self, text: str, path: Path) -> Program:
        try:
            if path.suffix.lower() == ".json":
                data = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except json.JSONDecodeError as e:
            raise FrontendError(path, f"invalid JSON: {e}") from e
        except yaml.YAMLError as e:
            raise FrontendError(path, f"invalid YAML: {e}") from e

        return self.build_program(data, path)

    def build_program(self, data: Any, path: Path) -> Program:
        """Build a Program from already decoded document data."""
        if not isinstance(data, dict) or not isinstance(data.get("functions"), list):
            raise FrontendError(path, "expected a mapping with a 'functions' list")

        functions = [
            self._build_function(entry, path, index)
            for index, entry in enumerate(data["functions"])
        ]
        return Program(functions=functions)

    def _build_function(self, entry: Any, path: Path, index: int) -> Function:
        if not isinstance(entry, dict):
            raise FrontendError(path, f"function #{index} is not a mapping")

        name = entry.get("name") or f"<function {index}>"
        params = _names(entry, "params", path, name)

        blocks: List[BasicBlock] = []
        if "blocks" in entry:
            for block_index, block in enumerate(entry.get("blocks") or []):
                if not isinstance(block, dict):
                    raise FrontendError(path, f"{name}: block #{block_index} is not a mapping")
                blocks.append(BasicBlock(
                    label=str(block.get("label", block_index)),
                    instructions=self._build_instructions(block.get("instructions"), path, name),
                ))
        elif "instructions" in entry:
            blocks.append(BasicBlock(
                label="entry",
                instructions=self._build_instructions(entry.get("instructions"), path, name),
            ))

        return Function(name=name, params=params, blocks=blocks)

    def _build_instructions(self, entries: Any, path: Path, func_name: str) -> List[Instruction]:
        if entries is None:
            return []
        if not isinstance(entries, list):
            raise FrontendError(path, f"{func_name}: 'instructions' must be a list")
        return [self._build_instruction(e, path, func_name) for e in entries]

    def _build_instruction(self, entry: Dict[str, Any], path: Path, func_name: str) -> Instruction:
        if not isinstance(entry, dict) or "kind" not in entry:
            raise FrontendError(path, f"{func_name}: instruction without 'kind': {entry!r}")

        try:
            kind = InstructionKind.parse(str(entry["kind"]))
        except ValueError as e:
            raise FrontendError(path, f"{func_name}: unknown instruction kind '{entry['kind']}'") from e

        line = _line(entry.get("line"), path, func_name)

        result = _name(entry.get("result"))
        if "operands" in entry:
            operands = _names(entry, "operands", path, func_name)
        elif kind == InstructionKind.ASSIGN:
            operands = [_name(entry.get("source")), _name(entry.get("destination"))]
        elif kind == InstructionKind.COPY:
            operands = [_name(entry.get("source"))]
            result = result or _name(entry.get("destination"))
        elif kind == InstructionKind.CALL:
            operands = _names(entry, "args", path, func_name)
        else:
            operands = []

        callee = entry.get("callee")
        return Instruction(
            kind=kind,
            line=line,
            operands=operands,
            result=result,
            callee=callee if isinstance(callee, str) and callee else None,
            text=str(entry.get("text", "")),
        )
