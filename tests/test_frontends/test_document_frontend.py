"""Tests for the JSON / YAML program front-end and file collection."""

from pathlib import Path

import pytest

from taint_core.models.config import AnalysisConfig
from taint_core.models.program import InstructionKind
from taint_audit.analysis import run_analysis
from taint_audit.frontends import (
    DocumentFrontend,
    FrontendError,
    LLVMIRFrontend,
    collect_files,
    default_frontends,
    frontend_for,
)


@pytest.fixture
def frontend():
    return DocumentFrontend()


class TestDocumentFrontend:
    """Tests for DocumentFrontend."""

    def test_scenarios(self, frontend, programs_path):
        program = frontend.load(programs_path / "scenarios.yaml")
        config = AnalysisConfig.create(sinks=["sink"], sanitizers=["sanitize"])

        findings = run_analysis(program, config)

        assert [f.name for f in program.functions] == ["f", "g", "h", "k"]
        assert [(f.function, f.sink, f.line) for f in findings] == [
            ("f", "sink", 10),
            ("h", "sink", 3),
            ("h", "sink", 8),
        ]

    def test_shorthand_fields(self, frontend, programs_path):
        program = frontend.load(programs_path / "scenarios.yaml")
        copy, call = program.get_function("f").blocks[0].instructions

        assert copy.kind == InstructionKind.COPY
        assert (copy.source, copy.destination) == ("x", "y")
        assert call.callee == "sink"
        assert call.arguments == ["y"]

    def test_null_source_is_unnamed(self, frontend, programs_path):
        program = frontend.load(programs_path / "scenarios.yaml")
        store = program.get_function("k").blocks[0].instructions[0]

        assert store.kind == InstructionKind.ASSIGN
        assert store.operands == ["", "y"]

    def test_blocks_document(self, frontend, programs_path):
        program = frontend.load(programs_path / "blocks.json")
        func = program.get_function("loop_copy")

        assert [b.label for b in func.blocks] == ["entry", "body"]
        findings = run_analysis(program)
        assert [f.as_pair() for f in findings] == [("memcpy", 6)]
        assert findings[0].tainted_arguments == ("cur", "len")

    def test_null_callee_is_unresolved(self, frontend, programs_path):
        program = frontend.load(programs_path / "blocks.json")
        last = program.get_function("loop_copy").blocks[1].instructions[-1]

        assert last.callee is None

    def test_unknown_kind_raises(self, frontend, broken_path):
        with pytest.raises(FrontendError, match="unknown instruction kind"):
            frontend.load(broken_path / "bad.json")

    def test_invalid_json_raises(self, frontend):
        with pytest.raises(FrontendError, match="invalid JSON"):
            frontend.parse("{not json", Path("x.json"))

    def test_invalid_yaml_raises(self, frontend):
        with pytest.raises(FrontendError, match="invalid YAML"):
            frontend.parse("functions: [unclosed", Path("x.yaml"))

    @pytest.mark.parametrize("data", [None, [], {"functions": "f"}, {"other": []}])
    def test_wrong_shape_raises(self, frontend, data):
        with pytest.raises(FrontendError):
            frontend.build_program(data, Path("x.json"))

    def test_missing_kind_raises(self, frontend):
        data = {"functions": [{"name": "f", "instructions": [{"line": 1}]}]}
        with pytest.raises(FrontendError, match="without 'kind'"):
            frontend.build_program(data, Path("x.json"))

    def test_invalid_line_raises(self, frontend):
        data = {"functions": [{"name": "f", "instructions": [{"kind": "call", "line": "ten"}]}]}
        with pytest.raises(FrontendError, match="invalid line"):
            frontend.build_program(data, Path("x.json"))

    @pytest.mark.parametrize("key", ["params", "operands", "args"])
    def test_name_lists_must_be_lists(self, frontend, key):
        func = {"name": "f", "params": ["ab"],
                "instructions": [{"kind": "call", "line": 1, "callee": "sink", "args": ["ab"]}]}
        if key == "params":
            func["params"] = "ab"
        else:
            func["instructions"][0][key] = "ab"

        with pytest.raises(FrontendError, match=f"'{key}' must be a list"):
            frontend.build_program({"functions": [func]}, Path("x.yaml"))

    def test_null_name_lists_are_empty(self, frontend):
        data = {"functions": [{"name": "f", "params": None,
                               "instructions": [{"kind": "call", "callee": "sink", "args": None}]}]}
        func = frontend.build_program(data, Path("x.yaml")).functions[0]

        assert func.params == []
        assert func.blocks[0].instructions[0].arguments == []

    @pytest.mark.parametrize("line", [True, 3.7, [4]])
    def test_non_integer_line_raises(self, frontend, line):
        data = {"functions": [{"name": "f", "instructions": [{"kind": "call", "line": line}]}]}
        with pytest.raises(FrontendError, match="invalid line"):
            frontend.build_program(data, Path("x.json"))

    @pytest.mark.parametrize("line,expected", [(None, 0), (12, 12), ("7", 7)])
    def test_integer_lines_accepted(self, frontend, line, expected):
        data = {"functions": [{"name": "f", "instructions": [{"kind": "call", "line": line}]}]}
        inst = frontend.build_program(data, Path("x.json")).functions[0].blocks[0].instructions[0]

        assert inst.line == expected

    def test_frontend_error_is_value_error(self):
        assert issubclass(FrontendError, ValueError)

    def test_unreadable_file_raises(self, frontend, tmp_path):
        with pytest.raises(FrontendError, match="cannot read file"):
            frontend.load(tmp_path / "missing.json")


class TestCollectFiles:
    """Tests for collect_files and front-end selection."""

    def test_collects_supported_files_sorted(self, programs_path):
        files = collect_files(programs_path, default_frontends())

        assert [f.name for f in files] == [
            "blocks.json", "clean.ll", "scenarios.yaml", "vulnerable.ll"
        ]

    def test_skips_unsupported_files(self, broken_path):
        files = collect_files(broken_path, default_frontends())
        assert [f.name for f in files] == ["bad.json"]

    def test_exclude_patterns(self, programs_path):
        files = collect_files(programs_path, default_frontends(), ["*.ll"])
        assert [f.name for f in files] == ["blocks.json", "scenarios.yaml"]

    def test_exclude_directory_pattern(self, tmp_path):
        (tmp_path / "build").mkdir()
        (tmp_path / "build" / "gen.ll").write_text("")
        (tmp_path / "main.ll").write_text("")

        files = collect_files(tmp_path, default_frontends(), ["build/**"])

        assert [f.name for f in files] == ["main.ll"]

    def test_single_file_returned(self, vulnerable_ll):
        assert collect_files(vulnerable_ll, default_frontends(), ["*.ll"]) == [vulnerable_ll]

    def test_frontend_for(self):
        assert isinstance(frontend_for(Path("a.ll")), LLVMIRFrontend)
        assert isinstance(frontend_for(Path("a.YML")), DocumentFrontend)
        assert frontend_for(Path("a.txt")) is None
