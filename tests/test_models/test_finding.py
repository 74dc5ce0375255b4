"""Tests for the Finding model and AnalysisConfig."""

import pytest

from taint_core.models.config import AnalysisConfig
from taint_core.models.finding import Finding, REPORT_HEADER


class TestFinding:
    """Tests for Finding."""

    def test_render(self):
        assert Finding("memcpy", 42).render() == "memcpy at line 42"

    def test_render_line_zero(self):
        assert Finding("strcpy", 0).render() == "strcpy at line 0"

    def test_report_header(self):
        assert REPORT_HEADER == "WARNING: Tainted arguments passed to these functions:"

    def test_equality_uses_sink_and_line(self):
        a = Finding("strcpy", 6, function="f", tainted_arguments=("x",))
        b = Finding("strcpy", 6, function="g")

        assert a == b
        assert a != Finding("strcpy", 7)
        assert a.as_pair() == ("strcpy", 6)

    def test_findings_are_immutable(self):
        finding = Finding("strcpy", 6)
        with pytest.raises(AttributeError):
            finding.line = 7

    def test_file_path_normalized(self):
        finding = Finding("strcpy", 6, file_path="src\\mod.ll")
        assert finding.file_path == "src/mod.ll"

    def test_fingerprint_stable(self):
        a = Finding("strcpy", 6, function="f", file_path="a.ll")
        b = Finding("strcpy", 6, function="f", file_path="a.ll", tainted_arguments=("x",))

        assert a.fingerprint() == b.fingerprint()
        assert len(a.fingerprint()) == 16
        assert a.fingerprint() != Finding("strcpy", 6, function="g", file_path="a.ll").fingerprint()

    def test_to_dict(self):
        finding = Finding("strcat", 20, function="main", tainted_arguments=("tmp2",),
                          file_path="v.ll", cwe_id="CWE-120")

        assert finding.to_dict() == {
            "sink": "strcat",
            "line": 20,
            "function": "main",
            "tainted_arguments": ["tmp2"],
            "file_path": "v.ll",
            "cwe_id": "CWE-120",
            "message": "strcat at line 20",
        }

    def test_to_sarif(self):
        sarif = Finding("strcat", 20, function="main", tainted_arguments=("tmp2",),
                        file_path="v.ll", cwe_id="CWE-120").to_sarif()

        assert sarif["ruleId"] == "tainted-arg/strcat"
        assert sarif["message"]["text"] == "Tainted tmp2 passed to 'strcat' in 'main'"
        assert sarif["properties"] == {"cwe": "CWE-120"}

    def test_to_sarif_without_location_info(self):
        sarif = Finding("strcpy", 0).to_sarif()
        location = sarif["locations"][0]

        assert location["physicalLocation"]["region"]["startLine"] == 1
        assert location["physicalLocation"]["artifactLocation"]["uri"] == "<unknown>"
        assert "logicalLocations" not in location
        assert "properties" not in sarif


class TestAnalysisConfig:
    """Tests for AnalysisConfig."""

    def test_default(self):
        config = AnalysisConfig.default()

        assert config.sinks == frozenset({"memcpy", "strcpy", "strcat"})
        assert config.sanitizers == frozenset({"strlen"})
        assert config.debug is False

    def test_create_drops_empty_names(self):
        config = AnalysisConfig.create(["sink", ""], ["", "clean"])

        assert config.sinks == frozenset({"sink"})
        assert config.sanitizers == frozenset({"clean"})

    def test_membership(self):
        config = AnalysisConfig.create(["sink"], ["clean"])

        assert config.is_sink("sink")
        assert not config.is_sink("clean")
        assert config.is_sanitizer("clean")
        assert not config.is_sink(None)
        assert not config.is_sanitizer("")

    def test_with_overrides(self):
        base = AnalysisConfig.create(["a"], ["b"], cwe_ids={"a": "CWE-1"})
        config = base.with_overrides(sinks=["c"], sanitizers=["d"], debug=True)

        assert config.sinks == frozenset({"a", "c"})
        assert config.sanitizers == frozenset({"b", "d"})
        assert config.debug is True
        assert config.cwe_ids == {"a": "CWE-1"}
        assert base.sinks == frozenset({"a"})
        assert base.debug is False

    def test_with_overrides_keeps_debug(self):
        config = AnalysisConfig.create([], [], debug=True).with_overrides()
        assert config.debug is True
