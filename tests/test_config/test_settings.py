"""Tests for project configuration and baselines."""

import json
import logging

import pytest
import yaml

from taint_core.models.finding import Finding
from taint_audit.config.settings import (
    ConfigManager,
    create_default_config,
    filter_by_baseline,
    load_baseline,
    save_baseline,
)


class TestConfigManager:
    """Tests for ConfigManager."""

    @pytest.fixture
    def manager(self):
        return ConfigManager()

    def test_manager_initialization(self, manager):
        assert manager.config is None
        assert manager.loaded_from is None

    def test_no_config_found(self, manager, tmp_path):
        assert manager.load(tmp_path) is False
        assert manager.get_exclude_patterns() == []
        assert manager.fail_on_findings() is True

    def test_load_yaml_config(self, manager, tmp_path):
        config = {
            'sinks': ['sprintf'],
            'sanitizers': 'strnlen',
            'debug': True,
            'scan': {'exclude': ['build/**'], 'fail_on_findings': False},
        }
        config_file = tmp_path / ".taint-audit.yaml"
        config_file.write_text(yaml.dump(config))

        assert manager.load(tmp_path) is True
        assert manager.loaded_from == config_file
        assert manager.config.sinks == ['sprintf']
        assert manager.config.sanitizers == ['strnlen']
        assert manager.config.debug is True
        assert manager.get_exclude_patterns() == ['build/**']
        assert manager.fail_on_findings() is False

    def test_file_target_uses_parent_directory(self, manager, tmp_path):
        (tmp_path / "taint-audit.yaml").write_text("sinks: [gets]\n")
        target = tmp_path / "mod.ll"
        target.write_text("")

        assert manager.load(target) is True
        assert manager.config.sinks == ['gets']

    def test_config_found_in_parent_directory(self, manager, tmp_path):
        (tmp_path / ".taint-audit.yml").write_text("sinks: [gets]\n")
        nested = tmp_path / "src" / "lib"
        nested.mkdir(parents=True)

        assert manager.load(nested) is True

    def test_empty_sections(self, manager, tmp_path):
        (tmp_path / ".taint-audit.yaml").write_text("sinks:\nsanitizers:\nscan:\n")

        assert manager.load(tmp_path) is True
        assert manager.config.sinks == []
        assert manager.get_exclude_patterns() == []
        assert manager.fail_on_findings() is True

    def test_invalid_yaml_is_ignored(self, manager, tmp_path):
        (tmp_path / ".taint-audit.yaml").write_text("sinks: [unclosed\n")
        assert manager.load(tmp_path) is False
        assert manager.config is None

    def test_non_mapping_is_ignored(self, manager, tmp_path):
        (tmp_path / ".taint-audit.yaml").write_text("- a\n- b\n")
        assert manager.load(tmp_path) is False

    @pytest.mark.parametrize("body", [
        "sinks: 5\n",
        "sanitizers: {strlen: true}\n",
        "scan: build\n",
        "scan:\n  exclude: 3\n",
    ])
    def test_wrong_value_types_are_ignored(self, manager, tmp_path, caplog, body):
        (tmp_path / ".taint-audit.yaml").write_text(body)

        with caplog.at_level(logging.WARNING):
            assert manager.load(tmp_path) is False

        assert manager.config is None
        assert manager.loaded_from is None
        assert "Ignoring" in caplog.text
        assert manager.build_analysis_config().sinks == frozenset({"memcpy", "strcpy", "strcat"})

    def test_default_analysis_config(self, manager):
        config = manager.build_analysis_config()

        assert config.sinks == frozenset({"memcpy", "strcpy", "strcat"})
        assert config.sanitizers == frozenset({"strlen"})
        assert config.cwe_ids["strcpy"] == "CWE-120"
        assert config.debug is False

    def test_project_and_cli_names_are_added(self, manager, tmp_path):
        (tmp_path / ".taint-audit.yaml").write_text("sinks: [sprintf]\nsanitizers: [strnlen]\n")
        manager.load(tmp_path)

        config = manager.build_analysis_config(extra_sinks=["system"], debug=True)

        assert {"memcpy", "sprintf", "system"} <= config.sinks
        assert {"strlen", "strnlen"} <= config.sanitizers
        assert config.debug is True

    def test_disable_builtin_rules(self, manager, tmp_path):
        (tmp_path / ".taint-audit.yaml").write_text("use_builtin_rules: false\nsinks: [sink]\n")
        manager.load(tmp_path)

        config = manager.build_analysis_config()

        assert config.sinks == frozenset({"sink"})
        assert config.sanitizers == frozenset()

    def test_rules_dirs_relative_to_config_file(self, manager, tmp_path):
        rules = tmp_path / "rules"
        rules.mkdir()
        (rules / "extra.yaml").write_text(
            "functions:\n  - {name: gets, role: sink, cwe: CWE-242}\n"
        )
        (tmp_path / ".taint-audit.yaml").write_text("rules_dirs: [rules]\n")
        manager.load(tmp_path)

        config = manager.build_analysis_config()

        assert "gets" in config.sinks
        assert config.cwe_ids["gets"] == "CWE-242"

    def test_project_debug_flag(self, manager, tmp_path):
        (tmp_path / ".taint-audit.yaml").write_text("debug: true\n")
        manager.load(tmp_path)

        assert manager.build_analysis_config().debug is True


class TestDefaultConfig:
    """Tests for the generated config template."""

    def test_template_is_valid_yaml(self):
        data = yaml.safe_load(create_default_config())

        assert data['use_builtin_rules'] is True
        assert data['scan']['exclude'] == ["build/**", "**/third_party/**"]

    def test_template_loads(self, tmp_path):
        (tmp_path / ".taint-audit.yaml").write_text(create_default_config())
        manager = ConfigManager()

        assert manager.load(tmp_path) is True
        assert manager.config.sinks == []


class TestBaseline:
    """Tests for baseline save / load / filter."""

    @pytest.fixture
    def findings(self):
        return [
            Finding("strcpy", 6, function="copy_input", file_path="a.ll"),
            Finding("strcat", 20, function="main", file_path="a.ll"),
        ]

    def test_save_and_load(self, findings, tmp_path):
        path = tmp_path / "baseline.json"
        save_baseline(findings, path)

        data = json.loads(path.read_text())
        assert data["version"] == "1.0"
        assert load_baseline(path) == {f.fingerprint() for f in findings}

    def test_filter_by_baseline(self, findings, tmp_path):
        path = tmp_path / "baseline.json"
        save_baseline(findings[:1], path)

        remaining = filter_by_baseline(findings, load_baseline(path))

        assert [f.sink for f in remaining] == ["strcat"]

    def test_missing_baseline_is_empty(self, tmp_path):
        assert load_baseline(tmp_path / "nope.json") == set()

    def test_corrupt_baseline_is_empty(self, tmp_path):
        path = tmp_path / "baseline.json"
        path.write_text("not json")
        assert load_baseline(path) == set()
