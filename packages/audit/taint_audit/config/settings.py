"""
Project configuration management.

Handles:
- Loading .taint-audit.yaml configuration
- Combining built-in rules, project config and CLI options into an
  AnalysisConfig
- Baseline support
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Set

import yaml

from taint_core.models.config import AnalysisConfig
from taint_core.models.finding import Finding
from taint_core.rules.loader import RuleLoader

from taint_audit.rules import BUILTIN_RULES_DIR

logger = logging.getLogger(__name__)


@dataclass
class ScanSettings:
    """Scan settings from the `scan:` section."""
    exclude: List[str] = field(default_factory=list)
    fail_on_findings: bool = True


@dataclass
class ProjectConfig:
    """Contents of a .taint-audit.yaml file."""
    sinks: List[str] = field(default_factory=list)
    sanitizers: List[str] = field(default_factory=list)
    debug: bool = False
    use_builtin_rules: bool = True
    rules_dirs: List[str] = field(default_factory=list)
    scan: ScanSettings = field(default_factory=ScanSettings)


def _string_list(key: str, value) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise TypeError(f"'{key}' must be a string or a list, got {type(value).__name__}")
    return [str(v) for v in value if v]


class ConfigManager:
    """
    Loads project configuration and builds the analysis configuration.

    The sink and sanitizer sets are the union of the built-in rules, any
    rule directories, the project config and CLI options.
    """

    CONFIG_FILENAMES = ['.taint-audit.yaml', '.taint-audit.yml', 'taint-audit.yaml']

    def __init__(self):
        self.config: Optional[ProjectConfig] = None
        self._loaded_from: Optional[Path] = None

    @property
    def loaded_from(self) -> Optional[Path]:
        return self._loaded_from

    def load(self, project_path: Path) -> bool:
        """
        Load configuration for a project.

        Searches for config in:
        1. The scan target directory (or its parent for a file target)
        2. Current working directory (if different)
        3. Parent directories up to filesystem root

        Returns:
            True if configuration was loaded successfully
        """
        project_path = project_path.resolve()
        if project_path.is_file():
            project_path = project_path.parent
        cwd = Path.cwd().resolve()

        search_paths: List[Path] = [project_path]
        if cwd != project_path:
            search_paths.append(cwd)

        parent = project_path.parent
        while parent != parent.parent:
            if parent not in search_paths:
                search_paths.append(parent)
            parent = parent.parent

        for search_path in search_paths:
            for filename in self.CONFIG_FILENAMES:
                config_path = search_path / filename
                if config_path.exists():
                    return self.load_file(config_path)

        return False

    def load_file(self, path: Path) -> bool:
        """Load configuration from a specific file."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.warning(f"Failed to parse {path}: {e}")
            return False
        except OSError as e:
            logger.warning(f"Error loading {path}: {e}")
            return False

        if not isinstance(data, dict):
            logger.warning(f"Ignoring {path}: expected a mapping")
            return False

        try:
            self.config = self._build_config(data)
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring {path}: {e}")
            return False
        self._loaded_from = path
        logger.debug(f"Loaded config from {path}")
        return True

    @staticmethod
    def _build_config(data: dict) -> ProjectConfig:
        """
        Convert a parsed config mapping into a ProjectConfig.

        Raises:
            TypeError: if a key holds a value of the wrong type
        """
        # Handle None values from empty YAML sections
        scan_data = data.get('scan') or {}
        if not isinstance(scan_data, dict):
            raise TypeError(f"'scan' must be a mapping, got {type(scan_data).__name__}")
        fail_on_findings = scan_data.get('fail_on_findings')
        return ProjectConfig(
            sinks=_string_list('sinks', data.get('sinks')),
            sanitizers=_string_list('sanitizers', data.get('sanitizers')),
            debug=bool(data.get('debug', False)),
            use_builtin_rules=data.get('use_builtin_rules', True) is not False,
            rules_dirs=_string_list('rules_dirs', data.get('rules_dirs')),
            scan=ScanSettings(
                exclude=_string_list('scan.exclude', scan_data.get('exclude')),
                fail_on_findings=fail_on_findings is not False,
            ),
        )

    def get_exclude_patterns(self) -> List[str]:
        if self.config:
            return self.config.scan.exclude
        return []

    def fail_on_findings(self) -> bool:
        return self.config.scan.fail_on_findings if self.config else True

    def _rule_directories(self, extra_rules_dirs: Iterable[Path]) -> List[Path]:
        dirs: List[Path] = []
        if not self.config or self.config.use_builtin_rules:
            dirs.append(BUILTIN_RULES_DIR)
        if self.config:
            base = self._loaded_from.parent if self._loaded_from else Path.cwd()
            for rules_dir in self.config.rules_dirs:
                dirs.append((base / rules_dir).resolve())
        dirs.extend(extra_rules_dirs)
        return dirs

    def build_analysis_config(
        self,
        extra_sinks: Iterable[str] = (),
        extra_sanitizers: Iterable[str] = (),
        rules_dirs: Iterable[Path] = (),
        debug: bool = False
    ) -> AnalysisConfig:
        """Combine rules, project config and CLI options."""
        loader = RuleLoader()
        for rules_dir in self._rule_directories(rules_dirs):
            loader.add_rules_directory(rules_dir)
        loader.load_all_rules()

        config = loader.build_config()
        if self.config:
            config = config.with_overrides(
                sinks=self.config.sinks,
                sanitizers=self.config.sanitizers,
            )
        project_debug = self.config.debug if self.config else False
        return config.with_overrides(
            sinks=extra_sinks,
            sanitizers=extra_sanitizers,
            debug=debug or project_debug,
        )


# Baseline support

def save_baseline(findings: List[Finding], output_path: Path):
    """
    Save findings as a baseline file.

    Args:
        findings: Findings to record
        output_path: Path to save the baseline file
    """
    baseline = {
        "version": "1.0",
        "created_at": datetime.now(timezone.utc).isoformat(),
        "fingerprints": [f.fingerprint() for f in findings]
    }
    output_path.write_text(json.dumps(baseline, indent=2), encoding="utf-8")


def load_baseline(baseline_path: Path) -> Set[str]:
    """Load fingerprints from a baseline file; empty on any error."""
    try:
        data = json.loads(baseline_path.read_text(encoding="utf-8"))
        return set(data.get("fingerprints", []))
    except (OSError, ValueError, AttributeError) as e:
        logger.warning(f"Failed to load baseline from {baseline_path}: {e}")
        return set()


def filter_by_baseline(findings: List[Finding], baseline: Set[str]) -> List[Finding]:
    """Keep only findings whose fingerprint is not in the baseline."""
    return [f for f in findings if f.fingerprint() not in baseline]


def create_default_config() -> str:
    """
    Create a default .taint-audit.yaml configuration template.

    Returns:
        YAML string with default configuration
    """
    return '''# taint-audit configuration

# Extra sink functions: a call receiving a tainted argument is reported.
# The built-in rules already cover memcpy, strcpy and strcat.
sinks:
  # - sprintf
  # - system

# Extra sanitizer functions: a call clears taint on its arguments.
# The built-in rules already cover strlen.
sanitizers:
  # - strnlen

# Load the built-in C library rules
use_builtin_rules: true

# Additional rule directories (relative to this file)
rules_dirs: []

# Emit the per-instruction analysis trace
debug: false

# Scan settings
scan:
  exclude:
    - "build/**"
    - "**/third_party/**"
  fail_on_findings: true
'''
