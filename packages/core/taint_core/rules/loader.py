"""YAML loader for sink and sanitizer function lists."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

from taint_core.models.config import AnalysisConfig

logger = logging.getLogger(__name__)

VALID_ROLES = {"sink", "sanitizer"}


@dataclass
class FunctionRule:
    """A function name classified as a sink or a sanitizer."""
    name: str
    role: str
    cwe_id: Optional[str] = None
    description: str = ""
    source_file: str = ""


class RuleLoader:
    """
    Loader for YAML function rule files.

    Discovers and parses .yaml/.yml files from rule directories. Each file
    holds a `functions:` list:

        functions:
          - name: memcpy
            role: sink
            cwe: CWE-120
          - name: strlen
            role: sanitizer
    """

    def __init__(self, rules_dirs: Optional[List[Path]] = None):
        """
        Initialize the rule loader.

        Args:
            rules_dirs: Directories to search for rule files.
        """
        self.rules_dirs = list(rules_dirs or [])
        self._rules_cache: Dict[str, FunctionRule] = {}

    def add_rules_directory(self, path: Path):
        """Add a directory to search for rules."""
        if path.exists() and path.is_dir():
            self.rules_dirs.append(path)
        else:
            logger.warning(f"Rules directory does not exist: {path}")

    def load_all_rules(self) -> Dict[str, FunctionRule]:
        """
        Load all rules from configured directories.

        Later directories override earlier ones for the same function name.

        Returns:
            Dictionary mapping function name to rule.
        """
        all_rules: Dict[str, FunctionRule] = {}

        for rules_dir in self.rules_dirs:
            all_rules.update(self._load_rules_from_directory(rules_dir))

        self._rules_cache = all_rules
        return all_rules

    def load_rule_file(self, file_path: Path) -> Dict[str, FunctionRule]:
        """
        Load rules from a single YAML file.

        Args:
            file_path: Path to the YAML rule file

        Returns:
            Dictionary mapping function name to rule
        """
        rules: Dict[str, FunctionRule] = {}

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"YAML parse error in {file_path}: {e}")
            return rules
        except OSError as e:
            logger.error(f"Error loading {file_path}: {e}")
            return rules

        if not isinstance(data, dict) or not data.get('functions'):
            logger.warning(f"No function rules found in {file_path}")
            return rules

        for entry in data['functions']:
            rule = self._parse_entry(entry, file_path)
            if rule is not None:
                rules[rule.name] = rule

        return rules

    def _load_rules_from_directory(self, rules_dir: Path) -> Dict[str, FunctionRule]:
        """Load all rules from a directory, in sorted file order."""
        rules: Dict[str, FunctionRule] = {}

        if not rules_dir.exists():
            logger.warning(f"Rules directory does not exist: {rules_dir}")
            return rules

        files = sorted(list(rules_dir.glob("**/*.yaml")) + list(rules_dir.glob("**/*.yml")))
        for rule_file in files:
            rules.update(self.load_rule_file(rule_file))

        return rules

    def _parse_entry(self, entry: Any, source_file: Path) -> Optional[FunctionRule]:
        """
        Validate and convert one `functions:` entry.

        Returns None (with a warning) for invalid entries.
        """
        if not isinstance(entry, dict):
            logger.warning(f"Ignoring malformed rule entry in {source_file}: {entry!r}")
            return None

        name = entry.get('name')
        if not name or not isinstance(name, str):
            logger.warning(f"Rule without name in {source_file}")
            return None

        role = str(entry.get('role', '')).lower()
        if role not in VALID_ROLES:
            logger.warning(
                f"Invalid role '{entry.get('role')}' for '{name}' in {source_file}"
            )
            return None

        return FunctionRule(
            name=name,
            role=role,
            cwe_id=entry.get('cwe'),
            description=entry.get('description', ''),
            source_file=str(source_file),
        )

    def get_rules_by_role(self, role: str) -> List[FunctionRule]:
        """Get all rules with the given role."""
        if not self._rules_cache:
            self.load_all_rules()
        return [rule for rule in self._rules_cache.values() if rule.role == role]

    def build_config(self, debug: bool = False) -> AnalysisConfig:
        """Build an AnalysisConfig from the loaded rules."""
        sinks = self.get_rules_by_role("sink")
        sanitizers = self.get_rules_by_role("sanitizer")
        return AnalysisConfig.create(
            sinks=(r.name for r in sinks),
            sanitizers=(r.name for r in sanitizers),
            debug=debug,
            cwe_ids={r.name: r.cwe_id for r in sinks if r.cwe_id},
        )
