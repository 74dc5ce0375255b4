"""Analysis configuration: the sink and sanitizer name sets."""

from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, Optional


DEFAULT_SINKS = ("memcpy", "strcpy", "strcat")
DEFAULT_SANITIZERS = ("strlen",)


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Immutable configuration for one analysis run.

    Attributes:
        sinks: Function names whose calls with tainted arguments are reported
        sanitizers: Function names whose calls clear taint on their arguments
        debug: Emit the per-instruction trace through the debug logger
        cwe_ids: Optional CWE id per sink name, attached to findings
    """
    sinks: FrozenSet[str] = field(default_factory=frozenset)
    sanitizers: FrozenSet[str] = field(default_factory=frozenset)
    debug: bool = False
    cwe_ids: Dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def create(
        cls,
        sinks: Iterable[str],
        sanitizers: Iterable[str],
        debug: bool = False,
        cwe_ids: Optional[Dict[str, str]] = None
    ) -> "AnalysisConfig":
        """Build a config from any iterables of names. Empty names are dropped."""
        return cls(
            sinks=frozenset(s for s in sinks if s),
            sanitizers=frozenset(s for s in sanitizers if s),
            debug=debug,
            cwe_ids=dict(cwe_ids or {}),
        )

    @classmethod
    def default(cls, debug: bool = False) -> "AnalysisConfig":
        return cls.create(DEFAULT_SINKS, DEFAULT_SANITIZERS, debug=debug)

    def is_sink(self, name: Optional[str]) -> bool:
        return bool(name) and name in self.sinks

    def is_sanitizer(self, name: Optional[str]) -> bool:
        return bool(name) and name in self.sanitizers

    def with_overrides(
        self,
        sinks: Iterable[str] = (),
        sanitizers: Iterable[str] = (),
        debug: Optional[bool] = None
    ) -> "AnalysisConfig":
        """Return a copy with extra sink/sanitizer names added."""
        return replace(
            self,
            sinks=self.sinks | frozenset(s for s in sinks if s),
            sanitizers=self.sanitizers | frozenset(s for s in sanitizers if s),
            debug=self.debug if debug is None else debug,
            cwe_ids=dict(self.cwe_ids),
        )
