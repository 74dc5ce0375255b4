"""Function rule loading for taint-audit."""

from taint_core.rules.loader import RuleLoader, FunctionRule

__all__ = ["RuleLoader", "FunctionRule"]
