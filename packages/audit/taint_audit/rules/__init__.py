"""Built-in function rules shipped with taint-audit."""

from pathlib import Path

BUILTIN_RULES_DIR = Path(__file__).parent / "builtin"
