"""taint-audit - intraprocedural taint analysis for compiled programs."""

from taint_audit.version import __version__
from taint_audit.analysis import run_analysis, TaintAnalysisDriver

__all__ = ["__version__", "run_analysis", "TaintAnalysisDriver"]
