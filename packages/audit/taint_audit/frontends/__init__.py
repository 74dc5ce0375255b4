"""Program representation front-ends."""

from pathlib import Path
from typing import List, Optional

from taint_audit.frontends.base import BaseFrontend, FrontendError, collect_files
from taint_audit.frontends.document import DocumentFrontend
from taint_audit.frontends.llvm_ir import LLVMIRFrontend


def default_frontends() -> List[BaseFrontend]:
    return [LLVMIRFrontend(), DocumentFrontend()]


def frontend_for(path: Path) -> Optional[BaseFrontend]:
    """Pick the front-end that reads `path`, by suffix."""
    for frontend in default_frontends():
        if frontend.supports(path):
            return frontend
    return None


__all__ = [
    "BaseFrontend",
    "FrontendError",
    "DocumentFrontend",
    "LLVMIRFrontend",
    "collect_files",
    "default_frontends",
    "frontend_for",
]
