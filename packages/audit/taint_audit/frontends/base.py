"""Base front-end interface."""

import fnmatch
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from taint_core.models.program import Program

logger = logging.getLogger(__name__)


class FrontendError(ValueError):
    """Raised when a file cannot be turned into a Program."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class BaseFrontend(ABC):
    """Abstract base class for program representation readers."""

    name: str = "BaseFrontend"
    suffixes: Tuple[str, ...] = ()

    def supports(self, path: Path) -> bool:
        return path.suffix.lower() in self.suffixes

    def load(self, path: Path) -> Program:
        """
        Read a file and build its Program.

        Raises:
            FrontendError: if the file cannot be read or decoded
        """
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise FrontendError(path, f"cannot read file: {e}") from e
        program = self.parse(text, path)
        program.source_file = str(path).replace("\\", "/")
        return program

    @abstractmethod
    def parse(self, text: str, path: Path) -> Program:
        """
        Decode the file contents into a Program.

        Args:
            text: File contents
            path: File path, for error messages

        Returns:
            The decoded Program
        """
        pass


def _match_any_pattern(path: str, patterns: Sequence[str]) -> bool:
    """Check a forward-slash relative path against glob patterns."""
    for pattern in patterns:
        pattern = pattern.replace("\\", "/")
        if fnmatch.fnmatch(path, pattern):
            return True
        if pattern.endswith("/**"):
            prefix = pattern[:-3]
            if path == prefix or path.startswith(prefix + "/"):
                return True
        if pattern.startswith("**/"):
            suffix = pattern[3:]
            if any(fnmatch.fnmatch(part, suffix) for part in Path(path).parts):
                return True
    return False


def collect_files(
    path: Path,
    frontends: Sequence[BaseFrontend],
    exclude_patterns: Optional[Sequence[str]] = None
) -> List[Path]:
    """
    Collect the files under `path` that some front-end can read.

    A file given directly is returned even if excluded. Directory results
    are sorted so analysis order is stable.
    """
    if path.is_file():
        return [path]

    exclude_patterns = exclude_patterns or []
    files: List[Path] = []
    for candidate in sorted(path.rglob("*")):
        if not candidate.is_file():
            continue
        if not any(fe.supports(candidate) for fe in frontends):
            continue
        rel_path = candidate.relative_to(path).as_posix()
        if _match_any_pattern(rel_path, exclude_patterns):
            logger.debug(f"Excluded {rel_path}")
            continue
        files.append(candidate)
    return files
