"""Pytest configuration and shared fixtures."""

import logging

import pytest
from pathlib import Path


@pytest.fixture
def fixtures_path() -> Path:
    """Return the path to test fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def programs_path(fixtures_path: Path) -> Path:
    """Return the path to program fixtures."""
    return fixtures_path / "programs"


@pytest.fixture
def broken_path(fixtures_path: Path) -> Path:
    """Return the path to fixtures no front-end can decode."""
    return fixtures_path / "broken"


@pytest.fixture
def vulnerable_ll(programs_path: Path) -> Path:
    return programs_path / "vulnerable.ll"


@pytest.fixture
def clean_ll(programs_path: Path) -> Path:
    return programs_path / "clean.ll"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch):
    """Keep a developer's own .taint-audit.yaml out of the tests."""
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def restore_logging():
    """CLI commands call logging.basicConfig(force=True); undo it after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
