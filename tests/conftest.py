"""Shared fixtures for temptrack tests."""

import atexit
import sys
from pathlib import Path

import pytest

# Add src to path
repo_root = Path(__file__).resolve().parents[1]
src_path = repo_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from temptrack import naming
from temptrack.config import Settings
from temptrack.registry import TempRegistry


@pytest.fixture
def exit_hooks(monkeypatch):
    """Record atexit registrations instead of installing them."""
    hooks = []
    monkeypatch.setattr(atexit, "register", lambda func, *a, **kw: hooks.append(func) or func)
    return hooks


@pytest.fixture
def base_dir(tmp_path, monkeypatch):
    """Point generated names at the test's tmp_path."""
    monkeypatch.setattr(naming, "_base_dir", str(tmp_path))
    return tmp_path


@pytest.fixture
def registry(base_dir, exit_hooks):
    """A private, tracking registry that never touches the real exit hooks."""
    return TempRegistry(Settings(base_dir=str(base_dir)))
