"""
Pytest configuration for the mcmod test suite.

This conftest.py provides:
- Quiet logging (no console sink, everything at DEBUG for file sinks)
- An isolated global config directory per test
- Temporary directories and a generated sample project
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from mcmod.logging_config import setup_logging
from mcmod.scaffold import InitOptions, init_project


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Keep test runs quiet and off the user's real config."""
    os.environ.setdefault("MCMOD_QUIET", "1")
    os.environ.pop("MCMOD_FILE_LOGGING", None)


# ============================================================================
# LOGGING FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True, enable_file_logging=False, force=True)


# ============================================================================
# CONFIG DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def config_home(tmp_path, monkeypatch):
    """
    Point the global config directory at a per-test location.

    Returns:
        The mcmod config directory (not created)
    """
    home = tmp_path / "config-home"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home))
    monkeypatch.setenv("APPDATA", str(home))
    return home / "mcmod"


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(tempfile.mkdtemp(prefix="mcmod_test_"))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


def make_options(directory: Path, **overrides) -> InitOptions:
    """InitOptions for the standard test mod, with field overrides."""
    values = dict(
        directory=directory,
        mod_id="testmod",
        mod_name="Test Mod",
        package="com.example.testmod",
        author="Tester",
        description="A test mod",
        language="java",
        loaders=["fabric"],
        ci=False,
    )
    values.update(overrides)
    return InitOptions(**values)


@pytest.fixture
def sample_project(temp_dir):
    """
    Generate a Java project with only the Fabric loader and no CI.

    Returns:
        Path to the project root
    """
    root = temp_dir / "testmod"
    init_project(make_options(root))
    return root


@pytest.fixture
def init_options():
    """Factory fixture: init_options(directory, **overrides) -> InitOptions."""
    return make_options
