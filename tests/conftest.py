"""
Pytest configuration for the mfdcore test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Temporary directory fixtures
- Helpers writing JSON-AST models into .mfd files
"""

import json
import os
import shutil
import tempfile
from pathlib import Path

import pytest

from mfdcore.logging_config import reset_logging, setup_logging
from mfdcore.parser import JsonAstParser


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Keep test output free of log noise."""
    os.environ.setdefault("MFD_MACHINE_MODE", "1")


# ============================================================================
# LOGGING FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.

    Logging is already configured on import, so reset before reconfiguring.
    """
    reset_logging()
    setup_logging(level="DEBUG", suppress_console=True)


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(tempfile.mkdtemp(prefix="mfdcore_test_")).resolve()
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


# ============================================================================
# MODEL FIXTURES
# ============================================================================

@pytest.fixture
def json_parser():
    return JsonAstParser()


@pytest.fixture
def write_mfd(temp_dir):
    """
    Write a document into temp_dir.

    Usage:
        def test_x(write_mfd):
            root = write_mfd("main.mfd", [component("Auth")])
    """

    def _write(name, body):
        path = temp_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"type": "MfdDocument", "body": list(body)}, indent=2), encoding="utf-8")
        return path

    return _write
