"""
Tests for logging setup.
"""

import pytest

from mfdcore.logging_config import logger, reset_logging, setup_logging

pytestmark = pytest.mark.fast


class TestLoggingConfig:
    def test_file_logging_is_opt_in(self, temp_dir, monkeypatch):
        monkeypatch.setenv("MFD_LOG_DIR", str(temp_dir / "logs"))
        reset_logging()

        setup_logging(suppress_console=True, enable_file_logging=True)
        logger.info("file sink check")

        assert (temp_dir / "logs" / "mfdcore.log").exists()

    def test_setup_is_idempotent(self, temp_dir, monkeypatch):
        monkeypatch.setenv("MFD_LOG_DIR", str(temp_dir / "logs"))

        # Already configured by the autouse fixture
        setup_logging(enable_file_logging=True)

        assert not (temp_dir / "logs").exists()
