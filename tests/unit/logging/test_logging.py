"""Tests for logging utilities."""

import logging

from proinfer.logging import get_logger, reset_logger
from proinfer.logging.logging import _logger_name


def test_reset_logger_allows_reconfiguration(tmp_path):
    log1 = tmp_path / "first.log"
    log2 = tmp_path / "second.log"

    # Initial configuration writes to the first file
    logger = get_logger("test", log_file=log1, console=False)
    logger.info("first message")
    for handler in logger.handlers:
        handler.flush()

    assert "first message" in log1.read_text()

    # Reset and ensure logger has no handlers
    reset_logger()
    assert logging.getLogger("test").handlers == []

    # Reconfigure to write to the second file
    logger2 = get_logger("test", log_file=log2, console=False)
    logger2.info("second message")
    for handler in logger2.handlers:
        handler.flush()

    assert "second message" in log2.read_text()
    # Ensure the old file did not receive the new message
    assert "second message" not in log1.read_text()
    reset_logger("test")


def test_module_files_map_to_package_loggers():
    assert _logger_name("/opt/src/proinfer/inference/base.py") == "proinfer.inference.base"
    assert _logger_name("/tmp/script.py") == "script"
    assert _logger_name("proinfer") == "proinfer"


def test_persisted_level_is_used(tmp_path, monkeypatch):
    config_file = tmp_path / "logging.json"
    config_file.write_text('{"log_level": "WARNING"}')
    monkeypatch.setenv("PROINFER_LOG_CONFIG", str(config_file))

    logger = get_logger("persisted-level-test", log_dir=tmp_path, console=False)

    assert logger.level == logging.WARNING
    reset_logger("persisted-level-test")
