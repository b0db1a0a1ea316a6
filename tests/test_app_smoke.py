# -*- coding: utf-8 -*-
"""
Smoke tests to ensure application doesn't break after changes.
These tests verify basic functionality works.
"""
import logging
import sys
import pytest
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def test_imports():
    """Test that all main modules can be imported."""
    try:
        from app.config import Config
        from app.sample_forms import build_signup_steps
        from services import CancellationToken, HttpSubmitter, RetryExecutor, SubmissionCoordinator
        from ui.wizards.framework import WizardSession
        assert True
    except ImportError as e:
        pytest.fail(f"Import failed: {e}")


def test_config_defaults():
    """Test that configuration has sane defaults."""
    from app.config import Config

    assert Config.MAX_RETRIES >= 0
    assert Config.INITIAL_DELAY <= Config.MAX_DELAY
    assert Config.LANGUAGE in Config.SUPPORTED_LANGUAGES


def test_retry_policy_from_config():
    """Test that the default retry policy is built from configuration."""
    from app.config import Config
    from models.retry import RetryConfig

    policy = RetryConfig.from_config()
    assert policy.max_retries == Config.MAX_RETRIES
    assert policy.backoff_multiplier == Config.BACKOFF_MULTIPLIER


def test_logger():
    """Test that module loggers hang off the application logger."""
    from utils.logger import get_logger

    logger = get_logger("smoke")
    assert logger.name == "formflow.smoke"


def test_logger_follows_config(tmp_path):
    """Test that levels, formats and rotation come from the configuration."""
    from dataclasses import replace
    from logging.handlers import RotatingFileHandler

    from app.config import Config
    from utils.logger import setup_logger

    config = replace(
        Config(), LOGS_DIR=tmp_path / "logs", LOG_LEVEL="warning", CONSOLE_LOG_LEVEL="ERROR",
        LOG_MAX_BYTES=1024, LOG_BACKUP_COUNT=7, LOG_FORMAT="%(name)s: %(message)s",
        CONSOLE_LOG_FORMAT="> %(message)s",
    )
    try:
        logger = setup_logger(config=config)
        [file_handler] = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        [console_handler] = [h for h in logger.handlers if h is not file_handler]

        assert file_handler.level == logging.WARNING
        assert file_handler.maxBytes == 1024
        assert file_handler.backupCount == 7
        assert file_handler.baseFilename == str(tmp_path / "logs" / "formflow.log")
        assert file_handler.formatter._fmt == "%(name)s: %(message)s"
        assert console_handler.level == logging.ERROR
        assert console_handler.formatter._fmt == "> %(message)s"
    finally:
        setup_logger()


def test_logger_rejects_unknown_level(tmp_path):
    from dataclasses import replace

    from app.config import Config
    from utils.logger import setup_logger

    with pytest.raises(ValueError):
        setup_logger(config=replace(Config(), LOGS_DIR=tmp_path, LOG_LEVEL="chatty"))


def test_cli_arguments():
    """Test console runner argument parsing."""
    from main import parse_args

    args = parse_args(["--url", "https://forms.example.org/submit", "--lang", "ar", "--max-retries", "1"])
    assert args.url == "https://forms.example.org/submit"
    assert args.lang == "ar"
    assert args.max_retries == 1


@pytest.mark.asyncio
async def test_echo_submitter():
    """Test the local submitter used without a URL."""
    from main import echo_submitter

    payload = await echo_submitter({"username": "ada"})
    assert payload == {"status": "accepted", "values": {"username": "ada"}}
