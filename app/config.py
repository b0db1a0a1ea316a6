# -*- coding: utf-8 -*-


from pathlib import Path
from dataclasses import dataclass
from typing import Optional
import os

from dotenv import load_dotenv

# ============================================================================
# Load .env file for local environment configuration
# ============================================================================
load_dotenv()  # Load from .env file in project root

# ============================================================================
# Read settings from environment variables (from .env or system)
# ============================================================================
# Submission endpoint
_SUBMIT_URL = os.getenv("FORMFLOW_SUBMIT_URL", None)
_SUBMIT_TIMEOUT = float(os.getenv("FORMFLOW_SUBMIT_TIMEOUT", "15"))

# Retry / backoff policy (seconds)
_MAX_RETRIES = int(os.getenv("FORMFLOW_MAX_RETRIES", "3"))
_INITIAL_DELAY = float(os.getenv("FORMFLOW_INITIAL_DELAY", "1.0"))
_MAX_DELAY = float(os.getenv("FORMFLOW_MAX_DELAY", "30.0"))
_BACKOFF_MULTIPLIER = float(os.getenv("FORMFLOW_BACKOFF_MULTIPLIER", "2.0"))

# UI language for user-facing messages
_LANGUAGE = os.getenv("FORMFLOW_LANGUAGE", "en")

_LOG_DIR = os.getenv("FORMFLOW_LOG_DIR", None)
_LOG_LEVEL = os.getenv("FORMFLOW_LOG_LEVEL", "DEBUG").upper()
_CONSOLE_LOG_LEVEL = os.getenv("FORMFLOW_CONSOLE_LOG_LEVEL", "INFO").upper()
_LOG_MAX_BYTES = int(os.getenv("FORMFLOW_LOG_MAX_BYTES", str(5 * 1024 * 1024)))
_LOG_BACKUP_COUNT = int(os.getenv("FORMFLOW_LOG_BACKUP_COUNT", "3"))


@dataclass
class Config:
    """Application configuration."""

    # Application Info
    APP_NAME: str = "FormFlow"
    APP_TITLE: str = "Multi-Step Form Orchestration Engine"
    VERSION: str = "1.0.0"

    # Submission collaborator
    # If FORMFLOW_SUBMIT_URL is unset the console runner echoes payloads locally
    SUBMIT_URL: Optional[str] = _SUBMIT_URL
    SUBMIT_TIMEOUT: float = _SUBMIT_TIMEOUT

    # Retry policy for transient submission failures
    MAX_RETRIES: int = _MAX_RETRIES
    INITIAL_DELAY: float = _INITIAL_DELAY
    MAX_DELAY: float = _MAX_DELAY
    BACKOFF_MULTIPLIER: float = _BACKOFF_MULTIPLIER

    # Session reference numbers: {PREFIX}-{YYYYMMDDHHMMSS}-{SHORT_ID}
    REFERENCE_PREFIX: str = "FRM"

    # Localization
    LANGUAGE: str = _LANGUAGE
    SUPPORTED_LANGUAGES: tuple = ("en", "ar")

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    LOGS_DIR: Path = Path(_LOG_DIR) if _LOG_DIR else PROJECT_ROOT / "logs"

    # Logging
    LOG_FILE: str = "formflow.log"
    LOG_PATH: Path = LOGS_DIR / LOG_FILE
    LOG_LEVEL: str = _LOG_LEVEL
    CONSOLE_LOG_LEVEL: str = _CONSOLE_LOG_LEVEL
    LOG_MAX_BYTES: int = _LOG_MAX_BYTES  # 5MB unless overridden
    LOG_BACKUP_COUNT: int = _LOG_BACKUP_COUNT
    LOG_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    CONSOLE_LOG_FORMAT: str = "%(levelname)-8s | %(message)s"

    # Date/Time Formats
    DATE_FORMAT: str = "%Y-%m-%d"
    DATETIME_FORMAT: str = "%Y-%m-%d %H:%M:%S"


# Session lifecycle values
class SessionStatus:
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
