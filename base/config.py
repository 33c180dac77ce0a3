"""Runtime configuration for the Smart DMS desktop client."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:8000/api"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_TOAST_SECONDS = 5.0


@dataclass(frozen=True)
class AppConfig:
    """Settings read once at start-up.

    Attributes
    ----------
    api_url:
        Base URL of the dormitory REST API, without a trailing slash.
    request_timeout:
        Timeout, in seconds, applied to every API request.
    session_dir:
        Directory holding ``session.json``.
    log_dir:
        Directory where error logs are created on first error.
    log_level:
        Root logging level.
    toast_seconds:
        Default auto-dismiss duration for toast notifications.
    """

    api_url: str = DEFAULT_API_URL
    request_timeout: float = DEFAULT_TIMEOUT_SECONDS
    session_dir: Path = Path.home() / ".smart-dms"
    log_dir: Path = Path(__file__).resolve().parent.parent / "logs"
    log_level: int = logging.INFO
    toast_seconds: float = DEFAULT_TOAST_SECONDS

    @property
    def session_file(self) -> Path:
        return self.session_dir / "session.json"


def _coerce_float(value: Optional[str], default: float) -> float:
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _coerce_level(value: Optional[str], default: int) -> int:
    if not value:
        return default
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


def load_config(env_file: Optional[str] = None) -> AppConfig:
    """Build an AppConfig from the environment.

    A ``.env`` file is loaded first (without overriding variables that are
    already set), mirroring how the client is run during development.
    """

    load_dotenv(env_file)
    defaults = AppConfig()

    api_url = os.getenv("DORM_API_URL", "").strip() or DEFAULT_API_URL
    session_dir = os.getenv("DORM_SESSION_DIR")
    log_dir = os.getenv("DORM_LOG_DIR")

    return AppConfig(
        api_url=api_url.rstrip("/"),
        request_timeout=_coerce_float(
            os.getenv("DORM_API_TIMEOUT"), DEFAULT_TIMEOUT_SECONDS
        ),
        session_dir=Path(session_dir).expanduser() if session_dir else defaults.session_dir,
        log_dir=Path(log_dir).expanduser() if log_dir else defaults.log_dir,
        log_level=_coerce_level(os.getenv("DORM_LOG_LEVEL"), logging.INFO),
        toast_seconds=_coerce_float(
            os.getenv("DORM_TOAST_SECONDS"), DEFAULT_TOAST_SECONDS
        ),
    )
