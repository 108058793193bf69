"""Runtime configuration loaded from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from datetime import date

from dotenv import load_dotenv

from chessmirror.errors import ChessmirrorError

load_dotenv()

DEFAULT_CHESSCOM_BASE_URL = "https://api.chess.com/pub"
DEFAULT_USER_AGENT = "chessmirror/0.1"
_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ChessmirrorError(f"{name} must be an integer, got {value!r}") from exc


def _env_start_date() -> date | None:
    value = os.getenv("CHESSMIRROR_START_DATE")
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ChessmirrorError(f"CHESSMIRROR_START_DATE must be YYYY-MM-DD, got {value!r}") from exc


def _default_user() -> str:
    return os.getenv("CHESSMIRROR_USER", os.getenv("CHESSCOM_USERNAME", ""))


@dataclass(slots=True)
# pylint: disable=too-many-instance-attributes
class Settings:
    """Central configuration for syncing and analysing a game history."""

    user: str = field(default_factory=_default_user)
    start_date: date | None = field(default_factory=_env_start_date)
    include_unrated: bool = field(
        default_factory=lambda: _env_bool("CHESSMIRROR_INCLUDE_UNRATED")
    )

    chesscom_base_url: str = field(
        default_factory=lambda: os.getenv("CHESSCOM_BASE_URL", DEFAULT_CHESSCOM_BASE_URL)
    )
    chesscom_user_agent: str = field(
        default_factory=lambda: os.getenv("CHESSCOM_USER_AGENT", DEFAULT_USER_AGENT)
    )
    chesscom_timeout_s: int = field(default_factory=lambda: _env_int("CHESSCOM_TIMEOUT_S", 15))
    chesscom_max_retries: int = field(
        default_factory=lambda: _env_int("CHESSCOM_MAX_RETRIES", 3)
    )
    chesscom_retry_backoff_ms: int = field(
        default_factory=lambda: _env_int("CHESSCOM_RETRY_BACKOFF_MS", 500)
    )

    sync_max_concurrency: int = field(
        default_factory=lambda: _env_int("CHESSMIRROR_SYNC_MAX_CONCURRENCY", 1)
    )
    log_level: str = field(default_factory=lambda: os.getenv("CHESSMIRROR_LOG_LEVEL", "INFO"))

    def __post_init__(self) -> None:
        self.user = (self.user or "").strip()
        self.chesscom_base_url = self.chesscom_base_url.rstrip("/")
        self.sync_max_concurrency = max(int(self.sync_max_concurrency), 1)
        self.chesscom_max_retries = max(int(self.chesscom_max_retries), 0)
        self.log_level = (self.log_level or "INFO").strip().upper()


def get_settings(**overrides: object) -> Settings:
    """Return a Settings instance with environment and keyword overrides applied.

    Raises:
        TypeError: When an override does not name a settings field.
    """
    load_dotenv()
    known = {field_info.name for field_info in fields(Settings)}
    unexpected = sorted(set(overrides) - known)
    if unexpected:
        raise TypeError(f"Unexpected settings: {', '.join(unexpected)}")
    return Settings(**overrides)  # type: ignore[arg-type]


__all__ = [
    "DEFAULT_CHESSCOM_BASE_URL",
    "DEFAULT_USER_AGENT",
    "Settings",
    "get_settings",
]
