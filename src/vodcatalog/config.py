"""Runtime configuration read from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DB_PATH = Path("data/vod.db")
DEFAULT_CRON_SECRET = "cron-secret-key"
DEFAULT_DELAY_SECONDS = 1.0
DEFAULT_TIMEOUT_SECONDS = 30.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Service settings.

    Attributes:
        db_path: SQLite database file.
        source_api_url: Upstream listing API base URL.
        admin_api_key: Credential for the manual collection trigger.
        cron_secret: Expected X-Cron-Auth header for the scheduled trigger.
        collect_delay_seconds: Pause between upstream page fetches.
        upstream_timeout_seconds: HTTP timeout for upstream requests.
        log_level: Root log level name.
    """

    db_path: Path = DEFAULT_DB_PATH
    source_api_url: str | None = None
    admin_api_key: str | None = None
    cron_secret: str = DEFAULT_CRON_SECRET
    collect_delay_seconds: float = DEFAULT_DELAY_SECONDS
    upstream_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    return Settings(
        db_path=Path(os.environ.get("VOD_DB_PATH") or DEFAULT_DB_PATH),
        source_api_url=os.environ.get("SOURCE_API_URL") or None,
        admin_api_key=os.environ.get("ADMIN_API_KEY") or None,
        cron_secret=os.environ.get("CRON_SECRET") or DEFAULT_CRON_SECRET,
        collect_delay_seconds=_float_env("COLLECT_DELAY_SECONDS", DEFAULT_DELAY_SECONDS),
        upstream_timeout_seconds=_float_env("UPSTREAM_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        log_level=(os.environ.get("VOD_LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Install a basic stderr handler on the root logger."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
