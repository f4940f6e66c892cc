"""
Runtime configuration.

Settings come from environment variables (optionally from a `.env` file):

- VOCAB_STORE: snapshot backend, "json" (default) or "sql"
- VOCAB_SNAPSHOT_PATH: JSON snapshot file (default: data/vocab_store.json)
- DATABASE_URL: SQLAlchemy URL for the "sql" backend
- TEST_MODE: "true" switches to a separate test snapshot / database
- VOCAB_TIMEZONE: IANA timezone for day boundaries (default: system local)
- LOG_LEVEL: logging level name (default: INFO)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()


DEFAULT_SNAPSHOT_PATH = Path("data") / "vocab_store.json"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_store_kind() -> str:
    kind = os.getenv("VOCAB_STORE", "json").strip().lower()
    if kind not in ("json", "sql"):
        raise ValueError(f"VOCAB_STORE must be 'json' or 'sql', got {kind!r}")
    return kind


def get_snapshot_path() -> Path:
    """
    Get the JSON snapshot path.

    In test mode the file name is prefixed with `test_` so a test run never
    rewrites the real store.
    """
    path = Path(os.getenv("VOCAB_SNAPSHOT_PATH", str(DEFAULT_SNAPSHOT_PATH)))
    if is_test_mode():
        return path.with_name(f"test_{path.name}")
    return path


def get_database_url() -> str:
    """
    Get the database URL for the SQL backend.

    For test mode, replaces 'vocab_db' with 'test_vocab_db' in the URL.
    """
    base_url = os.getenv("DATABASE_URL")
    if not base_url:
        raise ValueError(
            "DATABASE_URL environment variable not set. "
            "Set it to a SQLAlchemy URL (e.g. sqlite:///data/vocab_db.sqlite) "
            "or use VOCAB_STORE=json"
        )
    if is_test_mode():
        return base_url.replace("vocab_db", "test_vocab_db")
    return base_url


def get_timezone() -> Optional[ZoneInfo]:
    name = os.getenv("VOCAB_TIMEZONE")
    if not name:
        return None
    return ZoneInfo(name)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for scripts and the Streamlit app."""
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
