"""Centralised settings for the pagehub backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _optional_int(name: str, default: Optional[str]) -> Optional[int]:
    raw = os.environ.get(name, default)
    if raw is None or raw == "":
        return None
    return int(raw)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("PAGEHUB_WORKSPACE", Path.home() / ".pagehub_data")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite document store."""
        return self.workspace_dir / "pages.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    # ------------------------------------------------------------------
    # Outbound HTTP
    # ------------------------------------------------------------------
    http_base_url: str = field(
        default_factory=lambda: os.environ.get("HTTP_BASE_URL", "")
    )
    # Milliseconds; 0 disables the timeout, empty falls back to httpx's default.
    http_timeout_ms: Optional[int] = field(
        default_factory=lambda: _optional_int("HTTP_TIMEOUT_MS", "5000")
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton, import this everywhere:
#   from pagehub.config import settings
settings = Settings()
