"""
Configuration for Games In Common.
Settings come from a JSON file in the data directory; the Steam API key
may also come from the environment or a .env file, which takes priority.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger("gamesincommon.config")


__all__ = ["Config", "config"]


@dataclass
class Config:
    """
    Central configuration handling for the application.
    Manages paths, the API key and the filter-check behaviour.
    """

    DATA_DIR: Path = Path(os.getenv("GAMESINCOMMON_DATA_DIR", str(Path.home() / ".gamesincommon")))
    DB_PATH: Path | None = None
    SETTINGS_FILE: Path | None = None

    # API KEYS
    STEAM_API_KEY: str | None = None

    # Filter check
    THROTTLE_BACKOFF_SECONDS: float = 60.0
    REQUEST_TIMEOUT: float = 30.0
    FORCE_WEB_CHECK: bool = False

    LOG_LEVEL: str = "INFO"

    def __post_init__(self):
        """Derive file paths and load settings after instantiation."""
        if self.DB_PATH is None:
            self.DB_PATH = self.DATA_DIR / "gamedata.db"
        if self.SETTINGS_FILE is None:
            self.SETTINGS_FILE = self.DATA_DIR / "settings.json"

        self._load_settings()

        load_dotenv()
        env_key = os.getenv("STEAM_API_KEY")
        if env_key:
            self.STEAM_API_KEY = env_key

    def ensure_data_dir(self) -> None:
        """Create the data directory if it does not exist yet."""
        self.DATA_DIR.mkdir(parents=True, exist_ok=True)

    def _load_settings(self) -> None:
        """Load settings from JSON file."""
        if not self.SETTINGS_FILE.exists():
            return

        try:
            with open(self.SETTINGS_FILE, "r", encoding="utf-8") as f:
                data = json.load(f)

            db_path = data.get("db_path")
            if db_path:
                self.DB_PATH = Path(db_path)

            self.STEAM_API_KEY = data.get("steam_api_key", self.STEAM_API_KEY)
            self.THROTTLE_BACKOFF_SECONDS = float(
                data.get("throttle_backoff_seconds", self.THROTTLE_BACKOFF_SECONDS)
            )
            self.REQUEST_TIMEOUT = float(data.get("request_timeout", self.REQUEST_TIMEOUT))
            self.FORCE_WEB_CHECK = bool(data.get("force_web_check", self.FORCE_WEB_CHECK))
            self.LOG_LEVEL = data.get("log_level", self.LOG_LEVEL)

        except (OSError, json.JSONDecodeError, TypeError, ValueError) as e:
            logger.error("Could not load settings from %s: %s", self.SETTINGS_FILE, e)

    def save(self) -> None:
        """Save current configuration to JSON file.

        The API key is not written; keep it in the environment or .env.
        """
        data = {
            "db_path": str(self.DB_PATH),
            "throttle_backoff_seconds": self.THROTTLE_BACKOFF_SECONDS,
            "request_timeout": self.REQUEST_TIMEOUT,
            "force_web_check": self.FORCE_WEB_CHECK,
            "log_level": self.LOG_LEVEL,
        }

        try:
            self.ensure_data_dir()
            with open(self.SETTINGS_FILE, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.error("Could not save settings to %s: %s", self.SETTINGS_FILE, e)


# Global instance
config = Config()
