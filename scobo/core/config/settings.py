"""
Settings for the Scobo score board bot.

Simple, reliable environment variable configuration for the event log,
the background writer and logging.
"""

import os
import tomllib
from pathlib import Path

from dotenv import load_dotenv

# Load .env file for local development - look in current working directory
load_dotenv(".env")

DEFAULT_BOT_NAME = "scobo_bot"


def _get_version_from_pyproject() -> str:
    """
    Read version from pyproject.toml file.

    Returns:
        Version string from pyproject.toml, or fallback version
    """
    current_path = Path(__file__)
    for parent in [current_path.parent, *current_path.parents]:
        pyproject_path = parent / "pyproject.toml"
        if pyproject_path.exists():
            try:
                with open(pyproject_path, "rb") as f:
                    pyproject_data = tomllib.load(f)
                    version = pyproject_data.get("project", {}).get("version")
                    if version:
                        return version
            except (OSError, tomllib.TOMLDecodeError):
                continue

    return "0.1.0"


def _default_event_log_path(bot_name: str) -> str:
    """Event log lives in ~/.local/share/<bot>/<bot>.json unless overridden."""
    return str(Path.home() / ".local" / "share" / bot_name / f"{bot_name}.json")


class Settings:
    """Application settings with environment-based configuration."""

    def __init__(self):
        # ================================================================
        # Version & General Configuration
        # ================================================================
        self.version: str = _get_version_from_pyproject()
        self.port: int = int(os.getenv("PORT", "8000"))
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.log_dir: str = os.getenv("LOG_DIR", "./logs")
        self.environment: str = os.getenv("ENVIRONMENT", "DEV")

        # ================================================================
        # Event Log Configuration
        # ================================================================
        self.bot_name: str = os.getenv("SCOBO_BOT_NAME", DEFAULT_BOT_NAME)
        self.event_log_path: str = os.getenv(
            "SCOBO_EVENT_LOG_PATH", _default_event_log_path(self.bot_name)
        )

        # ================================================================
        # Background Writer Configuration
        # ================================================================
        self.writer_poll_interval: float = float(
            os.getenv("SCOBO_WRITER_POLL_INTERVAL", "1.0")
        )
        self.shutdown_grace_period: float = float(
            os.getenv("SCOBO_SHUTDOWN_GRACE_PERIOD", "30")
        )
        # 0 means unbounded
        self.ingest_queue_max_size: int = int(
            os.getenv("SCOBO_INGEST_QUEUE_MAX_SIZE", "0")
        )

        self._validate_settings()

    def _validate_settings(self):
        """Validate settings values."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        if self.log_level.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        self.log_level = self.log_level.upper()

        valid_environments = ["DEV", "PROD"]
        if self.environment.upper() not in valid_environments:
            self.environment = "DEV"  # Default fallback
        self.environment = self.environment.upper()

        if self.writer_poll_interval <= 0:
            raise ValueError("SCOBO_WRITER_POLL_INTERVAL must be positive")
        if self.shutdown_grace_period < 0:
            raise ValueError("SCOBO_SHUTDOWN_GRACE_PERIOD must not be negative")
        if self.ingest_queue_max_size < 0:
            raise ValueError("SCOBO_INGEST_QUEUE_MAX_SIZE must not be negative")

    @property
    def event_log_file(self) -> Path:
        """Event log location as a Path."""
        return Path(self.event_log_path).expanduser()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "DEV"


# Global settings instance
settings = Settings()
