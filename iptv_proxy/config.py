from pathlib import Path
import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class CustomSettings(BaseSettings):
    """Application settings loaded from environment variables.

    Validates configuration at startup to catch misconfiguration early.
    """

    port: int = 3000
    update_interval: int = 30  # Minutes between catalog refreshes
    epg_hours: int = 24  # Guide look-ahead window
    api_url: str = "http://api.pluto.tv/v2/channels"
    fetch_timeout_sec: float = 30.0
    update_timeout_sec: int = 300  # Whole update sequence, 0 disables timeout

    cache_file: str = "cache.json"
    favorites_path: str = "./pluto-favorites"
    playlist_backup_path: str = "playlist.m3u8"
    guide_backup_path: str = "epg.xml"

    guide_language: str = "en"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        """Validate listen port range."""
        if not 0 < value < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {value}")
        return value

    @field_validator("update_interval", "epg_hours")
    @classmethod
    def validate_positive_ints(cls, value: int, info) -> int:
        """Ensure interval and window settings are positive integers."""
        if value <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return value

    @field_validator("fetch_timeout_sec")
    @classmethod
    def validate_fetch_timeout(cls, value: float) -> float:
        """Validate HTTP timeout (seconds)."""
        if value <= 0:
            raise ValueError("fetch_timeout_sec must be > 0")
        return value

    @field_validator("update_timeout_sec")
    @classmethod
    def validate_update_timeout(cls, value: int) -> int:
        """Validate update sequence timeout (seconds)."""
        if value < 0:
            raise ValueError("update_timeout_sec must be >= 0")
        return value

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, value: str) -> str:
        """Validate channel API URL is HTTP/HTTPS."""
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"API URL must be HTTP/HTTPS: {value}")
        return value

    @field_validator("cache_file", "playlist_backup_path", "guide_backup_path")
    @classmethod
    def validate_output_path(cls, value: str) -> str:
        """Validate output file directory is accessible."""
        path = Path(value)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            return value
        except (OSError, PermissionError) as exc:
            raise ValueError(f"Cannot access path '{value}': {exc}") from exc

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate logging level name."""
        normalized = value.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    @model_validator(mode="after")
    def validate_update_window(self):
        """Validate cross-field configuration."""
        if self.update_timeout_sec and self.update_timeout_sec < self.fetch_timeout_sec:
            raise ValueError(
                "update_timeout_sec must be >= fetch_timeout_sec (or 0 to disable)"
            )
        return self

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  Port: %s", self.port)
        logger.info("  API URL: %s", self.api_url)
        logger.info("  Update Interval: %s minutes", self.update_interval)
        logger.info("  EPG Window: %s hours", self.epg_hours)
        logger.info("  Fetch Timeout: %ss", self.fetch_timeout_sec)
        logger.info(
            "  Update Timeout: %s",
            f"{self.update_timeout_sec}s" if self.update_timeout_sec else "disabled",
        )
        logger.info("  Cache File: %s", self.cache_file)
        logger.info("  Favorites: %s", self.favorites_path)


settings = CustomSettings()


def setup_logging() -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
