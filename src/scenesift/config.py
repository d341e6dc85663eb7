"""
Scenesift Configuration
Pydantic Settings for all configurable options.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .classifier import ClassifierThresholds


class ConfigError(Exception):
    """Raised when required startup configuration is missing or invalid."""
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env files."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".local.env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Vision Service ---
    azure_endpoint: str = Field(min_length=1)
    azure_key: str = Field(min_length=1)
    request_timeout: Optional[float] = None  # None = wait indefinitely

    # --- Selection ---
    target_count: int = Field(gt=0)  # Passing images to collect per region
    tag_threshold: float = 0.8
    max_object_coverage: float = 0.2  # Fraction of image area

    # --- Storage Paths ---
    manifest_dir: Path = Path("ingest_manifests")
    analyses_dir: Path = Path("analyses")
    out_dir: Path = Path("out")

    # --- Flickr URLs ---
    media_host: str = "live.staticflickr.com"
    preview_size: str = "w"  # 400px on the longest side
    site_host: str = "www.flickr.com"

    # --- Logging ---
    log_level: str = "INFO"

    @property
    def thresholds(self) -> ClassifierThresholds:
        return ClassifierThresholds(
            tag_confidence=self.tag_threshold,
            max_object_coverage=self.max_object_coverage,
        )

    def ensure_directories(self) -> None:
        """Create cache and output directories if they don't exist."""
        self.analyses_dir.mkdir(parents=True, exist_ok=True)
        self.out_dir.mkdir(parents=True, exist_ok=True)


def load_settings(**overrides) -> Settings:
    """
    Build the settings instance used for one run.

    Args:
        **overrides: Field values taking precedence over the environment

    Returns:
        Validated Settings

    Raises:
        ConfigError: If a required value is missing or invalid
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        problems = []
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"]) or "settings"
            problems.append(f"{field.upper()}: {err['msg']}")
        raise ConfigError("Invalid configuration: " + "; ".join(problems)) from e
