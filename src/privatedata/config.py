"""Configuration management using pydantic-settings."""

import time
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from privatedata.exceptions import ConfigurationError

DEFAULT_IGNORED_PROPERTIES = (
    "color",
    "isTrashed",
    "isPinned",
    "isArchived",
    "textContent",
    "textContentHtml",
)
DEFAULT_PRIORITY_PROPERTIES = (
    "title",
    "createdTimestampUsec",
    "userEditedTimestampUsec",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Unipile configuration
    unipile_dsn: str = Field(alias="UNIPILE_DSN", min_length=1)
    unipile_api_key: str = Field(alias="UNIPILE_API_KEY", min_length=1)
    unipile_account_id: str = Field(alias="UNIPILE_ACCOUNT_ID", min_length=1)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Missing environment variables: {e}") from e


class ScrapeConfig(BaseModel):
    """Run configuration for the LinkedIn contact scraper."""

    input_file: Path = Path("private-data/inputs/recruiterContactScraping.json")
    output_dir: Path = Path("private-data/outputs")
    delay_seconds: float = Field(default=5.0, ge=0)
    jitter_seconds: float = Field(default=1.0, ge=0)
    default_region: str = "US"


class MetadataOptions(BaseModel):
    """Which note properties to drop from metadata and which to list first."""

    ignore_keys: tuple[str, ...] = DEFAULT_IGNORED_PROPERTIES
    priority_keys: tuple[str, ...] = DEFAULT_PRIORITY_PROPERTIES


class KeepConversionConfig(BaseModel):
    """Run configuration for the Google Keep converter."""

    input_dir: Path
    output_dir: Path
    dry_run: bool = False
    test_one_note: bool = False
    delete_originals: bool = False
    metadata: MetadataOptions = Field(default_factory=MetadataOptions)

    @classmethod
    def with_timestamped_output(cls, base_dir: Path, **kwargs) -> "KeepConversionConfig":
        """Build a config whose output root is a fresh timestamped directory under base_dir."""
        output_dir = Path(base_dir) / f"keep-markdown-{int(time.time() * 1000)}"
        return cls(output_dir=output_dir, **kwargs)
