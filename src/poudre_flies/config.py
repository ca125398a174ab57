# ABOUTME: Application configuration using Pydantic Settings for environment variables
# ABOUTME: Provides type-safe access to upstream URLs, fetch limits, pacing and logging settings

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from poudre_flies.core.models import FlyCategory


class Config(BaseSettings):
    """Application configuration with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="POUDRE_FLIES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown environment variables
    )

    # Upstream site
    report_url: str = Field(
        default="https://stpetes.com/pages/poudre-river-fishing-report-fort-collins-fly-fishing",
        description="Fishing report page to extract",
    )
    shop_base_url: str = Field(default="https://stpetes.com", description="Base URL for collections and products")
    dry_collection: str = Field(default="poudre-river-report-dry-flies", description="Dry fly collection handle")
    nymph_collection: str = Field(default="poudre-river-report-nymphs", description="Nymph collection handle")
    streamer_collection: str = Field(
        default="poudre-river-report-streamers", description="Streamer collection handle"
    )

    # HTTP behaviour
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; PoudreFliesBot/1.0)",
        description="Client identity sent with every request",
    )
    request_timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")
    max_redirects: int = Field(default=5, ge=0, description="Maximum redirect hops per fetch")
    retry_attempts: int = Field(default=1, ge=1, description="Total attempts per fetch (1 disables retries)")
    pacing_interval: float = Field(
        default=0.2, ge=0, description="Minimum delay in seconds between per-product page fetches"
    )

    # Output shaping
    display_cap: int = Field(default=8, ge=0, description="Maximum entries per catalog category")
    image_width: int = Field(default=400, gt=0, description="Width parameter appended to product images")
    mention_order: Literal["dictionary", "narrative"] = Field(
        default="dictionary", description="Order of mentioned flies in the manifest"
    )
    include_collection_picks: bool = Field(
        default=True, description="Top up catalog buckets with the shop's own collection listing"
    )
    dictionary_file: Path | None = Field(default=None, description="JSON file overriding the built-in fly dictionary")

    # Logging
    log_mode: Literal["interactive", "production"] = Field(
        default="interactive", description="Log sinks: files under logs/ or JSON on stderr"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO", description="Minimum log level")
    log_file: Path | None = Field(default=None, description="Replaces logs/poudre-flies.log as the main log")

    def collection_handle(self, category: FlyCategory) -> str:
        """Return the collection handle that lists flies of the given category."""
        return {
            FlyCategory.DRY: self.dry_collection,
            FlyCategory.NYMPH: self.nymph_collection,
            FlyCategory.STREAMER: self.streamer_collection,
        }[category]

    def collection_url(self, category: FlyCategory) -> str:
        """Return the rendered collection page URL for a category."""
        return f"{self.shop_base_url.rstrip('/')}/collections/{self.collection_handle(category)}"

    def product_url(self, slug: str) -> str:
        """Return the detail page URL for a product handle."""
        return f"{self.shop_base_url.rstrip('/')}/products/{slug}"


_config_instance: Config | None = None


def get_config() -> Config:
    """Return the process-wide settings, reading the environment on first use."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reload_config() -> Config:
    """Discard the cached settings and read the environment again."""
    global _config_instance
    _config_instance = Config()
    return _config_instance
