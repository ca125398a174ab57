# ABOUTME: Tests for application configuration
# ABOUTME: Validates defaults, environment overrides and derived upstream URLs

import pytest
from pydantic import ValidationError

from poudre_flies.config import Config, get_config, reload_config
from poudre_flies.core.models import FlyCategory


class TestConfig:
    """Test Config defaults and helpers."""

    def test_defaults(self):
        config = Config()

        assert config.request_timeout == 10.0
        assert config.max_redirects == 5
        assert config.retry_attempts == 1
        assert config.pacing_interval == 0.2
        assert config.display_cap == 8
        assert config.image_width == 400
        assert config.mention_order == "dictionary"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("POUDRE_FLIES_DISPLAY_CAP", "4")
        monkeypatch.setenv("POUDRE_FLIES_MENTION_ORDER", "narrative")

        config = reload_config()

        assert config.display_cap == 4
        assert config.mention_order == "narrative"
        assert get_config() is config

        monkeypatch.undo()
        reload_config()

    def test_rejects_invalid_values(self):
        with pytest.raises(ValidationError):
            Config(mention_order="alphabetical")
        with pytest.raises(ValidationError):
            Config(retry_attempts=0)

    def test_collection_and_product_urls(self):
        config = Config(shop_base_url="https://shop.example.com/")

        assert config.collection_url(FlyCategory.DRY) == (
            "https://shop.example.com/collections/poudre-river-report-dry-flies"
        )
        assert config.collection_url(FlyCategory.STREAMER).endswith("/poudre-river-report-streamers")
        assert config.product_url("zebra-midge") == "https://shop.example.com/products/zebra-midge"
