"""
Unit tests for configuration module.
"""
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from src.core import Settings, get_settings
from src.models import PipelineConfig


class TestSettings:
    """Tests for Settings class."""

    def test_default_values(self, clean_environment):
        """Test that default values are set correctly."""
        settings = Settings(_env_file=None)

        assert settings.app_name == "DeckSmith"
        assert settings.debug is False
        assert settings.auto_fix is True
        assert settings.max_lint_iterations == 3
        assert settings.stop_on_lint_error is False
        assert settings.aspect_ratio == "16:9"
        assert settings.output_dir == Path("output")

    def test_iteration_validation(self):
        """Test that the fix iteration bound is validated."""
        with pytest.raises(ValueError):
            Settings(max_lint_iterations=-1)

        with pytest.raises(ValueError):
            Settings(max_lint_iterations=11)

        settings = Settings(max_lint_iterations=5)
        assert settings.max_lint_iterations == 5

    def test_aspect_ratio_validation(self):
        """Test that only supported aspect ratios are accepted."""
        with pytest.raises(ValueError):
            Settings(aspect_ratio="21:9")

        assert Settings(aspect_ratio="4:3").aspect_ratio == "4:3"

    @patch.dict(os.environ, {
        "AZURE_OPENAI_API_KEY": "test-key",
        "AZURE_OPENAI_ENDPOINT": "https://test.openai.azure.com/",
        "AZURE_OPENAI_DEPLOYMENT": "gpt-4o",
    })
    def test_has_azure_openai(self):
        """Test Azure OpenAI detection."""
        settings = Settings()

        assert settings.has_azure_openai is True
        assert settings.reasoning_provider == "azure"

    def test_heuristic_provider(self):
        """Test fallback when no model endpoint is configured."""
        settings = Settings(
            azure_openai_api_key=None,
            azure_openai_endpoint=None
        )

        assert settings.has_azure_openai is False
        assert settings.reasoning_provider == "heuristic"

    def test_ensure_directories(self, tmp_path):
        """Test directory creation."""
        settings = Settings(output_dir=tmp_path / "decks")
        settings.ensure_directories()

        assert settings.output_dir.exists()


class TestGetSettings:
    """Tests for get_settings function."""

    def test_returns_settings_instance(self):
        """Test that get_settings returns a Settings instance."""
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_cached_instance(self):
        """Test that get_settings returns the same cached instance."""
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2


class TestPipelineConfigFromSettings:
    """Tests for building a per-request config from settings."""

    def test_copies_pipeline_defaults(self, tmp_path):
        settings = Settings(
            output_dir=tmp_path,
            max_lint_iterations=2,
            stop_on_lint_error=True,
            generation_concurrency=4,
        )
        config = PipelineConfig.from_settings(settings)

        assert config.output_dir == tmp_path
        assert config.max_lint_iterations == 2
        assert config.stop_on_lint_error is True
        assert config.max_concurrency == 4
        assert config.aspect_ratio == settings.aspect_ratio

    def test_overrides_win(self, tmp_path):
        settings = Settings(output_dir=tmp_path, auto_fix=True)
        config = PipelineConfig.from_settings(settings, auto_fix=False, render=False)

        assert config.auto_fix is False
        assert config.render is False
