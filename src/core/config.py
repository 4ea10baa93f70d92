"""
Application settings using Pydantic for validation and type safety.
Security: All sensitive values loaded from environment variables.
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration with validation and security best practices."""

    # Application
    app_name: str = Field(default="DeckSmith", description="Application name")
    debug: bool = Field(default=False, description="Debug mode flag")

    # Paths (relative to workspace root)
    output_dir: Path = Field(default=Path("output"), description="Directory for generated decks")

    # Pipeline defaults
    auto_fix: bool = Field(default=True, description="Apply style guardian patches automatically")
    max_lint_iterations: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Maximum fix/layout/lint iterations per generation"
    )
    stop_on_lint_error: bool = Field(
        default=False,
        description="Fail the pipeline when error-severity violations remain"
    )
    aspect_ratio: str = Field(default="16:9", description="Default slide aspect ratio")
    save_spec: bool = Field(default=False, description="Write the final deck JSON next to the output file")

    # Generation
    outline_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        le=600,
        description="Timeout for the outline generation call"
    )
    generation_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        le=600,
        description="Timeout for each per-slide content/design call"
    )
    generation_concurrency: int = Field(
        default=10,
        ge=1,
        le=64,
        description="Maximum concurrent per-slide generation calls"
    )

    # Azure OpenAI Configuration
    azure_openai_api_key: Optional[str] = Field(
        default=None,
        description="Azure OpenAI API key (sensitive)"
    )
    azure_openai_endpoint: Optional[str] = Field(
        default=None,
        description="Azure OpenAI endpoint URL"
    )
    azure_openai_deployment: str = Field(
        default="gpt-4o",
        description="Azure OpenAI deployment name for the outline/content/design agents"
    )
    azure_openai_api_version: str = Field(
        default="2024-10-21",
        description="Azure OpenAI API version"
    )

    # Tracing Configuration (Optional - disabled by default)
    tracing_enabled: bool = Field(
        default=False,
        description="Enable OpenTelemetry tracing for AI services"
    )
    tracing_service_name: str = Field(
        default="decksmith",
        description="Service name for tracing"
    )
    applicationinsights_connection_string: Optional[str] = Field(
        default=None,
        description="Azure Application Insights connection string for cloud tracing"
    )

    @property
    def has_azure_openai(self) -> bool:
        """Check if Azure OpenAI is fully configured."""
        return bool(
            self.azure_openai_api_key
            and self.azure_openai_endpoint
            and self.azure_openai_deployment
        )

    @property
    def reasoning_provider(self) -> str:
        """Get the active reasoning provider name."""
        if self.has_azure_openai:
            return "azure"
        return "heuristic"

    @field_validator("output_dir")
    @classmethod
    def validate_output_dir(cls, v: Path) -> Path:
        """Ensure output directory path is valid."""
        return Path(v)

    @field_validator("aspect_ratio")
    @classmethod
    def validate_aspect_ratio(cls, v: str) -> str:
        """Only the supported slide aspect ratios are accepted."""
        if v not in ("16:9", "4:3", "16:10", "A4"):
            raise ValueError(f"Unsupported aspect ratio: {v}")
        return v

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        env_prefix = ""
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Using lru_cache ensures settings are loaded once and reused.
    """
    return Settings()
