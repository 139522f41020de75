"""Configuration management for collective."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment name")

    # Fixture Configuration
    fixture_path: Path | None = Field(
        default=None,
        description="JSON fixture with members, groups and items (defaults to the bundled household)",
    )
    seed_fixture_on_startup: bool = Field(default=True, description="Load the fixture when the app starts")

    @property
    def is_production(self) -> bool:
        """Return True when running in production."""
        return self.environment.lower() == "production"

    def resolve_fixture_path(self) -> Path:
        """Return the configured fixture path, falling back to the bundled household fixture."""
        return self.fixture_path or Constants.DEFAULT_FIXTURE_PATH


# Application Constants
class Constants:
    """Application-wide constants."""

    # Analytics Windows
    WEEK_WINDOW_DAYS: int = 7
    MONTH_WINDOW_DAYS: int = 30
    BREAKDOWN_WEEKS: int = 4  # Weekly slices reported inside the month window

    # Completion Policy
    IDLE_COMPLETION_RATE: float = 1.0  # Rate reported when nothing was assigned
    GROUP_BALANCED_MIN_COMPLETION: float = 0.8  # Group mean below this needs attention
    MEMBER_MIN_COMPLETION: float = 0.6  # Any single member below this needs attention

    # Expense Settlement
    EQUAL_SPLIT_PARTY_SIZE: int = 4  # Fixed party size for equal splits, not the real member count

    # HTTP Status Codes
    HTTP_OK: int = 200
    HTTP_NOT_FOUND: int = 404
    HTTP_UNPROCESSABLE: int = 422
    HTTP_SERVER_ERROR: int = 500

    # Paths
    PACKAGE_ROOT: Path = Path(__file__).parent.parent
    DEFAULT_FIXTURE_PATH: Path = PACKAGE_ROOT / "fixtures" / "household.json"


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
