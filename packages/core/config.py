"""Centralized engine configuration via Pydantic Settings.

Loads all env vars into a typed Settings instance so the store path, scan
limits and log settings are never read ad hoc with os.environ.get().
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # Learned-pattern store
    LEARNED_PATTERNS_PATH: str = Field(
        default="data/learned_patterns.json",
        description="JSON file holding learned merchant/category patterns",
    )

    # Parsing limits
    MAX_TEXT_LENGTH: int = Field(
        default=2_000_000,
        description="Statement text beyond this many characters is not scanned",
    )
    MIN_BANK_TRANSACTIONS: int = Field(
        default=3,
        description="Bank-specific matches below this count trigger the generic parser",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Python log level")
    ENVIRONMENT: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )

    # App
    APP_VERSION: str = Field(default="0.1.0", description="Engine version")

    @property
    def log_level(self) -> str:
        return self.LOG_LEVEL

    @property
    def json_logs(self) -> bool:
        """Production emits JSON lines, everything else the console renderer."""
        return self.ENVIRONMENT == "production"

    model_config = {"env_file": ".env", "extra": "ignore"}


def get_settings() -> Settings:
    """Factory for Settings, overridable in tests."""
    return Settings()
