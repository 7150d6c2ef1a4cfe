"""
Estimator configuration settings.

Manages application settings via environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ESTIMATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Estimator Materials Engine"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Paths
    package_root: Path = Path(__file__).parent.parent
    data_dir: Path = package_root / "data"

    # Material catalog (bundled JSON unless overridden)
    catalog_path: Optional[Path] = None

    @property
    def resolved_catalog_path(self) -> Path:
        """Catalog file to load, falling back to the bundled catalog."""
        return self.catalog_path or self.data_dir / "materials_catalog.json"

    # Usage intelligence
    usage_rebuild_debounce_seconds: float = 0.5
    usage_default_limit: int = 8

    # Catalog matching
    match_default_limit: int = 5

    # Owner used when a resolve request does not name one
    default_owner_id: str = "local"


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings
