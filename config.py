"""
AI App Catalog - Configuration
"""
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Paths
    BASE_DIR: Path = Path(__file__).parent
    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).parent / "data")
    LOG_DIR: Path = Field(default_factory=lambda: Path(__file__).parent / "data" / "logs")

    # Database
    DATABASE_URL: str = Field(
        default_factory=lambda: f"sqlite+aiosqlite:///{Path(__file__).parent / 'data' / 'catalog.db'}",
        description="SQLAlchemy async URL (sqlite+aiosqlite or postgresql+asyncpg)"
    )
    DB_POOL_SIZE: int = Field(default=10, ge=1)
    DB_MAX_OVERFLOW: int = Field(default=5, ge=0)
    DB_POOL_TIMEOUT: float = Field(default=10.0, gt=0, description="Seconds to wait for a pooled connection")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # Ranking
    RANKING_QUERY_TIMEOUT_SECONDS: float = Field(default=5.0, gt=0)
    RANKING_SNAPSHOT_TTL_SECONDS: int = Field(default=300, ge=0, description="0 disables snapshot reads")
    RANKING_REFRESH_INTERVAL_MINUTES: int = Field(default=15, ge=0, description="0 disables the refresh job")

    # API
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8000)
    CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def ensure_directories():
    """Ensure all required directories exist."""
    dirs = [
        settings.DATA_DIR,
        settings.LOG_DIR,
    ]
    for dir_path in dirs:
        dir_path.mkdir(parents=True, exist_ok=True)
