"""Configuration management for WalGraph."""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings, read from ``WALGRAPH_*`` environment variables."""

    # Logging
    log_level: str = Field(default="INFO", alias="WALGRAPH_LOG_LEVEL")
    environment: str = Field(default="development", alias="WALGRAPH_ENVIRONMENT")  # development, testing, production

    # Store policies
    cascade_deletes: bool = Field(default=True, alias="WALGRAPH_CASCADE_DELETES")
    allow_self_loops: bool = Field(default=True, alias="WALGRAPH_ALLOW_SELF_LOOPS")

    # PageRank
    pagerank_damping: float = Field(default=0.85, alias="WALGRAPH_PAGERANK_DAMPING")
    pagerank_max_iterations: int = Field(default=100, alias="WALGRAPH_PAGERANK_MAX_ITERATIONS")
    pagerank_tolerance: float = Field(default=1e-6, alias="WALGRAPH_PAGERANK_TOLERANCE")

    # Executor
    max_batch_lines: int = Field(default=10000, alias="WALGRAPH_MAX_BATCH_LINES")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise and validate the log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("pagerank_damping")
    @classmethod
    def validate_damping(cls, v: float) -> float:
        """Validate that the damping factor is a probability."""
        if not 0.0 < v < 1.0:
            raise ValueError(f"Damping factor must be between 0 and 1, got {v}")
        return v

    @field_validator("pagerank_max_iterations", "max_batch_lines")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Value must be at least 1, got {v}")
        return v

    @field_validator("pagerank_tolerance")
    @classmethod
    def validate_tolerance(cls, v: float) -> float:
        if v <= 0.0:
            raise ValueError(f"Tolerance must be positive, got {v}")
        return v


# Global settings instance - lazy loaded
_settings_instance: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Reset the global settings instance to force reload from environment."""
    global _settings_instance
    _settings_instance = None
