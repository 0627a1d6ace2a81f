"""Application configuration."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hexchess.game.board import validate_setup_kinds
from hexchess.game.pieces import PieceKind


class Settings(BaseSettings):
    """Settings loaded from HEXCHESS_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HEXCHESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"

    # Setup lineup as kind letters, placed in this order by "place all (fixed)"
    setup_pool: str = "RNBQK"

    # AI
    ai_seed: int | None = None

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("setup_pool")
    @classmethod
    def _check_setup_pool(cls, value: str) -> str:
        value = value.upper()
        try:
            kinds = [PieceKind(letter) for letter in value]
        except ValueError as e:
            raise ValueError(f"Unknown piece kind in setup pool: {value}") from e
        validate_setup_kinds(kinds)
        return value

    @property
    def setup_kinds(self) -> tuple[PieceKind, ...]:
        """Setup lineup as piece kinds."""
        return tuple(PieceKind(letter) for letter in self.setup_pool)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
