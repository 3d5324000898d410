"""Environment-driven defaults for token handling."""

from __future__ import annotations

import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .algorithms import supported_algorithms
from .constants import DEFAULT_ALGORITHM
from .logging import DEFAULT_LOG_LEVEL


class ConfigError(RuntimeError):
    """Raised when token configuration is invalid."""


class TokenConfig(BaseModel):
    """Validated token defaults loaded from environment variables."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Root log level")
    default_algorithm: str = Field(
        default=DEFAULT_ALGORITHM, description="Algorithm assigned to newly created tokens"
    )
    clock_skew_seconds: int = Field(
        default=0,
        ge=0,
        description="Allowed clock skew (seconds) when validating exp/nbf on parse",
    )

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        from logging import getLevelName

        candidate = value.upper()
        if isinstance(getLevelName(candidate), int):
            return candidate
        raise ValueError(f"Unsupported log level '{value}'")

    @field_validator("default_algorithm")
    @classmethod
    def _validate_algorithm(cls, value: str) -> str:
        if value not in supported_algorithms():
            raise ValueError(f"Unsupported algorithm '{value}'")
        return value

    @classmethod
    def from_env(cls) -> TokenConfig:
        """Load configuration from environment variables (respecting .env)."""
        load_dotenv()
        try:
            raw: dict[str, Any] = {
                "log_level": os.getenv("TOKI_LOG_LEVEL", cls.model_fields["log_level"].default),
                "default_algorithm": os.getenv(
                    "TOKI_DEFAULT_ALGORITHM", cls.model_fields["default_algorithm"].default
                ),
                "clock_skew_seconds": cls._env_to_int(
                    "TOKI_CLOCK_SKEW_SECONDS", cls.model_fields["clock_skew_seconds"].default
                ),
            }
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise ConfigError("Invalid token configuration") from exc

    @staticmethod
    def _env_to_int(name: str, default: int) -> int:
        raw = os.getenv(name)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError as exc:
            raise ValueError(f"Environment variable {name} must be an integer") from exc


def load_config() -> TokenConfig:
    """Convenience helper to load configuration with error propagation."""
    return TokenConfig.from_env()
