from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic import ConfigDict, field_validator

ENV_BOOL_TRUE = {"1", "true", "yes", "on"}
DEFAULT_CORS_ORIGINS = ("https://ewandrotab.github.io",)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ENV_BOOL_TRUE


def _env_origins() -> tuple[str, ...]:
    raw = os.getenv("IRRF_CORS_ORIGINS")
    if raw is None:
        return DEFAULT_CORS_ORIGINS
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


class Settings(BaseModel):
    cors_origins: tuple[str, ...] = Field(default_factory=_env_origins)
    include_trace: bool = Field(default_factory=lambda: _env_bool("IRRF_INCLUDE_TRACE", True))
    build_version: str = Field(default_factory=lambda: os.getenv("BUILD_VERSION", "dev"))
    build_sha: str = Field(default_factory=lambda: os.getenv("BUILD_SHA", "local"))
    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "3000")))
    log_dir: str = Field(default_factory=lambda: os.getenv("IRRF_LOG_DIR", "logs"))
    log_to_file: bool = Field(default_factory=lambda: _env_bool("IRRF_LOG_TO_FILE", False))

    model_config = ConfigDict(frozen=True)

    @field_validator("port")
    @classmethod
    def _validate_port(cls, value: int) -> int:
        if not 1 <= value <= 65535:
            raise ValueError(f"PORT must be between 1 and 65535, got {value}")
        return value

    @field_validator("cors_origins")
    @classmethod
    def _strip_trailing_slash(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(origin.rstrip("/") for origin in value)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
