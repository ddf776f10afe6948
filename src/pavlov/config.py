"""Lightweight library configuration loader."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no"}


@dataclass(frozen=True)
class EntitySettings:
    """Immutable configuration sourced from environment variables."""

    environment: str = "development"
    log_level: str = "WARNING"
    validate_types: bool = True
    strict_types: bool = False

    @classmethod
    def from_env(cls) -> EntitySettings:
        return cls(
            environment=os.getenv("PAVLOV_ENV", cls.environment),
            log_level=os.getenv("PAVLOV_LOG_LEVEL", cls.log_level).strip().upper(),
            validate_types=_env_bool("PAVLOV_VALIDATE_TYPES", cls.validate_types),
            strict_types=_env_bool("PAVLOV_STRICT_TYPES", cls.strict_types),
        )


@lru_cache(maxsize=1)
def get_settings() -> EntitySettings:
    """Return the cached settings for the current process."""

    return EntitySettings.from_env()


def reset_settings() -> None:
    """Clear the cached settings (useful for tests)."""

    get_settings.cache_clear()


__all__ = ["EntitySettings", "get_settings", "reset_settings"]
