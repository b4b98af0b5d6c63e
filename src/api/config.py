"""
Environment-driven configuration for the RideShare backend.

Required:
- DATABASE_URL: SQLAlchemy connection string
- JWT_SECRET_KEY: secret used to sign access tokens

Optional:
- JWT_ALGORITHM (default HS256)
- ACCESS_TOKEN_EXPIRE_MINUTES (default 60)
- BCRYPT_ROUNDS (default 12)
- RIDE_COMPLETION_POLICY: "any" or "participants" (default any)
- LOG_LEVEL (default INFO)
- CORS_ALLOW_ORIGINS: comma-separated list (default *)
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class CompletionPolicy(str, enum.Enum):
    """Who may mark an accepted ride as completed."""

    any = "any"
    participants = "participants"


def _require_env(name: str) -> str:
    """Read a required environment variable or raise a clear error."""
    value = os.getenv(name)
    if not value:
        raise RuntimeError(
            f"Missing required environment variable: {name}. "
            "Please set it in the backend container .env."
        )
    return value


def _env(name: str, default: str) -> str:
    """Read an optional variable; unset and blank values both mean `default`."""
    value = os.getenv(name, "").strip()
    return value or default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {name} must be an integer, got {raw!r}.")


def _normalize_database_url(url: str) -> str:
    """
    Normalize DATABASE_URL to a SQLAlchemy-compatible URL.

    Notes:
    - Some platforms provide 'postgres://...' which SQLAlchemy expects as
      'postgresql://...'.
    """
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


@dataclass(frozen=True)
class Settings:
    database_url: str
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    bcrypt_rounds: int = 12
    completion_policy: CompletionPolicy = CompletionPolicy.any
    log_level: str = "INFO"
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])


# PUBLIC_INTERFACE
def load_settings() -> Settings:
    """Build Settings from the current environment, raising RuntimeError on bad values."""
    policy_raw = _env("RIDE_COMPLETION_POLICY", CompletionPolicy.any.value).lower()
    try:
        policy = CompletionPolicy(policy_raw)
    except ValueError:
        raise RuntimeError(
            f"RIDE_COMPLETION_POLICY must be one of "
            f"{', '.join(p.value for p in CompletionPolicy)}; got {policy_raw!r}."
        )

    log_level = _env("LOG_LEVEL", "INFO").upper()
    if log_level not in LOG_LEVELS:
        raise RuntimeError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}; got {log_level!r}.")

    origins = [o.strip() for o in _env("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]

    return Settings(
        database_url=_normalize_database_url(_require_env("DATABASE_URL")),
        jwt_secret_key=_require_env("JWT_SECRET_KEY"),
        jwt_algorithm=_env("JWT_ALGORITHM", "HS256"),
        access_token_expire_minutes=_int_env("ACCESS_TOKEN_EXPIRE_MINUTES", 60),
        bcrypt_rounds=_int_env("BCRYPT_ROUNDS", 12),
        completion_policy=policy,
        log_level=log_level,
        cors_allow_origins=origins or ["*"],
    )


# PUBLIC_INTERFACE
@lru_cache
def get_settings() -> Settings:
    """Process-wide cached settings; call get_settings.cache_clear() after env changes."""
    return load_settings()
