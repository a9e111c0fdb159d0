"""Application settings loaded from the environment.

Values are read from environment variables, with a ``.env`` file in the
working directory loaded first via python-dotenv. Settings are cached;
call ``get_settings.cache_clear()`` after changing the environment (tests).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

_DEV_SECRET = "cvfast-dev-secret-change-me-in-production"


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the API.

    Attributes:
        jwt_secret_key: HMAC key used to sign bearer tokens.
        jwt_issuer: ``iss`` claim written to and required on tokens.
        jwt_audience: ``aud`` claim written to and required on tokens.
        jwt_expiration_minutes: Token lifetime.
        public_base_url: Base used for share URLs; falls back to the request's
            base URL when unset.
        cors_allow_origins: Origins allowed by the CORS middleware.
        log_level: Root logging level name.
    """

    jwt_secret_key: str = _DEV_SECRET
    jwt_issuer: str = "cvfast"
    jwt_audience: str = "cvfast-clients"
    jwt_expiration_minutes: int = 60
    public_base_url: str | None = None
    cors_allow_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings from the current environment."""
    secret = os.getenv("JWT_SECRET_KEY")
    if not secret:
        logging.getLogger(__name__).warning(
            "JWT_SECRET_KEY is not set; using the development secret"
        )
        secret = _DEV_SECRET

    base_url = os.getenv("PUBLIC_BASE_URL")
    return Settings(
        jwt_secret_key=secret,
        jwt_issuer=os.getenv("JWT_ISSUER", "cvfast"),
        jwt_audience=os.getenv("JWT_AUDIENCE", "cvfast-clients"),
        jwt_expiration_minutes=int(os.getenv("JWT_EXPIRATION_MINUTES", "60")),
        public_base_url=base_url.rstrip("/") if base_url else None,
        cors_allow_origins=_split_csv(os.getenv("CORS_ALLOW_ORIGINS", "*")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the API process."""
    logging.basicConfig(
        level=level or get_settings().log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
