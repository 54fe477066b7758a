"""Runtime settings with environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEV_JWT_SECRET = "your-secret-key-change-in-production"


def _float_env(key: str, default: float) -> float:
    raw = os.environ.get(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", key, raw, default)
        return default


def _int_env(key: str, default: int) -> int:
    raw = os.environ.get(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", key, raw, default)
        return default


def _bool_env(key: str, default: bool) -> bool:
    raw = os.environ.get(key, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _list_env(key: str) -> tuple[str, ...]:
    raw = os.environ.get(key, "")
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Server settings. Defaults suit local development."""

    host: str = "0.0.0.0"
    port: int = 8080
    db_path: str = "trading.db"
    jwt_secret: str = DEV_JWT_SECRET
    token_ttl_hours: float = 24.0
    allowed_origins: tuple[str, ...] = field(default_factory=tuple)  # Empty = allow all
    tick_interval: float = 3.0
    send_timeout: float = 1.0
    log_level: str = "INFO"
    seed_default_user: bool = True
    bcrypt_rounds: int = 12

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        return cls(
            host=os.environ.get("HOST", "").strip() or cls.host,
            port=_int_env("PORT", cls.port),
            db_path=os.environ.get("DB_PATH", "").strip() or cls.db_path,
            jwt_secret=os.environ.get("JWT_SECRET", "").strip() or DEV_JWT_SECRET,
            token_ttl_hours=_float_env("TOKEN_TTL_HOURS", cls.token_ttl_hours),
            allowed_origins=_list_env("ALLOWED_ORIGINS"),
            tick_interval=_float_env("TICK_INTERVAL", cls.tick_interval),
            send_timeout=_float_env("SEND_TIMEOUT", cls.send_timeout),
            log_level=os.environ.get("LOG_LEVEL", "").strip().upper() or cls.log_level,
            seed_default_user=_bool_env("SEED_DEFAULT_USER", cls.seed_default_user),
            bcrypt_rounds=_int_env("BCRYPT_ROUNDS", cls.bcrypt_rounds),
        )

    @property
    def uses_dev_secret(self) -> bool:
        return self.jwt_secret == DEV_JWT_SECRET
