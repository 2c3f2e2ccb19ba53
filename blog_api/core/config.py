"""
Process-wide settings.

`load_settings()` reads the environment exactly once at startup. The result
is stored on `app.state.settings` and handed to request-handling code
through `get_settings`; nothing below the app factory should touch
`os.environ`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from fastapi import Request

DEFAULT_JWT_SECRET = "dev-change-this-secret"
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB
IMAGES_DIRNAME = "images"


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8080
    database_url: str = ""
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    storage_root: Path = field(default_factory=Path.cwd)
    graphiql: bool = True
    log_level: str = "INFO"
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES

    @property
    def upload_dir(self) -> Path:
        return self.storage_root / IMAGES_DIRNAME


def _env_str(env: Mapping[str, str], name: str, default: str) -> str:
    return env.get(name, "").strip() or default


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if env is None else env
    storage_root = env.get("STORAGE_ROOT", "").strip()
    return Settings(
        host=_env_str(env, "HOST", "0.0.0.0"),
        port=_env_int(env, "PORT", 8080),
        database_url=env.get("DATABASE_URL", "").strip(),
        jwt_secret=_env_str(env, "JWT_SECRET", DEFAULT_JWT_SECRET),
        jwt_algorithm=_env_str(env, "JWT_ALG", "HS256"),
        access_token_expire_minutes=_env_int(env, "ACCESS_TOKEN_EXPIRE_MIN", 60),
        storage_root=Path(storage_root) if storage_root else Path.cwd(),
        graphiql=_env_bool(env, "GRAPHIQL", True),
        log_level=_env_str(env, "LOG_LEVEL", "INFO").upper(),
        max_upload_bytes=_env_int(env, "MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def get_settings(request: Request) -> Settings:
    """
    FastAPI dependency returning the settings the app was built with.
    """
    return request.app.state.settings
