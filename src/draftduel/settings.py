"""Runtime configuration read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional


logger = logging.getLogger(__name__)

_DB_PATH_ENV = "DRAFTDUEL_DB_PATH"
_SESSION_SECRET_ENV = "DRAFTDUEL_SESSION_SECRET"
_SESSION_TTL_ENV = "DRAFTDUEL_SESSION_TTL_DAYS"
_MAX_SKIPS_ENV = "DRAFTDUEL_MAX_SKIPS"
_CATALOG_PATH_ENV = "DRAFTDUEL_CATALOG_PATH"

_DB_PATH_DEFAULT = "draftduel.sqlite"
_SESSION_SECRET_DEFAULT = "dev-session-secret-change-me"
_SESSION_TTL_DEFAULT = 30
_MAX_SKIPS_DEFAULT = 1


def _env_int(
    env: Mapping[str, str],
    name: str,
    default: int,
    *,
    min_value: int | None = None,
) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


@dataclass(frozen=True)
class Settings:
    db_path: str = _DB_PATH_DEFAULT
    session_secret: str = _SESSION_SECRET_DEFAULT
    session_ttl_days: int = _SESSION_TTL_DEFAULT
    max_skips: int = _MAX_SKIPS_DEFAULT
    catalog_path: Optional[Path] = None

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        secret = env.get(_SESSION_SECRET_ENV) or _SESSION_SECRET_DEFAULT
        if secret == _SESSION_SECRET_DEFAULT:
            logger.warning("%s is not set; using the development secret", _SESSION_SECRET_ENV)
        catalog_raw = env.get(_CATALOG_PATH_ENV)
        return cls(
            db_path=env.get(_DB_PATH_ENV) or _DB_PATH_DEFAULT,
            session_secret=secret,
            session_ttl_days=_env_int(env, _SESSION_TTL_ENV, _SESSION_TTL_DEFAULT, min_value=1),
            max_skips=_env_int(env, _MAX_SKIPS_ENV, _MAX_SKIPS_DEFAULT, min_value=0),
            catalog_path=Path(catalog_raw) if catalog_raw else None,
        )
