from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


_PROJECT_ROOT = Path(__file__).resolve().parents[1]

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    num_caves: int = 10
    num_tunnels: int = 15
    redis_url: str = "redis://localhost:6379/0"
    notifications_enabled: bool = True
    log_level: str = "INFO"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def load_settings(*, env_file: Path | None = None) -> Settings:
    """Read settings from the environment.

    A `.env` file (project root by default) is loaded first; real environment
    variables win over it.
    """

    env_path = env_file if env_file is not None else _PROJECT_ROOT / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)

    return Settings(
        host=os.environ.get("HOST", Settings.host),
        port=_int_env("PORT", Settings.port),
        num_caves=_int_env("WUMPUS_NUM_CAVES", Settings.num_caves),
        num_tunnels=_int_env("WUMPUS_NUM_TUNNELS", Settings.num_tunnels),
        redis_url=os.environ.get("REDIS_URL", Settings.redis_url),
        notifications_enabled=os.environ.get("WUMPUS_NOTIFICATIONS", "1").strip().lower() in _TRUTHY,
        log_level=os.environ.get("LOG_LEVEL", Settings.log_level).upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
