"""Runtime settings, read from the environment (and an optional .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# When installed in editable mode the project root is the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]

TOKEN_ALGORITHM = "HS256"
_DEV_TOKEN_SECRET = "carconf-dev-secret-change-me"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    token_secret: str
    token_ttl_seconds: int = 60
    db_timeout: float = 5.0
    log_level: str = "WARNING"

    @staticmethod
    def from_env(env: dict[str, str] | None = None) -> Settings:
        """Build settings from *env* (defaults to ``os.environ`` after .env)."""
        if env is None:
            load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")
            env = dict(os.environ)

        data_dir = Path(env.get("CARCONF_DATA_DIR") or _PROJECT_ROOT / "data")
        db_path = Path(env.get("CARCONF_DB_PATH") or data_dir / "carconf.db")

        try:
            ttl = int(env.get("CARCONF_TOKEN_TTL", "60"))
            timeout = float(env.get("CARCONF_DB_TIMEOUT", "5.0"))
        except ValueError as exc:
            raise ValueError(f"Invalid numeric setting: {exc}") from exc
        if ttl <= 0:
            raise ValueError("CARCONF_TOKEN_TTL must be positive")

        return Settings(
            data_dir=data_dir,
            db_path=db_path,
            token_secret=env.get("CARCONF_TOKEN_SECRET", _DEV_TOKEN_SECRET),
            token_ttl_seconds=ttl,
            db_timeout=timeout,
            log_level=env.get("CARCONF_LOG_LEVEL", "WARNING").upper(),
        )
