"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    env: str
    log_level: str

    @property
    def is_production(self) -> bool:
        return self.env in ("production", "staging")


def load_settings() -> Settings:
    env = os.getenv("SHOPCORE_ENV", "development").lower()
    data_dir = os.getenv("SHOPCORE_DATA_DIR")
    return Settings(
        data_dir=Path(data_dir).expanduser() if data_dir else _DEFAULT_DATA_DIR,
        env=env,
        log_level=os.getenv("LOG_LEVEL", _LEVELS_BY_ENV.get(env, "INFO")).upper(),
    )
