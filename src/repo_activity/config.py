from __future__ import annotations

import dataclasses
import json
from pathlib import Path

from .db import DEFAULT_DB_PATH


@dataclasses.dataclass(frozen=True)
class Settings:
    database_path: Path = DEFAULT_DB_PATH
    top_contributors: int = 5
    jobs: int = 1


def load_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    data = json.loads(config_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: expected a JSON object at the top level")
    return data


def settings_from_config(config: dict) -> Settings:
    defaults = Settings()
    db_path = str(config.get("database_path", "") or "").strip()
    return Settings(
        database_path=Path(db_path) if db_path else defaults.database_path,
        top_contributors=max(0, int(config.get("top_contributors", defaults.top_contributors))),
        jobs=max(1, int(config.get("jobs", defaults.jobs))),
    )
