from __future__ import annotations

import json
from pathlib import Path

import pytest

from repo_activity.config import Settings, load_config, settings_from_config
from repo_activity.db import DEFAULT_DB_PATH


def test_missing_config_is_empty(tmp_path: Path) -> None:
    assert load_config(tmp_path / "config.json") == {}
    assert settings_from_config({}) == Settings()
    assert Settings().database_path == DEFAULT_DB_PATH


def test_settings_from_config(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"database_path": "data/x.db", "top_contributors": 10, "jobs": 0}), encoding="utf-8")
    s = settings_from_config(load_config(path))
    assert s.database_path == Path("data/x.db")
    assert s.top_contributors == 10
    assert s.jobs == 1


def test_config_must_be_an_object(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)
