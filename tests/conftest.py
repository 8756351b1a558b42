# tests/conftest.py
from __future__ import annotations

import random
from collections.abc import Iterator

import pytest

from beyond_january import db
from beyond_january.config import get_settings


@pytest.fixture()
def db_path(tmp_path) -> str:
    path = str(tmp_path / "beyond_january.db")
    db.init_db(path)
    return path


@pytest.fixture()
def template_ids(db_path: str) -> list[int]:
    return [t["id"] for t in db.list_templates(db_path=db_path)]


@pytest.fixture()
def two_goals(db_path: str, template_ids: list[int]) -> list[dict]:
    db.add_goals(template_ids[:2], "2026-01-01T08:00:00", db_path=db_path)
    return db.list_active_goals(db_path=db_path)


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def clean_settings(monkeypatch) -> Iterator[None]:
    for key in (
        "BEYOND_JANUARY_DB_PATH",
        "BEYOND_JANUARY_LOG_LEVEL",
        "BEYOND_JANUARY_LOG_FORMAT",
        "BEYOND_JANUARY_COUNTER_MIN_GAP",
        "BEYOND_JANUARY_COUNTER_MAX_GAP",
        "BEYOND_JANUARY_MAX_ACTIVE_GOALS",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
