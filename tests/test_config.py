import pytest
from pydantic import ValidationError

from beyond_january.config import Settings, get_settings
from beyond_january.counter import DeterministicCounter


def test_defaults(clean_settings):
    settings = Settings(_env_file=None)
    assert settings.counter_min_gap == 1
    assert settings.counter_max_gap == 60
    assert settings.log_format == "text"
    assert settings.max_active_goals == 5
    assert settings.db_path.endswith("beyond_january.db")


def test_env_overrides(monkeypatch, clean_settings):
    monkeypatch.setenv("BEYOND_JANUARY_COUNTER_MIN_GAP", "5")
    monkeypatch.setenv("BEYOND_JANUARY_COUNTER_MAX_GAP", "10")
    monkeypatch.setenv("BEYOND_JANUARY_LOG_FORMAT", "json")
    settings = get_settings()
    assert (settings.counter_min_gap, settings.counter_max_gap) == (5, 10)
    assert settings.log_format == "json"
    assert get_settings() is settings


@pytest.mark.parametrize("min_gap, max_gap", [("0", "60"), ("61", "60"), ("-3", "-1")])
def test_invalid_counter_bounds_fail_at_load(monkeypatch, clean_settings, min_gap, max_gap):
    monkeypatch.setenv("BEYOND_JANUARY_COUNTER_MIN_GAP", min_gap)
    monkeypatch.setenv("BEYOND_JANUARY_COUNTER_MAX_GAP", max_gap)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_invalid_log_format(monkeypatch, clean_settings):
    monkeypatch.setenv("BEYOND_JANUARY_LOG_FORMAT", "xml")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_counter_from_settings(clean_settings):
    counter = Settings(_env_file=None, counter_min_gap=5, counter_max_gap=10).counter()
    assert isinstance(counter, DeterministicCounter)
    assert counter.count("2026-01-15", 3600) == 480
