import sqlite3

import pytest

from beyond_january import db
from beyond_january.errors import GoalNotFoundError, GoalSelectionError, InvalidStatusError

NOW = "2026-01-15T09:00:00"


def test_init_db_seeds_catalog_once(db_path):
    first = db.list_templates(db_path=db_path)
    db.init_db(db_path)
    assert db.list_templates(db_path=db_path) == first
    assert len(first) == len(db.TEMPLATE_CATALOG)


def test_templates_ordered_by_category_then_title(db_path):
    templates = db.list_templates(db_path=db_path)
    keys = [(t["category"], t["title"]) for t in templates]
    assert keys == sorted(keys)
    assert {t["category"] for t in templates} == set(db.CATEGORY_EMOJI)


def test_template_search_matches_title_or_category(db_path):
    by_title = db.list_templates("WATER", db_path=db_path)
    assert [t["title"] for t in by_title] == ["Drink water"]

    by_category = db.list_templates("sleep", db_path=db_path)
    assert {t["category"] for t in by_category} == {"Sleep & Routine"}

    assert db.list_templates("   ", db_path=db_path) == db.list_templates(db_path=db_path)
    assert db.list_templates("zzz-nothing", db_path=db_path) == []


def test_add_goals_uses_template_defaults(db_path, template_ids):
    db.add_goals(template_ids[:2], NOW, db_path=db_path)
    goals = db.list_active_goals(db_path=db_path)
    templates = {t["id"]: t for t in db.get_templates(template_ids[:2], db_path=db_path)}

    assert [g["goal_template_id"] for g in goals] == sorted(template_ids[:2])
    for g in goals:
        t = templates[g["goal_template_id"]]
        assert g["title"] == t["title"]
        assert g["template_category"] == t["category"]
        assert g["cadence"] == t["default_cadence"]
        assert g["share_level"] == "private"
        assert g["active"] is True
        assert g["custom_title"] is None


def test_add_goals_rejects_empty_selection(db_path):
    with pytest.raises(GoalSelectionError):
        db.add_goals([], NOW, db_path=db_path)


def test_add_goals_rejects_unknown_templates(db_path):
    with pytest.raises(GoalSelectionError):
        db.add_goals([99999], NOW, db_path=db_path)


def test_add_goals_enforces_limit(db_path, template_ids, clean_settings):
    db.add_goals(template_ids[:4], NOW, db_path=db_path)
    with pytest.raises(GoalSelectionError, match="up to 5"):
        db.add_goals(template_ids[4:6], NOW, db_path=db_path)
    db.add_goals(template_ids[4:5], NOW, db_path=db_path)
    assert len(db.list_active_goals(db_path=db_path)) == 5


def test_add_goals_limit_counts_already_active_once(db_path, template_ids, clean_settings):
    db.add_goals(template_ids[:5], NOW, db_path=db_path)
    # re-adding active goals doesn't count twice
    db.add_goals(template_ids[:2], NOW, db_path=db_path)
    assert len(db.list_active_goals(db_path=db_path)) == 5


def test_custom_limit(db_path, template_ids):
    with pytest.raises(GoalSelectionError):
        db.add_goals(template_ids[:3], NOW, limit=2, db_path=db_path)


def test_limit_defaults_to_configured_max(db_path, template_ids, clean_settings, monkeypatch):
    monkeypatch.setenv("BEYOND_JANUARY_MAX_ACTIVE_GOALS", "2")
    with pytest.raises(GoalSelectionError, match="up to 2"):
        db.add_goals(template_ids[:3], NOW, db_path=db_path)
    db.add_goals(template_ids[:2], NOW, db_path=db_path)
    assert len(db.list_active_goals(db_path=db_path)) == 2


def test_readding_removed_goal_reactivates_it(db_path, two_goals):
    goal = two_goals[0]
    db.rename_goal(goal["id"], "My walk", db_path=db_path)
    db.upsert_checkin(goal["id"], "2026-01-10", "complete", NOW, db_path=db_path)
    db.deactivate_goal(goal["id"], db_path=db_path)
    assert [g["id"] for g in db.list_active_goals(db_path=db_path)] == [two_goals[1]["id"]]

    db.add_goals([goal["goal_template_id"]], NOW, db_path=db_path)
    again = db.get_goal(goal["id"], db_path=db_path)
    assert again["active"] is True
    assert again["custom_title"] is None
    rows = db.list_checkins_for_goal(goal["id"], "2026-01-10", "2026-01-10", db_path=db_path)
    assert [r["status"] for r in rows] == ["complete"]


def test_deactivate_unknown_goal(db_path):
    with pytest.raises(GoalNotFoundError):
        db.deactivate_goal(12345, db_path=db_path)


def test_rename_goal(db_path, two_goals):
    goal = two_goals[0]
    db.rename_goal(goal["id"], "  Evening walk  ", db_path=db_path)
    renamed = db.get_goal(goal["id"], db_path=db_path)
    assert renamed["custom_title"] == "Evening walk"
    assert renamed["title"] == "Evening walk"

    # back to the template title stores NULL
    db.rename_goal(goal["id"], goal["template_title"], db_path=db_path)
    assert db.get_goal(goal["id"], db_path=db_path)["custom_title"] is None


def test_rename_goal_rejects_blank_and_unknown(db_path, two_goals):
    with pytest.raises(GoalSelectionError):
        db.rename_goal(two_goals[0]["id"], "   ", db_path=db_path)
    with pytest.raises(GoalNotFoundError):
        db.rename_goal(999, "x", db_path=db_path)


def test_get_goal_missing(db_path):
    assert db.get_goal(1, db_path=db_path) is None


def test_upsert_checkin_updates_in_place(db_path, two_goals):
    gid = two_goals[0]["id"]
    db.upsert_checkin(gid, "2026-01-15", "partial", "2026-01-15T08:00:00", db_path=db_path)
    db.upsert_checkin(gid, "2026-01-15", "complete", "2026-01-15T20:00:00", db_path=db_path)

    with db.connect(db_path) as conn:
        row = conn.execute(
            "SELECT status, created_at, updated_at FROM checkins WHERE user_goal_id = ? AND checkin_date = ?",
            (gid, "2026-01-15"),
        ).fetchone()
    assert row["status"] == "complete"
    assert row["created_at"] == "2026-01-15T08:00:00"
    assert row["updated_at"] == "2026-01-15T20:00:00"
    assert len(db.list_checkins_between("2026-01-01", "2026-01-31", db_path=db_path)) == 1


def test_upsert_checkin_rejects_unknown_status(db_path, two_goals):
    with pytest.raises(InvalidStatusError):
        db.upsert_checkin(two_goals[0]["id"], "2026-01-15", "done", NOW, db_path=db_path)


def test_upsert_checkin_unknown_goal_violates_foreign_key(db_path):
    with pytest.raises(sqlite3.IntegrityError):
        db.upsert_checkin(4242, "2026-01-15", "complete", NOW, db_path=db_path)

def test_list_checkins_between_is_inclusive_and_filtered(db_path, two_goals):
    a, b = (g["id"] for g in two_goals)
    for day, gid, status in [
        ("2025-12-31", a, "complete"),
        ("2026-01-01", a, "partial"),
        ("2026-01-31", b, "checked_in"),
        ("2026-02-01", b, "complete"),
    ]:
        db.upsert_checkin(gid, day, status, NOW, db_path=db_path)

    rows = db.list_checkins_between("2026-01-01", "2026-01-31", db_path=db_path)
    assert [(r["checkin_date"], r["user_goal_id"], r["status"]) for r in rows] == [
        ("2026-01-01", a, "partial"),
        ("2026-01-31", b, "checked_in"),
    ]
    only_b = db.list_checkins_between("2025-12-01", "2026-02-28", [b], db_path=db_path)
    assert {r["user_goal_id"] for r in only_b} == {b}
    assert db.list_checkins_between("2025-12-01", "2026-02-28", [], db_path=db_path) == []
    assert len(db.list_checkins_for_goal(a, "2025-12-01", "2026-02-28", db_path=db_path)) == 2


def test_user_notes_roundtrip(db_path):
    assert db.get_user_notes(db_path=db_path) == {"general_notes": "", "long_term_goals": "", "updated_at": None}
    db.save_user_notes(" Small wins ", "Run a 10k", NOW, db_path=db_path)
    db.save_user_notes("Small wins", "Run a half marathon", "2026-01-16T09:00:00", db_path=db_path)
    notes = db.get_user_notes(db_path=db_path)
    assert notes["general_notes"] == "Small wins"
    assert notes["long_term_goals"] == "Run a half marathon"
    assert notes["updated_at"] == "2026-01-16T09:00:00"


def test_goal_notes(db_path, two_goals):
    gid = two_goals[0]["id"]
    assert db.get_goal_notes(gid, db_path=db_path)["why"] == ""
    db.save_goal_notes(gid, "Energy", "Walk 5 minutes", NOW, db_path=db_path)
    notes = db.get_goal_notes(gid, db_path=db_path)
    assert (notes["why"], notes["when_hard"]) == ("Energy", "Walk 5 minutes")

    with pytest.raises(GoalNotFoundError):
        db.save_goal_notes(777, "x", "y", NOW, db_path=db_path)


def test_settings_and_display_name(db_path):
    assert db.get_setting("missing", "fallback", db_path=db_path) == "fallback"
    db.set_setting("theme", "dark", db_path=db_path)
    db.set_setting("theme", "light", db_path=db_path)
    assert db.get_setting("theme", db_path=db_path) == "light"

    assert db.get_display_name(db_path=db_path) == ""
    db.set_display_name("  Sam ", db_path=db_path)
    assert db.get_display_name(db_path=db_path) == "Sam"


def test_default_path_comes_from_settings(tmp_path, monkeypatch, clean_settings):
    path = tmp_path / "nested" / "app.db"
    monkeypatch.setenv("BEYOND_JANUARY_DB_PATH", str(path))
    db.init_db()
    assert path.exists()
    assert len(db.list_templates()) == len(db.TEMPLATE_CATALOG)
