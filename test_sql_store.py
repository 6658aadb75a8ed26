"""
Tests for SqlHabitStore against an in-memory SQLite database
"""
from datetime import date, timedelta

import pytest
from sqlalchemy.orm import sessionmaker

from habit_tracker import models  # noqa: F401
from habit_tracker.database import Base, build_engine
from habit_tracker.exceptions import NotFoundError, StorageError
from habit_tracker.services.progress_service import refresh_habit_streaks, toggle_progress
from habit_tracker.services.share_service import create_share
from habit_tracker.storage import SqlHabitStore

TODAY = date(2024, 3, 15)
USER = "user-1"


@pytest.fixture
def sql_store():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)()
    store = SqlHabitStore(session)
    yield store
    store.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


def new_habit(store, name="Read", **fields):
    habit = store.create_habit({"user_id": USER, "name": name, **fields})
    store.commit()
    return habit


def test_profile_lifecycle(sql_store):
    created = sql_store.create_profile({"id": USER, "email": "ada@example.com", "name": "Ada"})
    sql_store.commit()
    assert created["theme"] == "light"
    assert created["avatar_url"] == ""

    updated = sql_store.update_profile(USER, {"theme": "dark"})
    sql_store.commit()
    assert updated["theme"] == "dark"
    assert sql_store.get_profile(USER)["name"] == "Ada"

    assert sql_store.update_profile("missing", {"theme": "dark"}) is None

    sql_store.delete_profile(USER)
    sql_store.commit()
    assert sql_store.get_profile(USER) is None


def test_create_habit_fills_column_defaults(sql_store):
    habit = new_habit(sql_store)
    assert habit["id"]
    assert habit["emoji"] == "✅"
    assert habit["category"] == "General"
    assert habit["color"] == "#3B82F6"
    assert habit["is_active"] is True
    assert (habit["current_streak"], habit["longest_streak"], habit["total_completions"]) == (0, 0, 0)
    assert habit["created_at"] is not None


def test_list_habits_filters_and_sorts(sql_store):
    new_habit(sql_store, "Walk", category="Body")
    new_habit(sql_store, "Code", category="Mind")
    nap = new_habit(sql_store, "Nap", category="Body")
    sql_store.update_habit(USER, nap["id"], {"is_active": False, "current_streak": 9})
    sql_store.create_habit({"user_id": "someone-else", "name": "Hidden"})
    sql_store.commit()

    assert [h["name"] for h in sql_store.list_habits(USER, sort="name")] == ["Code", "Nap", "Walk"]
    assert {h["name"] for h in sql_store.list_habits(USER, active=True)} == {"Walk", "Code"}
    assert {h["name"] for h in sql_store.list_habits(USER, category="Body")} == {"Walk", "Nap"}
    assert [h["name"] for h in sql_store.list_habits(USER, sort="streak", limit=1)] == ["Nap"]


def test_get_habit_is_owner_scoped(sql_store):
    habit = new_habit(sql_store)
    assert sql_store.get_habit(USER, habit["id"], for_update=True)["name"] == "Read"
    assert sql_store.get_habit("someone-else", habit["id"]) is None
    assert sql_store.update_habit("someone-else", habit["id"], {"name": "Stolen"}) is None
    assert sql_store.delete_habit("someone-else", habit["id"]) is False


def test_toggle_updates_cached_streaks(sql_store):
    habit = new_habit(sql_store)
    for offset in (0, 1, 2, 6, 7, 8, 9):
        toggle_progress(sql_store, USER, habit["id"], TODAY - timedelta(days=offset), today=TODAY)

    stored = sql_store.get_habit(USER, habit["id"])
    assert (stored["current_streak"], stored["longest_streak"], stored["total_completions"]) == (3, 4, 7)

    record = toggle_progress(sql_store, USER, habit["id"], TODAY, today=TODAY)
    assert record["completed"] is False
    stored = sql_store.get_habit(USER, habit["id"])
    assert (stored["current_streak"], stored["longest_streak"], stored["total_completions"]) == (2, 4, 6)


def test_toggle_unknown_habit(sql_store):
    with pytest.raises(NotFoundError):
        toggle_progress(sql_store, USER, "no-such-habit", TODAY, today=TODAY)


def test_refresh_on_empty_history(sql_store):
    habit = new_habit(sql_store)
    streaks, total = refresh_habit_streaks(sql_store, USER, habit["id"], TODAY)
    assert (streaks.current_streak, streaks.longest_streak, total) == (0, 0, 0)


def test_one_progress_row_per_habit_per_day(sql_store):
    habit = new_habit(sql_store)
    sql_store.create_progress({"user_id": USER, "habit_id": habit["id"], "date": TODAY})
    sql_store.commit()

    with pytest.raises(StorageError):
        sql_store.create_progress({"user_id": USER, "habit_id": habit["id"], "date": TODAY})

    # the session is usable again after the failed insert
    assert len(sql_store.list_progress(USER)) == 1


def test_list_progress_ranges_and_habit_summary(sql_store):
    habit = new_habit(sql_store, "Read", emoji="📚")
    for day in (date(2024, 1, 5), date(2024, 1, 20), date(2024, 2, 3)):
        sql_store.create_progress({"user_id": USER, "habit_id": habit["id"], "date": day})
    sql_store.commit()

    records = sql_store.list_progress(USER, start=date(2024, 1, 1), end=date(2024, 1, 31), with_habit=True)
    assert [r["date"] for r in records] == [date(2024, 1, 20), date(2024, 1, 5)]
    assert records[0]["habit"]["name"] == "Read"
    assert records[0]["habit"]["emoji"] == "📚"

    ascending = sql_store.list_progress(USER, ascending=True)
    assert [r["date"] for r in ascending] == [date(2024, 1, 5), date(2024, 1, 20), date(2024, 2, 3)]
    assert "habit" not in ascending[0]

    assert [r["date"] for r in sql_store.list_progress(USER, day=date(2024, 2, 3))] == [date(2024, 2, 3)]
    assert sql_store.completed_dates(USER, habit["id"])[0] == date(2024, 2, 3)


def test_shares_store_json_snapshots(sql_store):
    habit = new_habit(sql_store, "Run")
    toggle_progress(sql_store, USER, habit["id"], TODAY, today=TODAY)

    share = create_share(sql_store, USER, title="Week", include_stats=True, include_habits=True)
    fetched = sql_store.get_share(share["share_id"])
    assert fetched["stats"] == {"totalHabits": 1, "totalCompletions": 1, "longestStreak": 1}
    assert fetched["habits"] == [{"name": "Run", "emoji": "✅", "current_streak": 1}]
    assert [s["share_id"] for s in sql_store.list_shares(USER)] == [share["share_id"]]

    assert sql_store.delete_share("someone-else", share["share_id"]) is False
    assert sql_store.delete_share(USER, share["share_id"]) is True
    sql_store.commit()
    assert sql_store.get_share(share["share_id"]) is None


def test_delete_everything_for_user(sql_store):
    habit = new_habit(sql_store)
    toggle_progress(sql_store, USER, habit["id"], TODAY, today=TODAY)
    create_share(sql_store, USER)

    sql_store.delete_progress_for_user(USER)
    sql_store.delete_habits_for_user(USER)
    sql_store.delete_shares_for_user(USER)
    sql_store.commit()

    assert sql_store.list_habits(USER) == []
    assert sql_store.list_progress(USER) == []
    assert sql_store.list_shares(USER) == []
