"""
Tests for /api/share: snapshots, the public view and link management
"""
from datetime import timedelta

from habit_tracker.utils.dates import now_utc, today_local


def complete_days(client, user, habit_id, offsets):
    today = today_local()
    for offset in offsets:
        client.post(
            "/api/progress/toggle",
            json={"habitId": habit_id, "date": str(today - timedelta(days=offset))},
            headers=user["headers"],
        )


def test_create_share_with_snapshots(client, user, make_habit):
    read = make_habit("Read", emoji="📚")
    run = make_habit("Run", emoji="🏃")
    complete_days(client, user, read["id"], (0, 1))
    complete_days(client, user, run["id"], (0, 1, 2, 3))

    response = client.post(
        "/api/share/create",
        json={"title": "My month", "description": "Going well", "includeStats": True, "includeHabits": True},
        headers=user["headers"],
    )
    assert response.status_code == 201
    body = response.json()
    share_id = body["shareId"]
    assert share_id.startswith(f"{user['id']}_")
    assert body["shareUrl"].endswith(f"/share/{share_id}")

    record = body["shareRecord"]
    assert record["title"] == "My month"
    assert record["include_stats"] is True
    assert record["include_habits"] is True
    assert record["stats"] == {"totalHabits": 2, "totalCompletions": 6, "longestStreak": 4}
    assert record["habits"] == [
        {"name": "Run", "emoji": "🏃", "current_streak": 4},
        {"name": "Read", "emoji": "📚", "current_streak": 2},
    ]


def test_share_ids_are_unique(client, user):
    ids = {
        client.post("/api/share/create", json={}, headers=user["headers"]).json()["shareId"]
        for _ in range(5)
    }
    assert len(ids) == 5


def test_public_view_needs_no_token(client, user, make_habit):
    habit = make_habit("Read")
    complete_days(client, user, habit["id"], (0,))
    share_id = client.post(
        "/api/share/create",
        json={"includeStats": True, "includeHabits": True},
        headers=user["headers"],
    ).json()["shareId"]

    response = client.get(f"/api/share/{share_id}")
    assert response.status_code == 200
    view = response.json()
    assert view["title"] == "My Habit Progress"
    assert view["user"]["name"] == "Ada Lovelace"
    assert view["stats"]["totalHabits"] == 1
    assert view["habits"] == [{"name": "Read", "emoji": "✅", "current_streak": 1}]


def test_flags_default_to_true_without_snapshots(client, user, make_habit):
    make_habit("Read")
    body = client.post("/api/share/create", json={"title": "Bare"}, headers=user["headers"]).json()
    record = body["shareRecord"]
    assert record["include_stats"] is True
    assert record["include_habits"] is True
    assert record["stats"] is None
    assert record["habits"] is None

    view = client.get(f"/api/share/{body['shareId']}").json()
    assert "stats" not in view
    assert "habits" not in view


def test_excluded_sections_are_not_stored(client, user, make_habit):
    make_habit("Read")
    body = client.post(
        "/api/share/create",
        json={"includeStats": False, "includeHabits": True},
        headers=user["headers"],
    ).json()
    assert body["shareRecord"]["include_stats"] is False
    assert body["shareRecord"]["stats"] is None

    view = client.get(f"/api/share/{body['shareId']}").json()
    assert "stats" not in view
    assert view["habits"][0]["name"] == "Read"


def test_unknown_share(client):
    response = client.get("/api/share/nobody_0_abcdefghi")
    assert response.status_code == 404
    assert response.json() == {"message": "Shared progress not found", "code": "NOT_FOUND"}


def test_expired_share(client, user, store):
    share_id = client.post("/api/share/create", json={}, headers=user["headers"]).json()["shareId"]
    for share in store.shares.values():
        if share["share_id"] == share_id:
            share["expires_at"] = now_utc() - timedelta(minutes=1)

    response = client.get(f"/api/share/{share_id}")
    assert response.status_code == 410
    assert response.json()["code"] == "EXPIRED"


def test_user_links_and_delete(client, user, other_user):
    first = client.post("/api/share/create", json={"title": "First"}, headers=user["headers"]).json()
    second = client.post("/api/share/create", json={"title": "Second"}, headers=user["headers"]).json()
    client.post("/api/share/create", json={"title": "Not mine"}, headers=other_user["headers"])

    links = client.get("/api/share/user/links", headers=user["headers"]).json()
    assert [link["title"] for link in links] == ["Second", "First"]
    assert links[0]["shareUrl"] == second["shareUrl"]

    # deleting someone else's link is a silent no-op
    client.delete(f"/api/share/{first['shareId']}", headers=other_user["headers"])
    assert client.get(f"/api/share/{first['shareId']}").status_code == 200

    response = client.delete(f"/api/share/{first['shareId']}", headers=user["headers"])
    assert response.status_code == 200
    assert response.json()["message"] == "Shared link deleted successfully"
    assert client.get(f"/api/share/{first['shareId']}").status_code == 404

    links = client.get("/api/share/user/links", headers=user["headers"]).json()
    assert [link["shareId"] for link in links] == [second["shareId"]]


def test_shareable_stats(client, user, make_habit):
    read = make_habit("Read")
    run = make_habit("Run")
    complete_days(client, user, read["id"], (0, 1, 2))
    complete_days(client, user, run["id"], (0,))

    response = client.get("/api/share/stats", headers=user["headers"])
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["name"] == "Ada Lovelace"
    assert body["stats"] == {
        "totalHabits": 2,
        "totalCompletions": 4,
        "longestStreak": 3,
        "averageStreak": 2,
    }
    assert [h["name"] for h in body["topHabits"]] == ["Read", "Run"]
    assert body["topHabits"][0]["currentStreak"] == 3
    today = str(today_local())
    assert body["activityChart"][today] == {"completed": 2, "total": 2}
    assert "generatedAt" in body
