"""
Tests for /api/habits
"""
import uuid


def test_create_habit_applies_defaults(client, user):
    response = client.post("/api/habits", json={"name": "  Meditate  "}, headers=user["headers"])
    assert response.status_code == 201
    habit = response.json()
    assert habit["name"] == "Meditate"
    assert habit["user_id"] == user["id"]
    assert habit["emoji"] == "✅"
    assert habit["category"] == "General"
    assert habit["color"] == "#3B82F6"
    assert habit["description"] == ""
    assert habit["is_active"] is True
    assert (habit["current_streak"], habit["longest_streak"], habit["total_completions"]) == (0, 0, 0)


def test_create_habit_requires_name(client, user):
    response = client.post("/api/habits", json={"name": "   "}, headers=user["headers"])
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["errors"][0]["field"] == "name"
    assert body["errors"][0]["message"] == "Habit name is required"


def test_habits_require_authentication(client):
    assert client.get("/api/habits").status_code == 401
    assert client.post("/api/habits", json={"name": "Read"}).json()["code"] == "NO_TOKEN"


def test_list_habits_is_scoped_to_owner(client, user, other_user, make_habit):
    make_habit("Read")
    make_habit("Run")
    client.post("/api/habits", json={"name": "Someone else's"}, headers=other_user["headers"])

    response = client.get("/api/habits", headers=user["headers"])
    assert response.status_code == 200
    assert sorted(h["name"] for h in response.json()) == ["Read", "Run"]


def test_list_habits_newest_first_and_sort_by_name(client, user, make_habit):
    make_habit("Walk")
    make_habit("Code")
    make_habit("Nap")

    names = [h["name"] for h in client.get("/api/habits", headers=user["headers"]).json()]
    assert names == ["Nap", "Code", "Walk"]

    names = [h["name"] for h in client.get("/api/habits?sort=name", headers=user["headers"]).json()]
    assert names == ["Code", "Nap", "Walk"]


def test_list_habits_filters(client, user, make_habit):
    make_habit("Read", category="Mind")
    run = make_habit("Run", category="Body")
    client.put(f"/api/habits/{run['id']}", json={"is_active": False}, headers=user["headers"])

    active = client.get("/api/habits?active=true", headers=user["headers"]).json()
    assert [h["name"] for h in active] == ["Read"]

    archived = client.get("/api/habits?active=false", headers=user["headers"]).json()
    assert [h["name"] for h in archived] == ["Run"]

    body = client.get("/api/habits?category=Body", headers=user["headers"]).json()
    assert [h["name"] for h in body] == ["Run"]

    everything = client.get("/api/habits?category=all", headers=user["headers"]).json()
    assert len(everything) == 2


def test_categories_are_distinct(client, user, make_habit):
    make_habit("Read", category="Mind")
    make_habit("Journal", category="Mind")
    make_habit("Run", category="Body")

    response = client.get("/api/habits/categories", headers=user["headers"])
    assert response.status_code == 200
    assert sorted(response.json()) == ["Body", "Mind"]


def test_update_habit_changes_only_given_fields(client, user, make_habit):
    habit = make_habit("Read", emoji="📚", category="Mind")

    response = client.put(
        f"/api/habits/{habit['id']}",
        json={"name": " Read more ", "color": "#FF0000"},
        headers=user["headers"],
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["name"] == "Read more"
    assert updated["color"] == "#FF0000"
    assert updated["emoji"] == "📚"
    assert updated["category"] == "Mind"
    assert updated["updated_at"] is not None


def test_update_unknown_habit(client, user):
    response = client.put(f"/api/habits/{uuid.uuid4()}", json={"name": "Nope"}, headers=user["headers"])
    assert response.status_code == 404
    assert response.json() == {"message": "Habit not found", "code": "NOT_FOUND"}


def test_cannot_touch_another_users_habit(client, other_user, make_habit):
    habit = make_habit("Private")

    response = client.put(f"/api/habits/{habit['id']}", json={"name": "Mine now"}, headers=other_user["headers"])
    assert response.status_code == 404

    response = client.delete(f"/api/habits/{habit['id']}", headers=other_user["headers"])
    assert response.status_code == 404


def test_delete_habit_removes_progress(client, user, store, make_habit):
    habit = make_habit("Read")
    client.post("/api/progress/toggle", json={"habitId": habit["id"], "date": "2024-01-01"}, headers=user["headers"])
    assert store.list_progress(user["id"], habit_id=habit["id"])

    response = client.delete(f"/api/habits/{habit['id']}", headers=user["headers"])
    assert response.status_code == 200
    assert response.json()["message"] == "Habit deleted successfully"

    assert client.get("/api/habits", headers=user["headers"]).json() == []
    assert store.list_progress(user["id"], habit_id=habit["id"]) == []


def test_update_rejects_null_for_required_fields(client, user, make_habit):
    habit = make_habit("Read", emoji="📚")

    for field in ("name", "emoji", "category", "color", "is_active"):
        response = client.put(f"/api/habits/{habit['id']}", json={field: None}, headers=user["headers"])
        assert response.status_code == 400, field
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["errors"][0]["field"] == field
        assert body["errors"][0]["message"] == "Value cannot be null"

    response = client.get("/api/habits", headers=user["headers"])
    assert response.status_code == 200
    stored = response.json()[0]
    assert stored["name"] == "Read"
    assert stored["emoji"] == "📚"
    assert stored["is_active"] is True


def test_update_null_description_clears_it(client, user, make_habit):
    habit = make_habit("Read", description="Twenty pages")

    response = client.put(f"/api/habits/{habit['id']}", json={"description": None}, headers=user["headers"])
    assert response.status_code == 200
    assert response.json()["description"] == ""
    assert client.get("/api/habits", headers=user["headers"]).status_code == 200
