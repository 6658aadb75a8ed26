"""
Tests for app-level routes, error shapes and middleware
"""


def test_root_banner(client):
    response = client.get("/")
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Habit Tracker API Server"
    assert body["endpoints"]["habits"] == "/api/habits"


def test_health_check(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["timestamp"]
    assert "environment" in body


def test_unknown_route(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"message": "Route not found", "code": "NOT_FOUND"}


def test_security_headers(client):
    response = client.get("/api/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "SAMEORIGIN"


def test_request_id_is_generated_or_echoed(client):
    response = client.get("/api/health")
    assert response.headers["X-Request-ID"]

    response = client.get("/api/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_unauthorized_response_has_bearer_challenge(client):
    response = client.get("/api/habits")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_collection_routes_answer_without_redirect(client, user):
    response = client.get("/api/habits", headers=user["headers"], follow_redirects=False)
    assert response.status_code == 200

    response = client.post("/api/habits", json={"name": "Read"}, headers=user["headers"], follow_redirects=False)
    assert response.status_code == 201

    response = client.get("/api/progress", headers=user["headers"], follow_redirects=False)
    assert response.status_code == 200
    assert len(client.get("/api/habits", headers=user["headers"]).json()) == 1
