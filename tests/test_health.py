from app.core.config import settings


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["status"] == "ok"
    assert body["data"]["service"] == "production-management-api"
    assert body["data"]["time"]


def test_version(client):
    response = client.get("/api/version")
    assert response.status_code == 200
    assert response.json()["data"]["version"] == settings.app_version


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "NOT_FOUND"
    assert body["error"]["message"] == "Route not found"


def test_malformed_json_body_is_form_error(client):
    response = client.post(
        "/api/auth/login",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"]["formErrors"]
    assert error["details"]["fieldErrors"] == {}
