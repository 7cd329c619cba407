"""Application-level API tests."""


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_validation_errors_use_error_shape(client):
    response = client.post("/api/auth/reset-password", json={"token": "abc"})
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "validation_error"
    assert isinstance(body["error"], str)


def test_cors_allows_credentials_in_development(client):
    response = client.get("/health", headers={"Origin": "http://localhost:5173"})
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
    assert response.headers["access-control-allow-credentials"] == "true"
