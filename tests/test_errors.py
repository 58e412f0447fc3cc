from fastapi.testclient import TestClient
from app.main import app
import pytest

client = TestClient(app)

def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert "error" in data
    assert "code" in data
    assert data["code"] == "HTTP_ERROR"

def test_405_method_not_allowed():
    response = client.delete("/rank")
    assert response.status_code == 405
    assert response.json()["code"] == "HTTP_ERROR"

def test_custom_exception():
    from app.core.exceptions import UnsupportedStrategyError

    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise UnsupportedStrategyError(message="best balancer is not supported yet")

    response = client.get("/test-custom-error")
    assert response.status_code == 501
    data = response.json()
    assert data["code"] == "UNSUPPORTED_STRATEGY"
    assert data["error"] == "best balancer is not supported yet"

def test_persistence_exception_status():
    from app.core.exceptions import PersistenceError

    @app.get("/test-persistence-error")
    def trigger_persistence_error():
        raise PersistenceError()

    response = client.get("/test-persistence-error")
    assert response.status_code == 503
    assert response.json()["code"] == "PERSISTENCE_FAILURE"
