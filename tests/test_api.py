from fastapi.testclient import TestClient
import pytest

from app.core.config import Settings
from app.core.exceptions import PersistenceError
from app.flow.dispatcher import VerificationDispatcher
from app.factory import create_app
from app.services.ledger_service import VerificationKeeper
from app.services.provider_service import MockTelecomProvider


class FailingKeeper(VerificationKeeper):
    def record_attempt(self, entry):
        raise PersistenceError("transaction conflict")


class TimingOutProvider(MockTelecomProvider):
    def send_sms(self, number):
        raise TimeoutError("SMS gateway timeout")


def client_for(carriers, keeper=None):
    if keeper is None:
        keeper = VerificationKeeper([1, 2, 3, 4, 5])
    dispatcher = VerificationDispatcher("rr", carriers, keeper)
    return TestClient(create_app(Settings(), dispatcher=dispatcher))


def test_verify_success_returns_token():
    client = client_for([MockTelecomProvider("a", 100, 100)])
    response = client.post("/", json={"number": "0177", "time": 1700000000000})

    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"token"}
    assert data["token"]


def test_verify_unreachable_returns_error():
    client = client_for([MockTelecomProvider("a", 0, 0)])
    response = client.post("/", json={"number": "0177", "time": 1700000000000})

    assert response.status_code == 200
    assert response.json() == {"error": "verification unsuccessful"}


def test_verify_without_carriers():
    client = client_for([])
    response = client.post("/", json={"number": "0177", "time": 1700000000000})

    assert response.status_code == 200
    assert response.json() == {"error": "no carriers found"}


def test_verify_persistence_failure():
    client = client_for([MockTelecomProvider("a", 100, 100)], keeper=FailingKeeper([1, 2, 3, 4, 5]))
    response = client.post("/", json={"number": "0177", "time": 1700000000000})

    assert response.status_code == 503
    assert response.json() == {
        "error": "verification could not be recorded",
        "code": "PERSISTENCE_FAILURE",
        "details": {"carrier": "a"},
    }


def test_verify_carrier_timeout():
    client = client_for([TimingOutProvider("slow", 100, 100)])
    response = client.post("/", json={"number": "0177", "time": 1700000000000})

    assert response.status_code == 502
    data = response.json()
    assert data["code"] == "PROVIDER_FAILURE"
    assert data["error"] == "carrier unavailable"
    assert data["details"] == {"carrier": "slow"}
    assert client.get("/rank").json() == []


@pytest.mark.parametrize("body", [
    b"not json",
    b'{"number": "0177"}',
    b'{"number": "0177", "time": "yesterday"}',
    b'{"time": 1700000000000}',
])
def test_malformed_body_gets_text_diagnostic(body):
    client = client_for([MockTelecomProvider("a", 100, 100)])
    response = client.post("/", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text.startswith("invalid verification request")


def test_rank_endpoint():
    client = client_for([MockTelecomProvider("good", 100, 100), MockTelecomProvider("bad", 0, 0)])
    for _ in range(4):
        client.post("/", json={"number": "0177", "time": 1700000000000})

    response = client.get("/rank")
    assert response.status_code == 200
    assert response.json() == [["good", 1.0], ["bad", 5.0]]


def test_rank_empty():
    client = client_for([MockTelecomProvider("a", 100, 100)])
    assert client.get("/rank").json() == []


def test_health_lists_carriers():
    client = client_for([MockTelecomProvider("a", 100, 100)])
    data = client.get("/health").json()

    assert data["status"] == "healthy"
    assert data["balancer"] == "round-robin"
    assert data["carriers"] == ["a"]
    assert client.get("/live").json() == {"status": "alive"}


def test_process_time_header():
    client = client_for([])
    assert "x-process-time" in client.get("/live").headers


def test_unexpected_carrier_error_is_internal_error():
    class BrokenProvider(MockTelecomProvider):
        def send_sms(self, number):
            raise RuntimeError("bad carrier state")

    dispatcher = VerificationDispatcher("rr", [BrokenProvider("a", 100, 100)], VerificationKeeper([1, 2, 3, 4, 5]))
    client = TestClient(create_app(Settings(), dispatcher=dispatcher), raise_server_exceptions=False)
    response = client.post("/", json={"number": "0177", "time": 1700000000000})

    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "INTERNAL_ERROR"
    assert data["details"] == {"type": "RuntimeError"}


def test_unexpected_error_hidden_in_production():
    class BrokenProvider(MockTelecomProvider):
        def send_sms(self, number):
            raise RuntimeError("bad carrier state")

    dispatcher = VerificationDispatcher("rr", [BrokenProvider("a", 100, 100)], VerificationKeeper([1, 2, 3, 4, 5]))
    app = create_app(Settings(ENVIRONMENT="production"), dispatcher=dispatcher)
    response = TestClient(app, raise_server_exceptions=False).post("/", json={"number": "0177", "time": 1700000000000})

    assert response.status_code == 500
    assert "bad carrier state" not in response.text
    assert response.json()["details"] is None
