"""
Tests for the gateway API.
"""

import pytest
from conftest import ORIGIN, StubOrigin
from fastapi.testclient import TestClient

from tandem_offline.api.app import create_app
from tandem_offline.config import Settings
from tandem_offline.repositories import InMemoryPartitionStore


def make_client(origin: StubOrigin) -> TestClient:
    app = create_app(
        settings=Settings(
            app_origin=ORIGIN,
            partition_backend="memory",
            update_interval_seconds=0,
        ),
        network=origin.network(),
        store=InMemoryPartitionStore(),
    )
    return TestClient(app)


@pytest.fixture
def client(origin):
    """Create a test client with the lifespan running."""
    with make_client(origin) as test_client:
        yield test_client


def test_root(client):
    response = client.get("/__sw__")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Tandem Offline Gateway"
    assert data["version"] == "v3"


def test_health(client):
    response = client.get("/__sw__/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "store_healthy": True, "state": "active"}


def test_status(client):
    response = client.get("/__sw__/status")
    assert response.status_code == 200
    data = response.json()
    assert data["version"] == "v3"
    assert data["state"] == "active"
    assert "/manifest.json" in data["precache"]
    assert data["partitions"] == [{"name": "tandem-static-v3", "entries": 5, "current": True}]


def test_proxy_serves_precached_asset(client, origin):
    calls = len(origin.calls)

    response = client.get("/manifest.json")

    assert response.status_code == 200
    assert response.json() == {"name": "Tandem"}
    assert len(origin.calls) == calls


def test_proxy_api_offline_fallback(client, origin):
    origin.routes[f"{ORIGIN}/api/expenses?month=3"] = (200, '[{"id": 1}]')
    assert client.get("/api/expenses?month=3").json() == [{"id": 1}]

    origin.offline = True
    response = client.get("/api/expenses?month=3")

    assert response.status_code == 200
    assert response.json() == [{"id": 1}]


def test_proxy_navigation_offline_gets_shell(client, origin):
    origin.offline = True

    response = client.get("/dashboard", headers={"Sec-Fetch-Mode": "navigate"})

    assert response.status_code == 200
    assert response.text == "<html>shell</html>"


def test_proxy_offline_miss_is_bad_gateway(client, origin):
    origin.offline = True

    response = client.get("/api/budgets")

    assert response.status_code == 502


def test_proxy_post_passes_through(client, origin):
    origin.routes[f"{ORIGIN}/api/expenses"] = (201, '{"id": 9}')

    response = client.post("/api/expenses", json={"amount": 10})

    assert response.status_code == 201
    assert origin.count(f"{ORIGIN}/api/expenses", method="POST") == 1
    status = client.get("/__sw__/status").json()
    assert all(p["name"] != "tandem-api-v3" or p["entries"] == 0 for p in status["partitions"])


def test_sync(client):
    response = client.post("/__sw__/sync/expense-sync")
    assert response.status_code == 200
    assert response.json() == {"tag": "expense-sync", "handled": True}

    response = client.post("/__sw__/sync/unknown")
    assert response.json() == {"tag": "unknown", "handled": False}


def test_push_and_click(client):
    response = client.post(
        "/__sw__/push",
        json={"title": "Nova despesa", "body": "R$ 10,00", "tag": "expense-9"},
    )
    assert response.status_code == 200
    assert [n["tag"] for n in response.json()] == ["expense-9"]
    assert client.get("/__sw__/notifications").json()[0]["title"] == "Nova despesa"

    response = client.post("/__sw__/notifications/expense-9/click")
    assert response.json() == {"tag": "expense-9", "action": "opened"}
    assert client.get("/__sw__/notifications").json() == []

    # A window is open now, so the next click focuses it
    client.post("/__sw__/push", json={})
    response = client.post("/__sw__/notifications/tandem-notification/click")
    assert response.json() == {"tag": "tandem-notification", "action": "focused"}


def test_push_without_body(client):
    response = client.post("/__sw__/push")
    assert response.status_code == 200
    assert response.json() == []


def test_click_unknown_notification(client):
    response = client.post("/__sw__/notifications/missing/click")
    assert response.status_code == 404


def test_update_same_version(client):
    response = client.post("/__sw__/update")
    assert response.status_code == 200
    assert response.json() == {"updated": False, "version": "v3", "state": "active"}


def test_failed_install_degrades_to_passthrough():
    origin = StubOrigin()
    origin.offline = True

    with make_client(origin) as client:
        health = client.get("/__sw__/health").json()
        assert health == {"status": "unhealthy", "store_healthy": False, "state": "uninstalled"}
        assert client.get("/__sw__/status").status_code == 503

        origin.offline = False
        origin.routes[f"{ORIGIN}/api/expenses"] = (200, "[]")
        response = client.get("/api/expenses")
        assert response.status_code == 200
        assert response.json() == []
