# coding: utf-8

from fastapi.testclient import TestClient


from registry_api.models.health_status import HealthStatus  # noqa: F401


def test_get_health(client: TestClient):
    """Test case for get_health

    Health check
    """

    response = client.request(
        "GET",
        "/health",
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["version"]
