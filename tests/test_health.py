"""Tests for health endpoint."""

from helpers import make_client, make_lifecycle


def test_health_returns_ok():
    client = make_client(make_lifecycle())
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
