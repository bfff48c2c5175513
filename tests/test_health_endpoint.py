"""Tests for /health endpoint."""

import pytest
from fastapi.testclient import TestClient

from chatrelay.api.app import create_app


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(create_app())


def test_health_endpoint_basic(client):
    response = client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["ok"] is True
    assert data["service"] == "chatrelay"
    assert data["model"] == "llama3.2:3b"
    assert data["upstream"] == "http://localhost:11434"


def test_health_endpoint_reflects_env(client, monkeypatch):
    monkeypatch.setenv("OLLAMA_MODEL", "qwen2.5:7b")
    monkeypatch.setenv("OLLAMA_URL", "http://gpu-box:11434/")

    data = client.get("/health").json()

    assert data["model"] == "qwen2.5:7b"
    assert data["upstream"] == "http://gpu-box:11434"
