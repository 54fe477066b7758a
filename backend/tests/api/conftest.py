"""Fixtures for REST API tests: a fresh app and database per test."""

import pytest
from fastapi.testclient import TestClient

from growtrade.config import Settings
from growtrade.main import create_app


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        db_path=str(tmp_path / "trading.db"),
        jwt_secret="test-secret",
        tick_interval=60.0,  # No ticks during a test unless asked for
        bcrypt_rounds=4,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def signup(client):
    """Create a user and return (token, user dict)."""

    def _signup(username: str = "alice", password: str = "secret123"):
        response = client.post("/api/signup", json={"username": username, "password": password})
        assert response.status_code == 201, response.text
        body = response.json()
        return body["token"], body["user"]

    return _signup


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_header():
    return bearer
