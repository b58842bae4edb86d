"""
Shared fixtures for integration tests.

Runs the real application (lifespan included) on the in-memory store.
DNS is the only collaborator replaced: MX lookups always succeed, while
syntax, disposable and role checks run for real.
"""

from collections.abc import Generator
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from guestpass.adapters.identity.verifier import DnsEmailVerifier
from guestpass.api.dependencies import get_identity_verifier, get_notifier
from guestpass.api.main import app
from guestpass.config.settings import get_settings
from guestpass.domain import keys


class OfflineEmailVerifier(DnsEmailVerifier):
    """Every domain has MX records."""

    def has_mx_records(self, domain: str) -> bool:
        return True


@pytest.fixture
def notifier() -> Mock:
    return Mock()


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch, notifier: Mock) -> Generator[TestClient, None, None]:
    """Create test client on a fresh in-memory store."""
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("NOTIFIER", "console")
    monkeypatch.setenv("TTL_DAYS", "3")
    monkeypatch.setenv("BASE_URL", "https://wifi.example.com")
    monkeypatch.setenv("PRIVILEGED_TIER_ENABLED", "true")
    get_settings.cache_clear()

    app.dependency_overrides[get_identity_verifier] = lambda: OfflineEmailVerifier()
    app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
        get_settings.cache_clear()


def solve_captcha(client: TestClient) -> tuple[str, str]:
    """Fetch a challenge and read its answer from the store."""
    challenge_id = client.get("/api/v1/captcha").json()["captcha_id"]
    answer = client.app.state.store.get(keys.challenge_key(challenge_id))
    return challenge_id, answer


def register(client: TestClient, email: str, tier: str = "self-service", answer: str | None = None):
    challenge_id, solved = solve_captcha(client)
    return client.post(
        "/api/v1/register",
        json={
            "email": email,
            "captcha_id": challenge_id,
            "captcha_answer": solved if answer is None else answer,
            "tier": tier,
        },
    )
