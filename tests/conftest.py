"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- An in-memory credential store with a controllable clock
- Stub identity and challenge verifiers
- A registration service wired to those stubs
"""

from unittest.mock import Mock

import pytest

from guestpass.adapters.store.memory import MemoryCredentialStore
from guestpass.domain.ports import EmailReport, Tier
from guestpass.domain.registration import RegistrationConfig, RegistrationRequest, RegistrationService

GOOD_REPORT = EmailReport(syntax_valid=True, has_mx_records=True, disposable=False, role_account=False)
BAD_SYNTAX_REPORT = EmailReport(syntax_valid=False, has_mx_records=False, disposable=False, role_account=False)


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> MemoryCredentialStore:
    return MemoryCredentialStore(clock=clock)


@pytest.fixture
def identity_verifier() -> Mock:
    """Identity verifier that passes every address unless told otherwise."""
    verifier = Mock()
    verifier.verify.return_value = GOOD_REPORT
    return verifier


@pytest.fixture
def challenge_verifier() -> Mock:
    """Challenge verifier that accepts every answer unless told otherwise."""
    verifier = Mock()
    verifier.verify.return_value = True
    return verifier


@pytest.fixture
def notifier() -> Mock:
    return Mock()


@pytest.fixture
def config() -> RegistrationConfig:
    return RegistrationConfig(
        ttl_days=3,
        segments={Tier.SELF_SERVICE: 10, Tier.PRIVILEGED: 20},
        approval_base_url="https://wifi.example.com",
    )


@pytest.fixture
def service(
    store: MemoryCredentialStore,
    identity_verifier: Mock,
    challenge_verifier: Mock,
    notifier: Mock,
    config: RegistrationConfig,
) -> RegistrationService:
    return RegistrationService(
        store=store,
        identity_verifier=identity_verifier,
        challenge_verifier=challenge_verifier,
        notifier=notifier,
        config=config,
    )


def make_request(email: str = "guest@example.com", tier: Tier = Tier.SELF_SERVICE) -> RegistrationRequest:
    return RegistrationRequest(email=email, challenge_id="c1", challenge_answer="123456", tier=tier)


def approval_token(notifier: Mock) -> str:
    """Extract the token from the last approval link sent to the administrator."""
    link = notifier.send_approval_request.call_args[0][1]
    return link.split("id=", 1)[1]
