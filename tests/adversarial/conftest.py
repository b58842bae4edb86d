"""
Shared fixtures for adversarial tests.

Wires the real registration service, challenge verifier and in-memory
store together; only the email verifier and notifier are stubbed.
"""

import threading
from unittest.mock import Mock

import pytest

from guestpass.adapters.challenge import StoreChallengeVerifier
from guestpass.adapters.store.memory import MemoryCredentialStore
from guestpass.domain.registration import RegistrationConfig, RegistrationService
from tests.conftest import GOOD_REPORT
from tests.integration.conftest import client  # noqa: F401


class RecordingNotifier:
    """Thread-safe notifier that keeps every message it was asked to send."""

    def __init__(self) -> None:
        self.credentials: list[tuple[str, str, int]] = []
        self.approvals: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def send_credentials(self, email: str, secret: str, valid_for_days: int) -> None:
        with self._lock:
            self.credentials.append((email, secret, valid_for_days))

    def send_approval_request(self, email: str, approval_link: str) -> None:
        with self._lock:
            self.approvals.append((email, approval_link))

    def last_token(self) -> str:
        return self.approvals[-1][1].split("id=", 1)[1]


@pytest.fixture
def shared_store() -> MemoryCredentialStore:
    return MemoryCredentialStore()


@pytest.fixture
def challenges(shared_store: MemoryCredentialStore) -> StoreChallengeVerifier:
    return StoreChallengeVerifier(shared_store)


@pytest.fixture
def recorder() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def live_service(
    shared_store: MemoryCredentialStore,
    challenges: StoreChallengeVerifier,
    recorder: RecordingNotifier,
) -> RegistrationService:
    identity = Mock()
    identity.verify.return_value = GOOD_REPORT
    return RegistrationService(
        store=shared_store,
        identity_verifier=identity,
        challenge_verifier=challenges,
        notifier=recorder,
        config=RegistrationConfig(approval_base_url="https://wifi.example.com"),
    )
