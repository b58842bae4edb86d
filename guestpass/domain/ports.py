"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, plus the small value types that cross them.
Adapters implement these protocols.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class Tier(str, Enum):
    """
    Access tier requested by a guest.

    Each tier maps to its own key namespace and network segment:
    - SELF_SERVICE: credential issued immediately (namespace "guest")
    - PRIVILEGED: credential parked as pending until an administrator
      approves it (namespace "corp")
    """

    SELF_SERVICE = "self-service"
    PRIVILEGED = "privileged"

    @property
    def namespace(self) -> str:
        return "corp" if self is Tier.PRIVILEGED else "guest"

    @property
    def requires_approval(self) -> bool:
        return self is Tier.PRIVILEGED


class CredentialState(str, Enum):
    """
    Credential lifecycle states.

    State Transitions:
    - NOT_REGISTERED -> ACTIVE   (self-service registration)
    - NOT_REGISTERED -> PENDING  (privileged registration)
    - PENDING -> ACTIVE          (approval, via atomic rename)
    - any -> EXPIRED             (TTL lapse in the store)

    EXPIRED is never stored: a lapsed key simply disappears, which puts
    the email back into NOT_REGISTERED.
    """

    NOT_REGISTERED = "NOT_REGISTERED"
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"


@dataclass(frozen=True)
class Credential:
    """Stored credential value: secret plus network-segment tag."""

    secret: str
    segment: int

    def to_json(self) -> str:
        return json.dumps({"secret": self.secret, "segment": self.segment}, separators=(",", ":"))

    @classmethod
    def from_json(cls, raw: str) -> "Credential":
        data = json.loads(raw)
        return cls(secret=str(data["secret"]), segment=int(data["segment"]))


@dataclass(frozen=True)
class EmailReport:
    """Outcome of identity checks for one email address."""

    syntax_valid: bool
    has_mx_records: bool
    disposable: bool
    role_account: bool


@dataclass(frozen=True)
class Challenge:
    """An issued admission challenge."""

    challenge_id: str
    answer: str


class CredentialStore(Protocol):
    """Port interface for key-value storage with per-key expiration."""

    def get(self, key: str) -> str | None:
        """
        Read a live key.

        Returns:
            Stored value, or None if the key is absent or expired

        Raises:
            StoreError: If the store cannot be reached
        """
        ...

    def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        """
        Unconditionally write a key with a fresh time-to-live.

        Raises:
            StoreError: If the write fails
        """
        ...

    def rename(self, old_key: str, new_key: str) -> None:
        """
        Atomically move a value (and its remaining TTL) to a new key.

        No observer may see both keys present or both keys absent.
        An existing value under new_key is overwritten.

        Raises:
            SourceKeyMissing: If old_key is absent or expired
            StoreError: If the store cannot be reached
        """
        ...

    def delete(self, key: str) -> None:
        """
        Delete a key. Deleting an absent key is not an error.

        Raises:
            StoreError: If the store cannot be reached
        """
        ...

    def ttl(self, key: str) -> int | None:
        """
        Remaining time-to-live of a live key, in whole seconds.

        Returns:
            Seconds until expiry, or None if the key is absent
        """
        ...


class IdentityVerifier(Protocol):
    """Port interface for email address vetting."""

    def verify(self, email: str) -> EmailReport:
        """
        Run syntax, MX, disposable-domain and role-account checks.

        Raises:
            IdentityVerificationError: If the checks could not be completed
        """
        ...


class ChallengeVerifier(Protocol):
    """Port interface for human-verification challenges."""

    def issue(self) -> Challenge:
        """Create a new challenge and remember its answer."""
        ...

    def verify(self, challenge_id: str, answer: str) -> bool:
        """
        Check a claimed answer and consume the challenge.

        A challenge id is consumable at most once: the first call
        (right or wrong) retires it, replays always return False.
        """
        ...

    def peek(self, challenge_id: str) -> str | None:
        """Read an unconsumed answer for rendering, or None if it is gone."""
        ...


class Notifier(Protocol):
    """Port interface for outbound messages."""

    def send_credentials(self, email: str, secret: str, valid_for_days: int) -> None:
        """
        Deliver an issued credential to the guest.

        Raises:
            NotificationError: If delivery fails
        """
        ...

    def send_approval_request(self, email: str, approval_link: str) -> None:
        """
        Ask the administrator to approve a privileged request.

        Raises:
            NotificationError: If delivery fails
        """
        ...
