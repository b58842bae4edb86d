"""
Registration domain service - credential issuance state machine.

This module contains the core business logic for guest network access:
how a registration request becomes a stored, expiring credential, how
the self-service and privileged tiers diverge, and how a pending
credential is approved.

Credential State Machine
========================

States:
- NOT_REGISTERED: No live credential for the email in this tier
- ACTIVE: Credential stored under the active namespace (usable)
- PENDING: Credential stored under the pending namespace (awaiting approval)
- EXPIRED: TTL lapsed; the store dropped the key (back to NOT_REGISTERED)

Transitions:
    NOT_REGISTERED -> ACTIVE   (self-service register)
    NOT_REGISTERED -> PENDING  (privileged register)
    PENDING -> ACTIVE          (approve: atomic rename pending -> active)
    ACTIVE/PENDING -> EXPIRED  (store TTL)

Repeat registration while a credential is live keeps the secret and
re-arms the TTL. Two genuinely simultaneous first registrations for the
same email may each draw a secret; the last write wins and the guest is
told whichever secret their own request drew. That race is benign: both
requests converge on one stored credential. Approval tokens do not race
the same way: the reverse pointer publishes exactly one token per pending
credential, and only that token approves.

The store is the only shared state. No in-process locks are taken:
every write is an unconditional overwrite except the approval rename,
which the store performs atomically.
"""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field

from . import keys
from .exceptions import InvalidApprovalRequest, NotificationError, SourceKeyMissing
from .passwords import PasswordPolicy
from .ports import (
    Challenge,
    ChallengeVerifier,
    Credential,
    CredentialState,
    CredentialStore,
    IdentityVerifier,
    Notifier,
    Tier,
)
from .validation import AdmissionContext, run_checks

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

REGISTERED_MESSAGE = "Account successfully registered."
UNDER_REVIEW_MESSAGE = "Account is under review."
APPROVED_MESSAGE = "Request approved."
UNDELIVERED_MESSAGE = "The confirmation email could not be sent. Please contact the front desk."


@dataclass(frozen=True)
class RegistrationConfig:
    """
    Immutable policy for the state machine.

    Attributes:
        ttl_days: Credential lifetime, applied to credentials and approval requests
        segments: Network-segment tag written for each tier
        enabled_tiers: Tiers a guest may request
        approval_base_url: Prefix for approval links sent to the administrator
    """

    ttl_days: int = 3
    segments: dict[Tier, int] = field(
        default_factory=lambda: {Tier.SELF_SERVICE: 10, Tier.PRIVILEGED: 0}
    )
    enabled_tiers: frozenset[Tier] = frozenset({Tier.SELF_SERVICE, Tier.PRIVILEGED})
    approval_base_url: str = ""

    def __post_init__(self) -> None:
        if self.ttl_days < 1:
            raise ValueError("ttl_days must be at least 1")
        missing = [tier.value for tier in self.enabled_tiers if tier not in self.segments]
        if missing:
            raise ValueError(f"no network segment configured for tier(s): {', '.join(missing)}")

    @property
    def ttl_seconds(self) -> int:
        return self.ttl_days * SECONDS_PER_DAY

    def approval_link(self, token: str) -> str:
        return f"{self.approval_base_url.rstrip('/')}/api/v1/approve?id={token}"


@dataclass(frozen=True)
class RegistrationRequest:
    """Transient input for register()."""

    email: str
    challenge_id: str
    challenge_answer: str
    tier: Tier = Tier.SELF_SERVICE


@dataclass(frozen=True)
class RegistrationResult:
    """
    Outcome of register().

    ``notified`` is False on a degraded success: the credential (or
    approval request) is stored, but the message could not be delivered.
    """

    accepted: bool
    email: str
    tier: Tier
    message: str = ""
    field_errors: dict[str, str] = field(default_factory=dict)
    valid_for_days: int = 0
    notified: bool = False


@dataclass(frozen=True)
class ApprovalResult:
    """Outcome of a successful approve()."""

    email: str
    message: str = APPROVED_MESSAGE
    notified: bool = True


@dataclass
class RegistrationService:
    """
    Domain service for credential issuance.

    Orchestrates the registration flow: admission checks, tier policy,
    credential store transitions and notifications.
    """

    store: CredentialStore
    identity_verifier: IdentityVerifier
    challenge_verifier: ChallengeVerifier
    notifier: Notifier
    password_policy: PasswordPolicy = field(default_factory=PasswordPolicy)
    config: RegistrationConfig = field(default_factory=RegistrationConfig)

    def issue_challenge(self) -> Challenge:
        """Issue a new admission challenge."""
        return self.challenge_verifier.issue()

    def register(self, request: RegistrationRequest) -> RegistrationResult:
        """
        Register a guest for network access.

        Runs every admission check and reports all failing fields at once.
        Nothing is written when any check fails.

        Args:
            request: Registration input (email is normalized here)

        Returns:
            RegistrationResult; accepted=False carries field_errors

        Raises:
            StoreError: If the credential store fails
            IdentityVerificationError: If the email checks could not run
        """
        email = keys.normalize_email(request.email)
        tier = request.tier

        ctx = AdmissionContext(
            email=email,
            challenge_id=request.challenge_id,
            challenge_answer=request.challenge_answer,
            tier=tier,
            identity_verifier=self.identity_verifier,
            challenge_verifier=self.challenge_verifier,
            enabled_tiers=self.config.enabled_tiers,
        )
        errors = run_checks(ctx)
        if errors:
            logger.warning("Registration rejected for %s: %s", email, errors)
            return RegistrationResult(accepted=False, email=email, tier=tier, field_errors=errors)

        if tier.requires_approval:
            return self._register_pending(email, tier)
        return self._register_active(email, tier)

    def approve(self, token: str) -> ApprovalResult:
        """
        Approve a pending privileged request.

        Order matters: the token is resolved first, the approval record is
        deleted only after the rename succeeded, so a failed rename leaves
        the request retryable.

        Args:
            token: Approval token from the administrator's link

        Returns:
            ApprovalResult with the approved email

        Raises:
            InvalidApprovalRequest: Unknown, expired, consumed or superseded token,
                or no pending credential left to approve
            StoreError: If the credential store fails
        """
        if not token or ":" in token:
            # Minted tokens never contain ':'; such a token would alias another namespace
            raise InvalidApprovalRequest("malformed token")

        email = self.store.get(keys.approval_key(token))
        if email is None:
            raise InvalidApprovalRequest("unknown token")

        tier = Tier.PRIVILEGED
        if self.store.get(keys.approval_pointer_key(tier, email)) != token:
            # Lost a concurrent first registration; only the published token approves
            self.store.delete(keys.approval_key(token))
            logger.warning("Superseded approval token used for %s", email)
            raise InvalidApprovalRequest("superseded token")

        active = keys.active_key(tier, email)
        try:
            self.store.rename(keys.pending_key(tier, email), active)
        except SourceKeyMissing:
            # A previous approval may have died between rename and token delete
            if self.store.get(active) is None:
                logger.warning("Approval for %s has no pending credential", email)
                raise InvalidApprovalRequest("no pending credential") from None
            logger.info("Completing interrupted approval for %s", email)

        self.store.delete(keys.approval_key(token))
        self.store.delete(keys.approval_pointer_key(tier, email))
        logger.info("Credential for %s moved %s -> %s", email, CredentialState.PENDING.value,
                    CredentialState.ACTIVE.value)

        raw = self.store.get(active)
        if raw is None:
            # Lapsed between rename and read; nothing left to deliver
            raise InvalidApprovalRequest("credential expired during approval")
        credential = Credential.from_json(raw)

        notified = self._notify(self.notifier.send_credentials, email, credential.secret,
                                self.config.ttl_days)
        message = APPROVED_MESSAGE if notified else f"{APPROVED_MESSAGE} {UNDELIVERED_MESSAGE}"
        return ApprovalResult(email=email, message=message, notified=notified)

    def credential_state(self, email: str, tier: Tier) -> CredentialState:
        """Report where an email currently sits in the lifecycle."""
        email = keys.normalize_email(email)
        if self.store.get(keys.active_key(tier, email)) is not None:
            return CredentialState.ACTIVE
        if self.store.get(keys.pending_key(tier, email)) is not None:
            return CredentialState.PENDING
        return CredentialState.NOT_REGISTERED

    def _register_active(self, email: str, tier: Tier) -> RegistrationResult:
        key = keys.active_key(tier, email)
        credential = self._issue(email, tier, lookup=(key,))
        self.store.set_with_ttl(key, credential.to_json(), self.config.ttl_seconds)
        logger.info("Credential for %s is %s (tier=%s)", email, CredentialState.ACTIVE.value, tier.value)

        notified = self._notify(self.notifier.send_credentials, email, credential.secret,
                                self.config.ttl_days)
        return RegistrationResult(
            accepted=True,
            email=email,
            tier=tier,
            message=REGISTERED_MESSAGE if notified else f"{REGISTERED_MESSAGE} {UNDELIVERED_MESSAGE}",
            valid_for_days=self.config.ttl_days,
            notified=notified,
        )

    def _register_pending(self, email: str, tier: Tier) -> RegistrationResult:
        ttl = self.config.ttl_seconds
        key = keys.pending_key(tier, email)
        # An already-approved secret is kept so approval does not rotate it
        credential = self._issue(email, tier, lookup=(key, keys.active_key(tier, email)))
        self.store.set_with_ttl(key, credential.to_json(), ttl)

        token = self._approval_token(email, tier, ttl)
        logger.info("Credential for %s is %s (tier=%s)", email, CredentialState.PENDING.value, tier.value)

        notified = self._notify(self.notifier.send_approval_request, email,
                                self.config.approval_link(token))
        return RegistrationResult(
            accepted=True,
            email=email,
            tier=tier,
            message=UNDER_REVIEW_MESSAGE if notified else f"{UNDER_REVIEW_MESSAGE} {UNDELIVERED_MESSAGE}",
            valid_for_days=self.config.ttl_days,
            notified=notified,
        )

    def _issue(self, email: str, tier: Tier, lookup: tuple[str, ...]) -> Credential:
        """Reuse the secret of a live credential, otherwise generate a new one."""
        segment = self.config.segments[tier]
        for key in lookup:
            raw = self.store.get(key)
            if raw is not None:
                logger.debug("Reusing live credential for %s", email)
                return Credential(secret=Credential.from_json(raw).secret, segment=segment)
        return Credential(secret=self.password_policy.generate(), segment=segment)

    def _approval_token(self, email: str, tier: Tier, ttl: int) -> str:
        """
        Re-arm the live approval token of a pending credential, or publish a new one.

        The reverse pointer names the one token that can approve. A new
        token is written first and published second; if a concurrent first
        registration published its own token in between, that token wins
        and ours is withdrawn before anyone is told about it.
        """
        pointer = keys.approval_pointer_key(tier, email)
        token = self._live_token(pointer, email)
        if token is not None:
            self.store.set_with_ttl(keys.approval_key(token), email, ttl)
            self.store.set_with_ttl(pointer, token, ttl)
            return token

        candidate = self._mint_token()
        self.store.set_with_ttl(keys.approval_key(candidate), email, ttl)
        token = self._live_token(pointer, email)
        if token is None:
            self.store.set_with_ttl(pointer, candidate, ttl)
            token = self.store.get(pointer) or candidate
        if token != candidate:
            logger.info("Adopting concurrently published approval token for %s", email)
            self.store.delete(keys.approval_key(candidate))
        return token

    def _live_token(self, pointer: str, email: str) -> str | None:
        token = self.store.get(pointer)
        if token is None or self.store.get(keys.approval_key(token)) != email:
            return None
        return token

    def _mint_token(self) -> str:
        """
        Generate an unguessable approval token.

        Uses 32 bytes (256 bits) from the secrets module. The URL-safe
        alphabet never contains ':' so approval keys stay disjoint from
        the reverse-pointer namespace.
        """
        return secrets.token_urlsafe(32)

    def _notify(self, send: Callable[..., None], *args: object) -> bool:
        """Send a message; failure is logged and reported, never raised."""
        try:
            send(*args)
        except NotificationError:
            logger.error("Notification failed for %s", args[0], exc_info=True)
            return False
        return True
