"""
Domain exceptions - Semantic error types for credential issuance.

This module defines domain-specific exceptions that communicate
business rule violations and collaborator faults without leaking
infrastructure details. Adapters translate library exceptions into
these types; routes translate these types into HTTP responses.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class InvalidApprovalRequest(RegistrationError):
    """Approval token is unknown, expired, or already consumed."""

    pass


class StoreError(RegistrationError):
    """Credential store is unreachable or rejected an operation."""

    pass


class SourceKeyMissing(StoreError):
    """Atomic rename failed because the source key does not exist."""

    pass


class NotificationError(RegistrationError):
    """Notifier could not deliver a message."""

    pass


class IdentityVerificationError(RegistrationError):
    """Identity verifier could not complete its checks."""

    pass
