"""
Domain layer - Pure business logic with zero framework imports.

This package contains the credential issuance state machine, the
admission validation pipeline and the password policy. It defines its
own port interfaces for infrastructure abstraction, ensuring true
hexagonal architecture decoupling.
"""

from .exceptions import (
    IdentityVerificationError,
    InvalidApprovalRequest,
    NotificationError,
    RegistrationError,
    SourceKeyMissing,
    StoreError,
)
from .passwords import PasswordPolicy
from .ports import (
    Challenge,
    ChallengeVerifier,
    Credential,
    CredentialState,
    CredentialStore,
    EmailReport,
    IdentityVerifier,
    Notifier,
    Tier,
)
from .registration import (
    ApprovalResult,
    RegistrationConfig,
    RegistrationRequest,
    RegistrationResult,
    RegistrationService,
)

__all__ = [
    "ApprovalResult",
    "Challenge",
    "ChallengeVerifier",
    "Credential",
    "CredentialState",
    "CredentialStore",
    "EmailReport",
    "IdentityVerificationError",
    "IdentityVerifier",
    "InvalidApprovalRequest",
    "NotificationError",
    "Notifier",
    "PasswordPolicy",
    "RegistrationConfig",
    "RegistrationError",
    "RegistrationRequest",
    "RegistrationResult",
    "RegistrationService",
    "SourceKeyMissing",
    "StoreError",
    "Tier",
]
