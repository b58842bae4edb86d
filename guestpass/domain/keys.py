"""
Store key derivation.

Active, pending and approval keys live in disjoint namespaces and are
derived from (tier, email) or from the approval token alone.
"""

from .ports import Tier

ACTIVE = "cred:active"
PENDING = "cred:pending"
APPROVAL = "approval"
APPROVAL_BY_EMAIL = "approval:email"
CHALLENGE = "challenge"


def normalize_email(email: str) -> str:
    """Strip whitespace and lowercase."""
    return email.strip().lower()


def active_key(tier: Tier, email: str) -> str:
    return f"{ACTIVE}:{tier.namespace}:{email}"


def pending_key(tier: Tier, email: str) -> str:
    return f"{PENDING}:{tier.namespace}:{email}"


def approval_key(token: str) -> str:
    return f"{APPROVAL}:{token}"


def approval_pointer_key(tier: Tier, email: str) -> str:
    # Reverse pointer: pending credential -> its single live approval token
    return f"{APPROVAL_BY_EMAIL}:{tier.namespace}:{email}"


def challenge_key(challenge_id: str) -> str:
    return f"{CHALLENGE}:{challenge_id}"
