"""
Admission validation pipeline.

Each check is an independent predicate bound to one request field and
contributes zero or one error message. The pipeline runs every check and
accumulates the failures, so a client can fix every field in one round
trip. Once a field has failed, later checks on that same field are
skipped (an unparseable address is never looked up in DNS).
"""

from collections.abc import Callable
from dataclasses import dataclass, field

from .ports import ChallengeVerifier, EmailReport, IdentityVerifier, Tier

EMAIL_FIELD = "email"
CHALLENGE_FIELD = "captchaAnswer"
TIER_FIELD = "tier"

INVALID_EMAIL = "Invalid email address"
NO_MX_RECORD = "No MX record for domain"
DISPOSABLE_EMAIL = "No disposable email please"
ROLE_EMAIL = "No role email address please"
WRONG_CHALLENGE = "Wrong CAPTCHA answer"
TIER_UNAVAILABLE = "Access tier not available"


@dataclass
class AdmissionContext:
    """Per-request state shared by the checks."""

    email: str
    challenge_id: str
    challenge_answer: str
    tier: Tier
    identity_verifier: IdentityVerifier
    challenge_verifier: ChallengeVerifier
    enabled_tiers: frozenset[Tier]
    _report: EmailReport | None = field(default=None, repr=False)

    @property
    def report(self) -> EmailReport:
        # Identity lookup happens at most once per request
        if self._report is None:
            self._report = self.identity_verifier.verify(self.email)
        return self._report


@dataclass(frozen=True)
class Check:
    """A single field predicate: returns True when the field passes."""

    field: str
    message: str
    passes: Callable[[AdmissionContext], bool]


def _challenge_solved(ctx: AdmissionContext) -> bool:
    return ctx.challenge_verifier.verify(ctx.challenge_id, ctx.challenge_answer)


DEFAULT_CHECKS: tuple[Check, ...] = (
    Check(EMAIL_FIELD, INVALID_EMAIL, lambda ctx: ctx.report.syntax_valid),
    Check(EMAIL_FIELD, NO_MX_RECORD, lambda ctx: ctx.report.has_mx_records),
    Check(EMAIL_FIELD, DISPOSABLE_EMAIL, lambda ctx: not ctx.report.disposable),
    Check(EMAIL_FIELD, ROLE_EMAIL, lambda ctx: not ctx.report.role_account),
    Check(CHALLENGE_FIELD, WRONG_CHALLENGE, _challenge_solved),
    Check(TIER_FIELD, TIER_UNAVAILABLE, lambda ctx: ctx.tier in ctx.enabled_tiers),
)


def run_checks(ctx: AdmissionContext, checks: tuple[Check, ...] = DEFAULT_CHECKS) -> dict[str, str]:
    """
    Run every check in order and collect field errors.

    Args:
        ctx: Request context
        checks: Ordered checks; the first failure per field wins

    Returns:
        Mapping of field name to error message, empty when all pass
    """
    errors: dict[str, str] = {}
    for check in checks:
        if check.field in errors:
            continue
        if not check.passes(ctx):
            errors[check.field] = check.message
    return errors
