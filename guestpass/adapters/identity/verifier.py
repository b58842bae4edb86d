"""
DNS-backed email verifier - Implements IdentityVerifier protocol.

Checks, in order:
1. Syntax, via email-validator (no network access)
2. MX records for the domain, via dnspython
3. Disposable-domain blocklist (built-in plus optional file)
4. Role account local parts (admin@, support@, ...)

The MX lookup is skipped for syntactically invalid addresses. A domain
that does not exist or has no MX answer is reported as "no MX"; DNS
timeouts and resolver failures raise IdentityVerificationError, because
they say nothing about the address itself.
"""

import logging
from pathlib import Path

import dns.exception
import dns.resolver
from email_validator import EmailNotValidError, validate_email

from guestpass.domain.exceptions import IdentityVerificationError
from guestpass.domain.ports import EmailReport

logger = logging.getLogger(__name__)

DISPOSABLE_DOMAINS = frozenset(
    {
        "10minutemail.com",
        "20minutemail.com",
        "33mail.com",
        "discard.email",
        "dispostable.com",
        "emailondeck.com",
        "fakeinbox.com",
        "getairmail.com",
        "getnada.com",
        "guerrillamail.com",
        "guerrillamail.net",
        "guerrillamailblock.com",
        "mailcatch.com",
        "maildrop.cc",
        "mailinator.com",
        "mailnesia.com",
        "mintemail.com",
        "moakt.com",
        "mohmal.com",
        "mytemp.email",
        "sharklasers.com",
        "spambox.us",
        "spamgourmet.com",
        "temp-mail.org",
        "tempail.com",
        "tempmail.com",
        "tempmailo.com",
        "throwawaymail.com",
        "trashmail.com",
        "yopmail.com",
    }
)

ROLE_ACCOUNTS = frozenset(
    {
        "abuse",
        "admin",
        "administrator",
        "billing",
        "contact",
        "help",
        "helpdesk",
        "hostmaster",
        "info",
        "it",
        "marketing",
        "noc",
        "no-reply",
        "noreply",
        "office",
        "postmaster",
        "root",
        "sales",
        "security",
        "support",
        "sysadmin",
        "webmaster",
    }
)


def load_domains(path: str | Path) -> frozenset[str]:
    """Read a domain list: one per line, blank lines and ``#`` comments ignored."""
    domains = set()
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            domain = line.strip().lower()
            if domain and not domain.startswith("#"):
                domains.add(domain)
    return frozenset(domains)


class DnsEmailVerifier:
    """
    Implements IdentityVerifier protocol via email-validator and dnspython.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        disposable_domains: frozenset[str] = DISPOSABLE_DOMAINS,
        role_accounts: frozenset[str] = ROLE_ACCOUNTS,
        timeout_seconds: float = 5.0,
    ) -> None:
        self._disposable = disposable_domains
        self._roles = role_accounts
        self._timeout = timeout_seconds

    def verify(self, email: str) -> EmailReport:
        try:
            parsed = validate_email(email, check_deliverability=False)
        except EmailNotValidError as e:
            logger.debug("Email %s failed syntax check: %s", email, e)
            return EmailReport(
                syntax_valid=False,
                has_mx_records=False,
                disposable=False,
                role_account=False,
            )

        domain = parsed.ascii_domain.lower()
        local_part = parsed.local_part.lower()
        return EmailReport(
            syntax_valid=True,
            has_mx_records=self.has_mx_records(domain),
            disposable=self.is_disposable(domain),
            role_account=local_part.split("+", 1)[0] in self._roles,
        )

    def has_mx_records(self, domain: str) -> bool:
        """
        Look up MX records for a domain.

        Raises:
            IdentityVerificationError: On timeouts or resolver failures
        """
        try:
            answer = dns.resolver.resolve(domain, "MX", lifetime=self._timeout)
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer, dns.resolver.NoNameservers):
            return False
        except dns.exception.DNSException as e:
            logger.error("MX lookup failed for %s: %s", domain, e)
            raise IdentityVerificationError(f"MX lookup failed for {domain}") from e
        # RFC 7505 null MX ("0 .") means the domain accepts no mail
        return any(str(record.exchange) != "." for record in answer)

    def is_disposable(self, domain: str) -> bool:
        """True for a listed domain or any subdomain of one."""
        labels = domain.split(".")
        return any(".".join(labels[i:]) in self._disposable for i in range(len(labels) - 1))
