"""Identity adapters - Email address vetting."""

from .verifier import DISPOSABLE_DOMAINS, ROLE_ACCOUNTS, DnsEmailVerifier, load_domains

__all__ = ["DISPOSABLE_DOMAINS", "DnsEmailVerifier", "ROLE_ACCOUNTS", "load_domains"]
