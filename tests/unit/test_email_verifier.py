"""
Unit tests for DnsEmailVerifier.

DNS is patched out; syntax checks use email-validator directly.
"""

from pathlib import Path
from unittest.mock import Mock, patch

import dns.exception
import dns.resolver
import pytest

from guestpass.adapters.identity.verifier import DnsEmailVerifier, load_domains
from guestpass.domain.exceptions import IdentityVerificationError

RESOLVE = "dns.resolver.resolve"


def mx_answer(*exchanges: str) -> list[Mock]:
    return [Mock(exchange=exchange) for exchange in exchanges]


@pytest.fixture
def verifier() -> DnsEmailVerifier:
    return DnsEmailVerifier()


class TestSyntax:
    @pytest.mark.parametrize("email", ["bad-address", "two@@signs.net", "no-domain@", "@no-local.net"])
    def test_invalid_syntax(self, verifier: DnsEmailVerifier, email: str) -> None:
        with patch(RESOLVE) as resolve:
            report = verifier.verify(email)
        assert report.syntax_valid is False
        resolve.assert_not_called()

    def test_valid_address(self, verifier: DnsEmailVerifier) -> None:
        with patch(RESOLVE, return_value=mx_answer("mx1.corp-mail.net.")):
            report = verifier.verify("alice@corp-mail.net")
        assert report.syntax_valid is True
        assert report.has_mx_records is True
        assert report.disposable is False
        assert report.role_account is False


class TestMxRecords:
    @pytest.mark.parametrize(
        "error",
        [dns.resolver.NXDOMAIN(), dns.resolver.NoAnswer(), dns.resolver.NoNameservers()],
    )
    def test_no_mx(self, verifier: DnsEmailVerifier, error: Exception) -> None:
        with patch(RESOLVE, side_effect=error):
            assert verifier.has_mx_records("nowhere.net") is False

    def test_null_mx(self, verifier: DnsEmailVerifier) -> None:
        with patch(RESOLVE, return_value=mx_answer(".")):
            assert verifier.has_mx_records("nomail.net") is False

    def test_timeout_is_fault(self, verifier: DnsEmailVerifier) -> None:
        with patch(RESOLVE, side_effect=dns.exception.Timeout()):
            with pytest.raises(IdentityVerificationError):
                verifier.has_mx_records("slow.net")

    def test_lookup_uses_timeout(self) -> None:
        verifier = DnsEmailVerifier(timeout_seconds=1.5)
        with patch(RESOLVE, return_value=mx_answer("mx.a.net.")) as resolve:
            verifier.has_mx_records("a.net")
        resolve.assert_called_once_with("a.net", "MX", lifetime=1.5)


class TestDisposableAndRole:
    def test_disposable_domain(self, verifier: DnsEmailVerifier) -> None:
        with patch(RESOLVE, return_value=mx_answer("mx.mailinator.com.")):
            assert verifier.verify("someone@mailinator.com").disposable is True

    def test_disposable_subdomain(self, verifier: DnsEmailVerifier) -> None:
        assert verifier.is_disposable("eu.mailinator.com") is True
        assert verifier.is_disposable("notmailinator.com") is False

    @pytest.mark.parametrize("local", ["admin", "Support", "postmaster", "info+wifi"])
    def test_role_accounts(self, verifier: DnsEmailVerifier, local: str) -> None:
        with patch(RESOLVE, return_value=mx_answer("mx.corp-mail.net.")):
            assert verifier.verify(f"{local}@corp-mail.net").role_account is True

    def test_custom_lists(self) -> None:
        verifier = DnsEmailVerifier(disposable_domains=frozenset({"burner.net"}), role_accounts=frozenset({"ops"}))
        with patch(RESOLVE, return_value=mx_answer("mx.burner.net.")):
            report = verifier.verify("ops@burner.net")
        assert report.disposable is True
        assert report.role_account is True


class TestLoadDomains:
    def test_load_domains(self, tmp_path: Path) -> None:
        path = tmp_path / "disposable.txt"
        path.write_text("# list\nBurner.NET\n\nthrowaway.org\n", encoding="utf-8")
        assert load_domains(path) == frozenset({"burner.net", "throwaway.org"})
