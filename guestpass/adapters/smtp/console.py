"""
Console notifier adapter - Implements Notifier protocol.

This module provides a console-based implementation of the domain's
notifier port, logging messages instead of mailing them, for demo and
development purposes.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """
    Implements Notifier protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints credentials and approval
    links to stdout.
    """

    def __init__(self, admin_email: str = "") -> None:
        self._admin = admin_email

    def send_credentials(self, email: str, secret: str, valid_for_days: int) -> None:
        """
        Log issued credentials (simulates email delivery).

        In production, this would be replaced with the SMTP adapter.
        The secret is logged at INFO level to be visible in docker-compose logs.

        Args:
            email: Guest email address (normalized by domain layer)
            secret: Network password
            valid_for_days: Credential lifetime
        """
        logger.info("[CREDENTIALS] Email: %s Password: %s Days: %d", email, secret, valid_for_days)

    def send_approval_request(self, email: str, approval_link: str) -> None:
        """Log the approval link that would be mailed to the administrator."""
        logger.info("[APPROVAL] Admin: %s Requester: %s Link: %s", self._admin, email, approval_link)
