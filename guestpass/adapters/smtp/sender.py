"""
SMTP notifier adapter - Implements Notifier protocol.

Sends guest credentials and administrator approval requests through an
SMTP relay using the standard library client. Every send opens its own
connection bounded by a timeout; failures surface as NotificationError
and never terminate the process.
"""

import logging
import smtplib
from email.message import EmailMessage

from guestpass.domain.exceptions import NotificationError

from .messages import Message, approval_message, credentials_message

logger = logging.getLogger(__name__)


class SmtpNotifier:
    """
    Implements Notifier protocol via smtplib.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        admin_email: str,
        ssid: str = "",
        username: str = "",
        password: str = "",
        starttls: bool = True,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._admin = admin_email
        self._ssid = ssid
        self._username = username
        self._password = password
        self._starttls = starttls
        self._timeout = timeout_seconds

    def send_credentials(self, email: str, secret: str, valid_for_days: int) -> None:
        self._send(credentials_message(email, secret, valid_for_days, self._ssid))

    def send_approval_request(self, email: str, approval_link: str) -> None:
        if not self._admin:
            raise NotificationError("no administrator address configured")
        self._send(approval_message(self._admin, email, approval_link))

    def _send(self, message: Message) -> None:
        mail = EmailMessage()
        mail["From"] = self._sender
        mail["To"] = message.recipient
        mail["Subject"] = message.subject
        mail.set_content(message.body)

        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
                if self._starttls:
                    smtp.starttls()
                if self._username:
                    smtp.login(self._username, self._password)
                smtp.send_message(mail)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Email to %s failed: %s", message.recipient, e)
            raise NotificationError(f"could not send email to {message.recipient}") from e

        logger.info("Email sent to %s: %s", message.recipient, message.subject)
