"""Notifier adapters - Outbound guest and administrator messages."""

from .console import ConsoleNotifier
from .sender import SmtpNotifier

__all__ = ["ConsoleNotifier", "SmtpNotifier"]
