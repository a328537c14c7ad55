"""Notifier factory.

Provides get_notifier() / set_notifier() to swap the email transport:
- FakeEmailAdapter for development and testing (the default)
- any EmailPort implementation wired in at startup for production
"""

from storefront.channel.email_port import EmailMessage, EmailPort, Receipt
from storefront.channel.fake_email import FakeEmailAdapter

__all__ = ["EmailMessage", "EmailPort", "Receipt", "get_notifier", "set_notifier", "reset_notifier"]

_current_notifier: EmailPort | None = None


def get_notifier() -> EmailPort:
    """Return the current email transport. Defaults to FakeEmailAdapter."""
    global _current_notifier
    if _current_notifier is None:
        _current_notifier = FakeEmailAdapter()
    return _current_notifier


def set_notifier(notifier: EmailPort) -> None:
    """Override the active email transport (useful for tests)."""
    global _current_notifier
    _current_notifier = notifier


def reset_notifier() -> None:
    """Reset to the default transport."""
    global _current_notifier
    _current_notifier = None
