"""Outbound email port.

The storefront only ever sends one kind of mail (the password-reset link), so
the port speaks in a small message value rather than transport options.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    text: str
    html: str | None = None


@dataclass(frozen=True)
class Receipt:
    """What the transport reported back for one message."""

    delivered: bool
    message_id: str | None = None
    error: str | None = None


class EmailPort(ABC):
    @abstractmethod
    def send(self, message: EmailMessage) -> Receipt:
        """Hand ``message`` to the transport. Failures come back as a receipt."""
        ...
