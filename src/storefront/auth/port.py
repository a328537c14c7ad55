"""Token issuer port (abstract interface).

Issuing and verifying access tokens belongs to the identity service. The
storefront only needs to turn a bearer token into the member it speaks for.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    MEMBER = "member"
    ADMIN = "admin"


@dataclass(frozen=True)
class Principal:
    """The authenticated caller behind a request."""

    member_id: str
    role: str = Role.MEMBER.value

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


class InvalidToken(Exception):
    """The token is unknown, malformed or expired."""


class TokenIssuer(ABC):
    @abstractmethod
    def issue(self, member_id: str, role: str = Role.MEMBER.value) -> str:
        """Mint an access token for the member."""
        ...

    @abstractmethod
    def verify(self, token: str) -> Principal:
        """Return the principal for ``token`` or raise ``InvalidToken``."""
        ...
