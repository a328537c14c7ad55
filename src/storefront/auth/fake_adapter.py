"""In-memory token issuer for development and testing.

Tokens are random opaque strings remembered in a dict; nothing is signed.

When ``accept_dev_tokens`` is on, the issuer also accepts self-describing
tokens of the form ``dev:<role>:<member_id>``. Load tests use them to act as
many members against a running server without a login round trip.
"""

import secrets

from storefront.auth.port import InvalidToken, Principal, Role, TokenIssuer

DEV_TOKEN_PREFIX = "dev"


def dev_token(member_id: str, role: str = Role.MEMBER.value) -> str:
    return f"{DEV_TOKEN_PREFIX}:{Role(role).value}:{member_id}"


class FakeTokenIssuer(TokenIssuer):
    def __init__(self, accept_dev_tokens: bool = False) -> None:
        self._tokens: dict[str, Principal] = {}
        self.accept_dev_tokens = accept_dev_tokens

    def issue(self, member_id: str, role: str = Role.MEMBER.value) -> str:
        token = secrets.token_urlsafe(24)
        self._tokens[token] = Principal(member_id=str(member_id), role=Role(role).value)
        return token

    def verify(self, token: str) -> Principal:
        principal = self._tokens.get(token)
        if principal is not None:
            return principal
        if self.accept_dev_tokens:
            return self._parse_dev_token(token)
        raise InvalidToken("Unknown access token")

    def revoke(self, token: str) -> None:
        self._tokens.pop(token, None)

    @staticmethod
    def _parse_dev_token(token: str) -> Principal:
        prefix, _, rest = token.partition(":")
        role, _, member_id = rest.partition(":")
        if prefix != DEV_TOKEN_PREFIX or not member_id:
            raise InvalidToken("Unknown access token")
        try:
            return Principal(member_id=member_id, role=Role(role).value)
        except ValueError:
            raise InvalidToken(f"Unknown role in token: {role}") from None
