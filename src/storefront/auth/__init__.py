"""Token issuer factory.

Provides get_token_issuer() / set_token_issuer() so the HTTP layer can
verify bearer tokens without knowing who minted them:
- FakeTokenIssuer for development and testing (the default)
- a JWT-backed issuer supplied by the identity service in production
"""

import os

from storefront.auth.fake_adapter import FakeTokenIssuer
from storefront.auth.port import Principal, Role, TokenIssuer

__all__ = ["Principal", "Role", "TokenIssuer", "get_token_issuer", "set_token_issuer", "reset_token_issuer"]

_current_issuer: TokenIssuer | None = None


def get_token_issuer() -> TokenIssuer:
    """Return the current token issuer. Defaults to FakeTokenIssuer.

    Setting STOREFRONT_DEV_TOKENS=1 makes the default issuer accept
    ``dev:<role>:<member_id>`` tokens.
    """
    global _current_issuer
    if _current_issuer is None:
        _current_issuer = FakeTokenIssuer(accept_dev_tokens=os.getenv("STOREFRONT_DEV_TOKENS") == "1")
    return _current_issuer


def set_token_issuer(issuer: TokenIssuer) -> None:
    """Override the active token issuer (useful for tests)."""
    global _current_issuer
    _current_issuer = issuer


def reset_token_issuer() -> None:
    """Reset to the default issuer."""
    global _current_issuer
    _current_issuer = None
