"""PasswordResetToken aggregate: a single-use, one-hour reset credential."""

import os
import secrets
from datetime import UTC, datetime, timedelta

from protean.fields import DateTime, Identifier, String

from storefront.account.events import PasswordResetRequested
from storefront.domain import storefront
from storefront.shared.clock import as_utc

PASSWORD_RESET_TTL = timedelta(hours=1)


def reset_url_for(token: str) -> str:
    frontend = os.getenv("FRONTEND_DOMAIN", "http://localhost:3000").rstrip("/")
    return f"{frontend}/reset-password?token={token}"


@storefront.aggregate
class PasswordResetToken:
    member_id = Identifier(required=True)
    token = String(required=True, max_length=128, unique=True)
    expires = DateTime(required=True)

    @classmethod
    def issue(cls, member_id, email, now=None):
        now = now or datetime.now(UTC)
        reset = cls(
            member_id=member_id,
            token=secrets.token_urlsafe(32),
            expires=now + PASSWORD_RESET_TTL,
        )
        reset.raise_(
            PasswordResetRequested(
                member_id=str(member_id),
                email=email,
                reset_url=reset_url_for(reset.token),
                expires=reset.expires,
            )
        )
        return reset

    def has_expired(self, as_of) -> bool:
        return as_utc(self.expires) < as_utc(as_of)


@storefront.repository(part_of=PasswordResetToken)
class PasswordResetTokenRepository:
    def by_token(self, token) -> PasswordResetToken | None:
        items = self._dao.query.filter(token=token).all().items
        if not items:
            return None
        return self.get(items[0].id)

    def expired(self, as_of) -> list[PasswordResetToken]:
        return [reset for reset in self._dao.query.all().items if reset.has_expired(as_of)]

    def discard(self, reset) -> None:
        self._dao.delete(reset)
