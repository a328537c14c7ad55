"""Password reset: commands and handler.

Requesting a reset stores a token and triggers a reset email. Redeeming a
token consumes it and hands back the member id so the identity service can
set the new password. Expired tokens are purged by the nightly sweep.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from storefront.account.events import PasswordResetRedeemed, PasswordResetTokenPurged
from storefront.account.reset_token import PasswordResetToken
from storefront.domain import storefront
from storefront.shared.clock import utc_now

logger = structlog.get_logger(__name__)

EXPIRED_LINK_MESSAGE = "This link has expired"


@storefront.command(part_of="PasswordResetToken")
class RequestPasswordReset:
    member_id = Identifier(required=True)
    email = String(required=True, max_length=254)


@storefront.command(part_of="PasswordResetToken")
class RedeemPasswordReset:
    token = String(required=True, max_length=128)


@storefront.command(part_of="PasswordResetToken")
class PurgePasswordResetToken:
    reset_id = Identifier(required=True)
    as_of = DateTime()  # Optional: defaults to now


@storefront.command_handler(part_of=PasswordResetToken)
class PasswordResetHandler:
    @handle(RequestPasswordReset)
    def request_password_reset(self, command):
        reset = PasswordResetToken.issue(member_id=command.member_id, email=command.email)
        current_domain.repository_for(PasswordResetToken).add(reset)
        logger.info("Password reset requested", member_id=str(command.member_id))

    @handle(RedeemPasswordReset)
    def redeem_password_reset(self, command):
        repo = current_domain.repository_for(PasswordResetToken)
        reset = repo.by_token(command.token)
        if reset is None or reset.has_expired(utc_now()):
            raise ValidationError({"token": [EXPIRED_LINK_MESSAGE]})

        reset.raise_(PasswordResetRedeemed(member_id=str(reset.member_id)))
        repo.discard(reset)
        logger.info("Password reset redeemed", member_id=str(reset.member_id))
        return str(reset.member_id)

    @handle(PurgePasswordResetToken)
    def purge_password_reset_token(self, command):
        as_of = command.as_of or utc_now()
        repo = current_domain.repository_for(PasswordResetToken)
        reset = repo.get(command.reset_id)
        if not reset.has_expired(as_of):
            return False

        reset.raise_(PasswordResetTokenPurged(member_id=str(reset.member_id), expires=reset.expires))
        repo.discard(reset)
        logger.info("Expired password reset token purged", member_id=str(reset.member_id))
        return True
