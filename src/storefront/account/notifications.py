"""Sends the reset email when a member requests a password reset.

Delivery is fire-and-forget: a failed send is logged and never undoes the
stored token, the member can simply ask again.
"""

import structlog
from protean.utils.mixins import handle

from storefront.account.events import PasswordResetRequested
from storefront.account.reset_token import PasswordResetToken
from storefront.channel import EmailMessage, get_notifier
from storefront.domain import storefront

logger = structlog.get_logger(__name__)

RESET_SUBJECT = "Reset your password"


def reset_email(event: PasswordResetRequested) -> EmailMessage:
    return EmailMessage(
        to=event.email,
        subject=RESET_SUBJECT,
        text=f"Follow this link to reset your password: {event.reset_url}",
        html=f'<p>Click <a href="{event.reset_url}">here</a> to reset your password.</p>',
    )


@storefront.event_handler(part_of=PasswordResetToken)
class PasswordResetEmailHandler:
    @handle(PasswordResetRequested)
    def send_reset_email(self, event: PasswordResetRequested) -> None:
        try:
            receipt = get_notifier().send(reset_email(event))
        except Exception:
            logger.exception("Password reset email raised", member_id=str(event.member_id))
            return

        if not receipt.delivered:
            logger.warning("Password reset email not delivered", member_id=str(event.member_id), error=receipt.error)
            return

        logger.info("Password reset email sent", member_id=str(event.member_id), message_id=receipt.message_id)
