"""Domain events for the PasswordResetToken aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="PasswordResetToken")
class PasswordResetRequested:
    """A member asked for a password reset link."""

    __version__ = 1

    member_id = Identifier(required=True)
    email = String(required=True)
    reset_url = String(required=True)
    expires = DateTime(required=True)


@storefront.event(part_of="PasswordResetToken")
class PasswordResetRedeemed:
    """A reset link was used; the token is gone."""

    __version__ = 1

    member_id = Identifier(required=True)


@storefront.event(part_of="PasswordResetToken")
class PasswordResetTokenPurged:
    """An unused reset token outlived its expiry and was removed."""

    __version__ = 1

    member_id = Identifier(required=True)
    expires = DateTime(required=True)
