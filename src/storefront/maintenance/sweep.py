"""Nightly expiry sweep.

Finds every active promotion whose window has closed and every password
reset token past its expiry, then dispatches one command per record so each
commits (or fails) on its own. A failure is logged and the sweep moves on;
running the sweep a second time finds nothing left to do.

Triggered at midnight UTC by ``scheduler.py`` and on demand through the
maintenance API endpoint.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime

import structlog
from protean.utils.globals import current_domain

from storefront.account.password_reset import PurgePasswordResetToken
from storefront.account.reset_token import PasswordResetToken
from storefront.promotion.expiry import ExpirePromotion
from storefront.promotion.promotion import Promotion
from storefront.shared.clock import utc_now

logger = structlog.get_logger(__name__)


@dataclass
class SweepReport:
    as_of: str
    promotions_expired: int = 0
    tokens_purged: int = 0
    failures: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def _expire_promotions(as_of, report):
    candidates = current_domain.repository_for(Promotion).expired_active(as_of)
    for promotion in candidates:
        try:
            expired = current_domain.process(
                ExpirePromotion(promotion_id=str(promotion.id), as_of=as_of),
                asynchronous=False,
            )
            if expired:
                report.promotions_expired += 1
        except Exception as exc:
            logger.exception("Failed to expire promotion", promotion_id=str(promotion.id))
            report.failures.append({"promotion_id": str(promotion.id), "error": str(exc)})


def _purge_reset_tokens(as_of, report):
    candidates = current_domain.repository_for(PasswordResetToken).expired(as_of)
    for reset in candidates:
        try:
            purged = current_domain.process(
                PurgePasswordResetToken(reset_id=str(reset.id), as_of=as_of),
                asynchronous=False,
            )
            if purged:
                report.tokens_purged += 1
        except Exception as exc:
            logger.exception("Failed to purge password reset token", reset_id=str(reset.id))
            report.failures.append({"reset_id": str(reset.id), "error": str(exc)})


def sweep_expired(as_of: datetime | None = None) -> SweepReport:
    as_of = as_of or utc_now()
    report = SweepReport(as_of=as_of.isoformat())

    logger.info("Expiry sweep started", as_of=report.as_of)
    _expire_promotions(as_of, report)
    _purge_reset_tokens(as_of, report)

    logger.info(
        "Expiry sweep finished",
        promotions_expired=report.promotions_expired,
        tokens_purged=report.tokens_purged,
        failures=len(report.failures),
    )
    return report
