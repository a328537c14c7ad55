"""Nightly expiry sweep runner.

Runs ``sweep_expired`` every day at midnight UTC: deactivates promotions
whose window has closed and purges expired password reset tokens.

Usage:
    python src/scheduler.py          # Long-running: sweep at every midnight UTC
    python src/scheduler.py --once   # Sweep now and exit (for cron / K8s CronJob)
"""

import argparse
import asyncio
from datetime import UTC, datetime, timedelta

from storefront.domain import storefront
from storefront.maintenance.sweep import sweep_expired
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def seconds_until_midnight(now: datetime) -> float:
    next_midnight = (now + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
    return (next_midnight - now).total_seconds()


def run_once():
    with storefront.domain_context():
        return sweep_expired()


async def run_forever():
    while True:
        delay = seconds_until_midnight(datetime.now(UTC))
        logger.info("Next expiry sweep scheduled", in_seconds=round(delay))
        await asyncio.sleep(delay)

        try:
            run_once()
        except Exception:
            # The sweep isolates record failures itself; this covers provider outages
            logger.exception("Expiry sweep aborted")


def main():
    parser = argparse.ArgumentParser(description="Storefront expiry sweep runner")
    parser.add_argument("--once", action="store_true", help="Run a single sweep now and exit")
    args = parser.parse_args()

    storefront.init()

    if args.once:
        report = run_once()
        logger.info("Expiry sweep report", **report.to_dict())
        return

    asyncio.run(run_forever())


if __name__ == "__main__":
    main()
