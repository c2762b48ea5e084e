#!/usr/bin/env python3
"""
Run the workflow sweeps once. Meant to be called from cron.

This script:
1. Fails identification requests past their 7-day expiry
2. Cancels transfer requests pending for more than 30 days
3. Notifies regional admins about overdue registration reviews

Usage:
  python scripts/run_sweeps.py [--skip-overdue]
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.config.settings import get_settings
from src.infrastructure.db.session import create_engine, create_session_factory
from src.infrastructure.scheduler.workflow_tasks import (
    expire_stale_requests,
    notify_overdue_verifications,
)


async def run(skip_overdue: bool) -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    engine = create_engine(settings.database_url)
    session_factory = create_session_factory(engine)
    try:
        counts = await expire_stale_requests(session_factory)
        print(f"Expired identification requests: {counts['identification_requests']}")
        print(f"Expired transfer requests: {counts['transfer_requests']}")
        if not skip_overdue:
            overdue = await notify_overdue_verifications(session_factory)
            print(f"Overdue registrations notified: {overdue}")
    finally:
        await engine.dispose()


def main():
    parser = argparse.ArgumentParser(description="Run workflow maintenance sweeps")
    parser.add_argument(
        "--skip-overdue",
        action="store_true",
        help="Only expire stale requests; do not send overdue review reminders",
    )
    args = parser.parse_args()
    asyncio.run(run(args.skip_overdue))


if __name__ == "__main__":
    main()
