"""Utility script to delete notifications older than the retention window."""

from __future__ import annotations

import argparse
import logging

from marketnotify.application.use_cases.notifications import purge_expired_notifications
from marketnotify.config import get_settings
from marketnotify.domain.errors import PersistenceError
from marketnotify.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the purge."""

    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Delete notifications older than the configured retention window.",
    )
    parser.add_argument(
        "--retention-days",
        type=int,
        default=settings.notification_retention_days,
        help=f"Keep notifications newer than this many days (default: {settings.notification_retention_days})",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=settings.purge_batch_size,
        help=f"Rows deleted per statement (default: {settings.purge_batch_size})",
    )
    return parser.parse_args()


def main() -> None:
    """Run the purge using the provided command line arguments."""

    args = parse_args()
    logging.basicConfig(level=get_settings().log_level.upper())

    initialize_database()

    session = SessionLocal()
    try:
        deleted = purge_expired_notifications(
            session,
            retention_days=args.retention_days,
            batch_size=args.batch_size,
        )
    except ValueError as exc:
        raise SystemExit(f"Invalid purge arguments: {exc}") from exc
    except PersistenceError as exc:
        raise SystemExit(f"Purge failed: {exc}") from exc
    finally:
        session.close()

    print(f"Deleted {deleted} notification(s) older than {args.retention_days} day(s).")


if __name__ == "__main__":
    main()
