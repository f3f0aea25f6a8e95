"""
Replay booking side effects that failed or never ran.

Appointments are always committed together with an ``appointment_created``
event. This command re-runs the patient-doctor assignment and timeline
writers for events still pending or failed.

Usage:
    telecare-replay-events --limit 500
    python -m telecare.replay_events --create-tables
"""
import argparse
import logging
import sys

from telecare.core.config import settings
from telecare.db.init_db import init_db
from telecare.db.session import engine, get_db_session
from telecare.scheduling.booking import BookingOrchestrator

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Replay pending booking events")
    parser.add_argument(
        "--limit",
        type=int,
        default=100,
        help="Maximum number of events to replay (default: 100)",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before replaying (local development)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.create_tables:
        init_db(engine)

    try:
        with get_db_session() as db:
            replayed = BookingOrchestrator(db).process_pending_events(limit=args.limit)
    except Exception as e:
        logger.error(f"Replay failed: {e}")
        return 1

    print(f"Replayed {replayed} booking event(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
