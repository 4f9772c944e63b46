"""Recompute denormalized counters against the configured database."""
from __future__ import annotations

import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from campus_hub.core.settings import settings
from campus_hub.db.session import session_scope
from campus_hub.services.reconcile import reconcile_counters


def main() -> None:
    parser = argparse.ArgumentParser(description="Repair counters that drifted from their rows")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report drifted counters without writing the corrected values.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print every correction instead of only the total.",
    )
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level.upper())
    try:
        with session_scope() as db:
            corrections = reconcile_counters(db, dry_run=args.dry_run)
            if not args.dry_run:
                db.commit()
    except SQLAlchemyError as exc:
        print(f"[reconcile] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.verbose:
        for correction in corrections:
            print(
                f"[reconcile] {correction.table}#{correction.row_id}.{correction.field}: "
                f"{correction.stored!r} -> {correction.actual!r}"
            )
    verb = "would fix" if args.dry_run else "fixed"
    print(f"[reconcile] {verb} {len(corrections)} counters")


if __name__ == "__main__":
    main()
