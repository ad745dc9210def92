#!/usr/bin/env python3
"""
Rebuild every event's attendance summary from the attendance records.

Runs the same reconcile the background scheduler does, once. With
--dry-run, prints the summaries whose counts are out of date without
writing anything.

Usage:
    python scripts/rebuild_summaries.py [--dry-run]
"""
import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session

from encore.attendance.manager import AttendanceManager, build_summary
from encore.core.database import create_db_and_tables, engine
from encore.models import AttendanceSummary
from encore.store import SqlDocumentStore
from encore.store.collections import EVENT_ATTENDANCE, USER_ATTENDANCE


def find_stale(store: SqlDocumentStore) -> list[tuple[str, AttendanceSummary | None, AttendanceSummary]]:
    """Return (event id, stored summary, rebuilt summary) for each stale summary."""
    records = store.scan(USER_ATTENDANCE)
    stored = {snap.id: AttendanceSummary.from_snapshot(snap) for snap in store.scan(EVENT_ATTENDANCE)}
    event_ids = {snap.get("eventId") for snap in records if snap.get("eventId")} | set(stored)

    stale = []
    for event_id in sorted(event_ids):
        rebuilt = build_summary(event_id, records)
        current = stored.get(event_id)
        if current is None or current.attendees != rebuilt.attendees:
            stale.append((event_id, current, rebuilt))
    return stale


def main(dry_run: bool = False):
    """Report stale summaries and rebuild all of them."""
    create_db_and_tables()

    with Session(engine) as session:
        store = SqlDocumentStore(session)
        stale = find_stale(store)

        if not stale:
            print("All attendance summaries are up to date.")
        for event_id, current, rebuilt in stale:
            before = current.attendee_counts if current else "(missing)"
            print(f"{event_id}:")
            print(f"  Stored:  {before}")
            print(f"  Rebuilt: {rebuilt.attendee_counts}")

        if dry_run:
            print("--- DRY RUN: No changes made ---")
            return

        count = AttendanceManager(store).reconcile_all()
        print(f"\nComplete: {count} summaries rebuilt, {len(stale)} were stale")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Rebuild attendance summaries")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show stale summaries without writing changes",
    )
    args = parser.parse_args()
    main(dry_run=args.dry_run)
