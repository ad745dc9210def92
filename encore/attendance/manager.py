"""Per-user attendance status and the per-event attendance summary.

Status transitions for one (user, event):

    none -> interested, none -> going, interested -> going,
    interested -> none, going -> none, going -> interested

Moving to "interested" always drops seat details, tagged friends and notes,
including on a downgrade from "going".

Every status change rebuilds the event's summary from a scan of the whole
``user_attendance`` collection. The summary is never patched incrementally,
so it always equals what the records said at scan time.
"""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime

from encore.errors import ErrorCode, StoreError, ValidationError
from encore.models import (
    AttendanceRecord,
    AttendanceStatus,
    AttendanceSummary,
    AttendeeCounts,
    AttendeeLists,
    CatalogEvent,
    GoingDetails,
    SeatDetails,
    Show,
    ShowList,
)
from encore.models.attendance import SUMMARY_STATUSES, attendance_id
from encore.models.event import LOCAL_DATE_FIELD
from encore.notifications import NotificationCenter
from encore.store import DocumentSnapshot, DocumentStore, where
from encore.store.base import get_path
from encore.store.collections import EVENT_ATTENDANCE, EVENTS, USER_ATTENDANCE

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    """Trim free text; blank becomes None."""
    value = (value or "").strip()
    return value or None


def build_summary(
    event_id: str, snapshots: Iterable[DocumentSnapshot], now: datetime | None = None
) -> AttendanceSummary:
    """Partition the event's attendance records by status.

    Records for other events and records with an unrecognized status are
    ignored.
    """
    buckets: dict[str, list[str]] = {status: [] for status in SUMMARY_STATUSES}
    for snapshot in snapshots:
        if snapshot.get("eventId") != event_id:
            continue
        status = snapshot.get("status")
        if status in buckets:
            buckets[status].append(snapshot.get("userId"))

    return AttendanceSummary(
        id=event_id,
        event_id=event_id,
        attendee_counts=AttendeeCounts(**{s: len(ids) for s, ids in buckets.items()}),
        attendees=AttendeeLists(**buckets),
        last_updated=now or datetime.now(UTC),
    )


class AttendanceManager:
    """Owns AttendanceRecord and AttendanceSummary documents."""

    def __init__(
        self, store: DocumentStore, notifier: NotificationCenter | None = None
    ) -> None:
        self._store = store
        self._notifier = notifier

    def _notify_error(self, user_id: str, message: str) -> None:
        if self._notifier is not None:
            self._notifier.error(user_id, message)

    def set_status(
        self,
        user_id: str,
        event_id: str,
        status: AttendanceStatus | str,
        details: GoingDetails | None = None,
    ) -> AttendanceRecord:
        """
        Set the user's status for an event and rebuild the event summary.

        "interested" clears seat details, tagged friends and notes; any
        ``details`` passed with it are ignored. "going" stores the optional
        seat section/row/number, tagged friend names and notes, with blank
        values dropped.

        Raises:
            ValidationError: If the status is not "interested" or "going".
            StoreError: If a store call fails.
        """
        try:
            status = AttendanceStatus(status)
        except ValueError:
            raise ValidationError(
                ErrorCode.INVALID_STATUS, f"Unknown attendance status: {status}"
            ) from None

        if status == AttendanceStatus.GOING:
            details = details or GoingDetails()
            extra = {
                "seat_details": SeatDetails(
                    section=_clean(details.section),
                    row=_clean(details.row),
                    seat_number=_clean(details.seat_number),
                ),
                "tagged_friends": [n.strip() for n in details.tagged_friends if n.strip()],
                "notes": _clean(details.notes),
            }
        else:
            extra = {"seat_details": None, "tagged_friends": [], "notes": None}

        record_id = attendance_id(user_id, event_id)
        try:
            existing = self._store.get(USER_ATTENDANCE, record_id)
            now = datetime.now(UTC)
            record = AttendanceRecord(
                id=record_id,
                user_id=user_id,
                event_id=event_id,
                status=status,
                created_at=existing.get("createdAt") or now,
                updated_at=now,
                **extra,
            )
            self._store.set(USER_ATTENDANCE, record_id, record.to_document(), merge=True)
            self.recompute_summary(event_id)
        except StoreError:
            self._notify_error(user_id, "Failed to update your attendance. Please try again.")
            raise

        logger.info(f"Attendance {record_id} set to {status.value}")
        if status == AttendanceStatus.GOING and self._notifier is not None:
            self._notifier.success(user_id, "You're now going!")
        return record

    def remove_status(self, user_id: str, event_id: str) -> None:
        """
        Clear the user's status for an event and rebuild the event summary.

        Removing a status that was never set is a no-op apart from the
        summary rebuild.
        """
        record_id = attendance_id(user_id, event_id)
        try:
            self._store.delete(USER_ATTENDANCE, record_id)
            self.recompute_summary(event_id)
        except StoreError:
            self._notify_error(user_id, "Failed to remove your attendance. Please try again.")
            raise
        logger.info(f"Attendance {record_id} removed")

    def recompute_summary(self, event_id: str) -> AttendanceSummary:
        """Rebuild and overwrite the event's summary from every attendance record."""
        summary = build_summary(event_id, self._store.scan(USER_ATTENDANCE))
        self._store.set(EVENT_ATTENDANCE, event_id, summary.to_document())
        logger.debug(
            f"Summary {event_id}: going={summary.attendee_counts.going} "
            f"interested={summary.attendee_counts.interested}"
        )
        return summary

    def summary_for(self, event_id: str) -> AttendanceSummary:
        """Return the stored summary, or an empty one if none was written yet."""
        snapshot = self._store.get(EVENT_ATTENDANCE, event_id)
        if not snapshot.exists:
            return AttendanceSummary(id=event_id, event_id=event_id)
        return AttendanceSummary.from_snapshot(snapshot)

    def reconcile_all(self) -> int:
        """
        Rebuild every summary from a single scan of the attendance records.

        Covers events that have records and events whose summary still lists
        users after their last record was deleted. Returns the number of
        summaries written.
        """
        records = self._store.scan(USER_ATTENDANCE)
        event_ids = {snap.get("eventId") for snap in records if snap.get("eventId")}
        event_ids.update(snap.id for snap in self._store.scan(EVENT_ATTENDANCE))

        now = datetime.now(UTC)
        for event_id in sorted(event_ids):
            summary = build_summary(event_id, records, now)
            self._store.set(EVENT_ATTENDANCE, event_id, summary.to_document())
        logger.info(f"Reconciled {len(event_ids)} attendance summaries")
        return len(event_ids)

    def status_for(self, user_id: str, event_id: str) -> AttendanceStatus | None:
        snapshot = self._store.get(USER_ATTENDANCE, attendance_id(user_id, event_id))
        if not snapshot.exists:
            return None
        try:
            return AttendanceStatus(snapshot.get("status"))
        except ValueError:
            # e.g. "maybe", written by other clients of the store
            return None

    def statuses_for_user(self, user_id: str) -> dict[str, AttendanceStatus]:
        """Map of event id to the user's status, for every event they marked."""
        statuses = {}
        for snapshot in self._store.query(USER_ATTENDANCE, [where("userId", "==", user_id)]):
            try:
                statuses[snapshot.get("eventId")] = AttendanceStatus(snapshot.get("status"))
            except ValueError:
                continue
        return statuses

    def shows_for_user(self, user_id: str) -> ShowList:
        """
        Return the user's going and interested shows with their events.

        Records whose event is no longer in the catalog are skipped. Each
        list is ordered by the event's local date, undated events first.
        """
        shows = ShowList()
        for snapshot in self._store.query(USER_ATTENDANCE, [where("userId", "==", user_id)]):
            if snapshot.get("status") not in (s.value for s in AttendanceStatus):
                continue
            event_snapshot = self._store.get(EVENTS, snapshot.get("eventId"))
            if not event_snapshot.exists:
                continue
            show = Show(
                record=AttendanceRecord.from_snapshot(snapshot),
                event=CatalogEvent.from_snapshot(event_snapshot),
            )
            if show.record.status == AttendanceStatus.GOING:
                shows.going.append(show)
            else:
                shows.interested.append(show)

        shows.going.sort(key=_show_date)
        shows.interested.sort(key=_show_date)
        return shows


def _show_date(show: Show) -> str:
    return get_path(show.event.data, LOCAL_DATE_FIELD, None) or ""
