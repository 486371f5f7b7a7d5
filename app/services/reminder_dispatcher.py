from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, List, Optional, Protocol
from zoneinfo import ZoneInfo

from app.models import BookingStatus
from app.services.booking_store import BookingStore
from app.services.errors import DispatchError

logger = logging.getLogger(__name__)

# Status values that receive a reminder. The create path writes "confirmed";
# legacy "booked" rows are left out until product confirms otherwise.
REMINDER_STATUSES = (BookingStatus.CONFIRMED.value,)

# One run per process at a time; SMTP latency is unbounded in practice.
_run_lock = threading.Lock()


class NotificationSender(Protocol):
    def send(self, booking: Any) -> Any: ...


@dataclass
class DispatchReport:
    target_date: date
    found: int = 0
    sent: int = 0
    failed: List[int] = field(default_factory=list)
    skipped: bool = False

    def as_dict(self) -> dict:
        return {
            "target_date": self.target_date.isoformat(),
            "found": self.found,
            "sent": self.sent,
            "failed": list(self.failed),
            "skipped": self.skipped,
        }


def tomorrow_in(tz_name: str, now: datetime | None = None) -> date:
    """Calendar date of tomorrow in ``tz_name``."""
    zone = ZoneInfo(tz_name)
    current = now.astimezone(zone) if now is not None else datetime.now(zone)
    return current.date() + timedelta(days=1)


class ReminderDispatcher:
    def __init__(self, store: BookingStore, sender: NotificationSender, tz_name: str = "Asia/Kolkata"):
        self.store = store
        self.sender = sender
        self.tz_name = tz_name

    def run(self, target_date: Optional[date] = None, now: datetime | None = None) -> DispatchReport:
        """
        Remind every active booking on ``target_date`` (default: tomorrow in the
        reminder zone). A failed send is logged and the loop moves on; a store
        failure propagates and aborts the run.
        """
        target = target_date or tomorrow_in(self.tz_name, now)
        report = DispatchReport(target_date=target)

        if not _run_lock.acquire(blocking=False):
            logger.warning("Reminder run for %s skipped; previous run still in progress", target)
            report.skipped = True
            return report

        try:
            logger.info("Running daily pooja reminder check for %s", target)
            bookings = self.store.list_for_date(target, REMINDER_STATUSES)
            report.found = len(bookings)
            if not bookings:
                logger.info("No pooja scheduled for %s", target)
                return report

            logger.info("Sending reminders for %d bookings", len(bookings))
            for booking in bookings:
                try:
                    self._send_one(booking)
                except DispatchError as exc:
                    logger.error("%s", exc)
                    report.failed.append(booking.id)
                except Exception:
                    logger.exception("Unexpected error sending reminder for booking %s", booking.id)
                    report.failed.append(booking.id)
                else:
                    report.sent += 1
        finally:
            _run_lock.release()

        logger.info(
            "Reminder run for %s finished: %d sent, %d failed",
            target,
            report.sent,
            len(report.failed),
        )
        return report

    def _send_one(self, booking: Any) -> None:
        result = self.sender.send(booking)
        success = result.get("success") if isinstance(result, dict) else getattr(result, "success", False)
        if not success:
            reason = result.get("error") if isinstance(result, dict) else getattr(result, "error", None)
            raise DispatchError(booking.id, reason or "unknown error")
        logger.info("Reminder sent for booking %s", booking.id)


__all__ = ["DispatchReport", "REMINDER_STATUSES", "ReminderDispatcher", "tomorrow_in"]
