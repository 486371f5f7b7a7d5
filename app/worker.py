import logging

from celery import Celery
from celery.schedules import crontab  # type: ignore

from app.core.config import settings
from app.services.booking_store import SqlBookingStore
from app.services.errors import StoreError
from app.services.mail_service import ReminderMailer
from app.services.reminder_dispatcher import ReminderDispatcher
import database

logger = logging.getLogger(__name__)

celery_app = Celery("seva_booking", broker=settings.celery_broker_url)

celery_app.conf.timezone = settings.reminder_timezone
celery_app.conf.enable_utc = True

# The in-process run lock only guards one worker process. Reminders get their own
# queue for a single consumer:
#   celery -A app.worker worker -Q reminders --concurrency=1
REMINDER_QUEUE = "reminders"
celery_app.conf.task_routes = {"reminders.send_pooja_reminders": {"queue": REMINDER_QUEUE}}

# ============================================================================
# CELERY BEAT SCHEDULE
# ============================================================================

celery_app.conf.beat_schedule = {
    # Pooja reminders for tomorrow - once a day, reminder zone wall clock
    "send-pooja-reminders": {
        "task": "reminders.send_pooja_reminders",
        "schedule": crontab(hour=settings.reminder_hour, minute=settings.reminder_minute),
        # A tick still queued when the next one fires is dropped, not run twice.
        "options": {"queue": REMINDER_QUEUE, "expires": 23 * 60 * 60},
    },
}


@celery_app.task(name="reminders.send_pooja_reminders")
def send_pooja_reminders() -> dict:
    """Daily trigger: remind the distribution list about tomorrow's poojas."""
    with database.SessionLocal() as db:
        dispatcher = ReminderDispatcher(SqlBookingStore(db), ReminderMailer(), tz_name=settings.reminder_timezone)
        try:
            report = dispatcher.run()
        except StoreError as exc:
            # Next day's beat tick runs normally; nothing to clean up here.
            logger.error("Reminder run aborted, bookings could not be read: %s", exc)
            return {"success": False, "error": exc.kind}
    return {"success": True, **report.as_dict()}
