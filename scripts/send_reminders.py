"""Run one reminder dispatch by hand, outside the Celery beat schedule."""
import argparse
import logging
import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import database  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.services import booking_rules  # noqa: E402
from app.services.booking_store import SqlBookingStore  # noqa: E402
from app.services.errors import BookingError  # noqa: E402
from app.services.mail_service import ReminderMailer  # noqa: E402
from app.services.reminder_dispatcher import ReminderDispatcher  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--date", help="Pooja date to remind (YYYY-MM-DD); defaults to tomorrow")
    parser.add_argument("--check-mail", action="store_true", help="Verify SMTP login before sending")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")

    mailer = ReminderMailer()
    if args.check_mail:
        check = mailer.verify_connection()
        if not check.success:
            print(f"Mail server check failed: {check.error}")
            return 1

    try:
        target = booking_rules.normalize(args.date) if args.date else None
    except BookingError as exc:
        print(exc.message)
        return 2

    with database.SessionLocal() as db:
        dispatcher = ReminderDispatcher(SqlBookingStore(db), mailer, tz_name=settings.reminder_timezone)
        try:
            report = dispatcher.run(target_date=target)
        except BookingError as exc:
            print(f"Reminder run aborted: {exc.message}")
            return 1

    print(report.as_dict())
    return 1 if report.failed else 0


if __name__ == "__main__":
    sys.exit(main())
