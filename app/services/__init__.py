from . import booking_rules, booking_service, booking_store, errors, mail_service, reminder_dispatcher

__all__ = [
    "booking_rules",
    "booking_service",
    "booking_store",
    "errors",
    "mail_service",
    "reminder_dispatcher",
]
