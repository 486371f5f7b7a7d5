from datetime import date, datetime, timedelta, timezone

import pytest

from app.services import booking_rules
from app.services.errors import InvalidDate


@pytest.mark.parametrize(
    "pooja_date, expected",
    [
        (date(2025, 6, 4), date(2025, 6, 1)),
        (date(2024, 1, 2), date(2023, 12, 30)),  # year boundary
        (date(2024, 3, 1), date(2024, 2, 27)),  # leap year
        (date(2023, 3, 2), date(2023, 2, 27)),
        (date(2025, 5, 1), date(2025, 4, 28)),
    ],
)
def test_required_booking_date_is_three_calendar_days_before(pooja_date, expected):
    assert booking_rules.required_booking_date(pooja_date) == expected


def test_admissible_only_on_the_exact_day():
    pooja = date(2025, 6, 4)
    admissible_days = []
    for offset in range(-10, 11):
        today = pooja + timedelta(days=offset)
        now = datetime(today.year, today.month, today.day, 12, 0, tzinfo=timezone.utc)
        if booking_rules.is_admissible(pooja, now):
            admissible_days.append(today)

    assert admissible_days == [date(2025, 6, 1)]


@pytest.mark.parametrize("days_before", [0, 1, 2, 4, 30])
def test_not_admissible_off_the_three_day_mark(days_before):
    pooja = date(2025, 6, 4)
    today = pooja - timedelta(days=days_before)
    now = datetime.combine(today, datetime.min.time(), tzinfo=timezone.utc)
    assert booking_rules.is_admissible(pooja, now) is False


def test_today_uses_utc_calendar_not_local_offset():
    # 2025-06-01 22:30 in UTC is already 2025-06-02 in India
    ist = timezone(timedelta(hours=5, minutes=30))
    now = datetime(2025, 6, 2, 4, 0, tzinfo=ist)
    assert booking_rules.get_utc_today(now) == date(2025, 6, 1)
    assert booking_rules.is_admissible(date(2025, 6, 4), now) is True


def test_naive_now_is_treated_as_utc():
    assert booking_rules.get_utc_today(datetime(2025, 6, 1, 23, 59)) == date(2025, 6, 1)


def test_is_admissible_reads_patched_today(monkeypatch):
    monkeypatch.setattr(booking_rules, "get_utc_today", lambda now=None: date(2025, 6, 1))
    assert booking_rules.is_admissible(date(2025, 6, 4))
    assert not booking_rules.is_admissible(date(2025, 6, 5))


def test_normalize_accepts_iso_dates():
    assert booking_rules.normalize("2025-06-04") == date(2025, 6, 4)
    assert booking_rules.normalize(" 2024-02-29 ") == date(2024, 2, 29)
    assert booking_rules.normalize(date(2025, 6, 4)) == date(2025, 6, 4)


@pytest.mark.parametrize(
    "raw",
    ["", "tomorrow", "2025-13-01", "2025-02-30", "2023-02-29", "04-06-2025", "20250604", "2025-6-4", "2025-06-04T00:00:00Z", 20250604, None],
)
def test_normalize_rejects_malformed_dates(raw):
    with pytest.raises(InvalidDate):
        booking_rules.normalize(raw)
