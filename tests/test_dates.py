"""Day arithmetic must be deterministic for a pinned calendar day."""
from datetime import date, datetime, timezone

import pytest

from renewals.core.dates import days_until, min_expiry, parse_date, parse_datetime, to_input_date
from renewals.core.models import CustomerRecord


@pytest.mark.parametrize("value", [None, "", "   ", "not-a-date", "2024-13-45"])
def test_days_until_is_none_for_missing_or_garbage(value, today):
    assert days_until(value, today) is None


def test_days_until_counts_whole_days(today):
    assert days_until("2024-06-11", today) == 10
    assert days_until("2024-06-01", today) == 0
    assert days_until("2024-05-25", today) == -7


def test_days_until_ignores_time_of_day(today):
    assert days_until("2024-06-02T23:59:00", today) == 1
    assert days_until(datetime(2024, 6, 3, 0, 1), today) == 2


def test_parse_date_accepts_common_formats():
    assert parse_date("2024-06-01") == date(2024, 6, 1)
    assert parse_date("2024/06/01") == date(2024, 6, 1)
    assert parse_date("01/06/2024") == date(2024, 6, 1)
    assert parse_date("Sat, 01 Jun 2024 10:00:00 +0000") is not None
    assert parse_date(date(2024, 6, 1)) == date(2024, 6, 1)


def test_parse_date_converts_utc_instants_to_local_calendar():
    instant = "2024-06-01T12:00:00.000Z"
    expected = datetime(2024, 6, 1, 12, tzinfo=timezone.utc).astimezone().date()
    assert parse_date(instant) == expected


def test_to_input_date_is_strict_or_empty():
    assert to_input_date("2024-06-01") == "2024-06-01"
    assert to_input_date("15/07/2024") == "2024-07-15"
    assert to_input_date("soon") == ""
    assert to_input_date(None) == ""


def test_min_expiry_ignores_missing_dates(today):
    customer = CustomerRecord(
        customer_name="A",
        license_plate="B",
        act_expiry_date="2024-06-20",
        tax_expiry_date=None,
        voluntary_expiry_date="2024-06-05",
    )
    assert min_expiry(customer, today) == 4
    assert min_expiry(CustomerRecord(customer_name="A"), today) is None


def test_parse_datetime_keeps_time_of_day():
    morning = parse_datetime("2024-03-01T08:00:00Z")
    evening = parse_datetime("2024-03-01T18:00:00Z")
    assert morning < evening
    assert parse_datetime(date(2024, 3, 1)) == datetime(2024, 3, 1)
    assert parse_datetime("01/07/2024") == datetime(2024, 7, 1)
    assert parse_datetime("   ") is None
