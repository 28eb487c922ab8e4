"""Validation rules keep submissions clean before they reach the sheet."""
from conftest import days_from

from renewals.core.models import NOT_RENEWING_SUFFIX
from renewals.core.quality import normalize_phone, validate_submission


def _form(**overrides):
    data = {"customerName": "Somchai", "licensePlate": "1กก-1234", "phone": "081-234-5678"}
    data.update(overrides)
    return data


def test_valid_submission_reformats_phone(today):
    result = validate_submission(_form(), today=today)
    assert result.is_valid
    assert result.summary is None
    assert result.form_data["phone"] == "081-2345678"
    assert result.form_data["status"] == "NOT_NOTIFIED"


def test_required_fields(today):
    result = validate_submission(_form(customerName="  ", licensePlate=""), today=today)
    assert set(result.errors) == {"customerName", "licensePlate"}
    assert result.summary


def test_phone_rules():
    assert normalize_phone("0812345678") == "081-2345678"
    assert normalize_phone("(09) 1234 5678") == "091-2345678"
    assert normalize_phone("02-123-4567") is None
    assert normalize_phone("081234567") is None
    assert normalize_phone("08123456789") is None


def test_invalid_phone_and_email_are_rejected(today):
    result = validate_submission(_form(phone="12345", email="not-an-email"), today=today)
    assert set(result.errors) == {"phone", "email"}


def test_blank_phone_and_email_are_allowed(today):
    result = validate_submission(_form(phone="", email=""), today=today)
    assert result.is_valid


def test_unparsable_dates_are_cleared(today):
    result = validate_submission(_form(actExpiryDate="whenever", taxExpiryDate="15/07/2024"), today=today)
    assert result.is_valid
    assert result.form_data["actExpiryDate"] == ""
    assert result.form_data["taxExpiryDate"] == "2024-07-15"
    assert result.form_data["taxExpiryDateInput"] == "2024-07-15"


def test_required_date_must_parse(today):
    result = validate_submission(_form(actExpiryDate="whenever"), today=today, required_dates=["actExpiryDate"])
    assert "actExpiryDate" in result.errors


def test_renewed_inside_window_is_rejected(today):
    result = validate_submission(
        _form(status="RENEWED", actExpiryDate=days_from(today, 5), taxExpiryDate=days_from(today, 60)),
        today=today,
    )
    assert not result.is_valid
    assert set(result.errors) == {"actExpiryDate"}
    assert result.summary


def test_renewed_flags_every_offending_pair(today):
    result = validate_submission(
        _form(
            status="4",
            actExpiryDate=days_from(today, 0),
            taxExpiryDate=days_from(today, 29),
            voluntaryExpiryDate=days_from(today, 30),
        ),
        today=today,
    )
    assert set(result.errors) == {"actExpiryDate", "taxExpiryDate"}


def test_renewed_with_overdue_date_is_accepted(today):
    result = validate_submission(_form(status="RENEWED", actExpiryDate=days_from(today, -3)), today=today)
    assert result.is_valid


def test_not_renewing_annotates_name_once(today):
    first = validate_submission(_form(status="NOT_RENEWING"), today=today)
    assert first.form_data["customerName"] == "Somchai (ลูกค้าไม่ต่อ)"

    again = validate_submission(_form(status="NOT_RENEWING", customerName=first.form_data["customerName"]), today=today)
    assert again.form_data["customerName"] == "Somchai (ลูกค้าไม่ต่อ)"


def test_not_renewing_with_empty_name_gets_default(today):
    result = validate_submission(_form(status="3", customerName=""), today=today)
    assert result.is_valid
    assert result.form_data["customerName"].endswith(NOT_RENEWING_SUFFIX)


def test_other_status_strips_annotation(today):
    result = validate_submission(_form(status="2", customerName=f"Somchai {NOT_RENEWING_SUFFIX}"), today=today)
    assert result.form_data["customerName"] == "Somchai"


def test_update_requires_row_number(today):
    result = validate_submission(_form(), today=today, require_row_number=True)
    assert "rowNumber" in result.errors
    ok = validate_submission(_form(rowNumber="7"), today=today, require_row_number=True)
    assert ok.is_valid
    assert ok.form_data["rowNumber"] == 7
