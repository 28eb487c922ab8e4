"""Validation and business rules for customer submissions."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, Mapping, Optional

from renewals.core.dates import days_until, to_input_date
from renewals.core.models import (
    ALERT_WINDOW_DAYS,
    DATE_FIELDS,
    DATE_PAIRS,
    DEFAULT_CUSTOMER_NAME,
    WIRE_KEYS,
    Status,
)
from renewals.ingestion.normalizer import parse_row_number
from renewals.processing.reconciliation import annotate_name, canonical_status

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)+$")
PHONE_PREFIXES = ("06", "08", "09")

DATE_LABELS = {
    "actIssuedDate": "วันที่ทำ พ.ร.บ.",
    "actExpiryDate": "วันที่ครบกำหนด พ.ร.บ.",
    "taxRenewalDate": "วันที่ต่อภาษี",
    "taxExpiryDate": "วันที่ครบกำหนดต่อภาษี",
    "voluntaryIssuedDate": "วันที่ทำกรมธรรม์ภาคสมัครใจ",
    "voluntaryExpiryDate": "วันที่ครบกำหนดกรมธรรม์ภาคสมัครใจ",
    "registrationDate": "วันที่จดทะเบียน",
}

MESSAGES = {
    "customerName": "กรุณากรอกชื่อลูกค้า",
    "licensePlate": "กรุณากรอกทะเบียนรถ",
    "phone": "กรุณากรอกเบอร์โทรศัพท์ที่ถูกต้อง",
    "email": "กรุณากรอกอีเมลที่ถูกต้อง",
    "rowNumber": "ไม่พบหมายเลขแถวของข้อมูล",
    "summary": "กรุณาตรวจสอบข้อมูลที่ไฮไลต์และลองอีกครั้ง",
    "renewed_in_window": "ยังอยู่ในช่วงแจ้งเตือน {days} วัน ไม่สามารถตั้งสถานะต่อแล้วได้",
    "renewed_summary": "ไม่สามารถบันทึกสถานะต่อแล้ว เนื่องจากยังมีวันครบกำหนดอยู่ในช่วงแจ้งเตือน",
}

TEXT_FIELDS = ("customerName", "licensePlate", "policyNumber", "phone", "email", "notes", "timestamp")


@dataclass
class ValidationResult:
    """Cleaned form values and any problems found."""

    form_data: Dict[str, Any]
    errors: Dict[str, str] = field(default_factory=dict)
    summary: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return not self.errors


def normalize_phone(raw: str) -> Optional[str]:
    """Return ``0XX-XXXXXXX`` for a valid Thai number, otherwise ``None``."""

    digits = re.sub(r"\D", "", raw or "")
    if len(digits) != 10 or not digits.startswith(PHONE_PREFIXES):
        return None
    return f"{digits[:3]}-{digits[3:]}"


def is_valid_email(raw: str) -> bool:
    return bool(EMAIL_PATTERN.match(raw or ""))


def _clean(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        value = value[-1] if value else ""
    return str(value).strip()


def renewed_conflicts(
    form_data: Mapping[str, Any],
    today: Optional[date] = None,
    window: int = ALERT_WINDOW_DAYS,
) -> Dict[str, int]:
    """Expiry fields that are still inside their own alert window."""

    current = today or date.today()
    conflicts: Dict[str, int] = {}
    for _, _, expiry in DATE_PAIRS:
        key = WIRE_KEYS[expiry]
        remaining = days_until(form_data.get(key), current)
        if remaining is not None and 0 <= remaining < window:
            conflicts[key] = remaining
    return conflicts


def validate_submission(
    data: Mapping[str, Any],
    today: Optional[date] = None,
    require_row_number: bool = False,
    required_dates: Iterable[str] = (),
) -> ValidationResult:
    """Validate a create/edit submission keyed by wire field names.

    The returned ``form_data`` always carries the cleaned values, including
    ``<field>Input`` strings for dates, so a rejected form can be shown
    again with what the user typed.
    """

    current = today or date.today()
    required = set(required_dates)
    form_data: Dict[str, Any] = {key: _clean(data.get(key)) for key in TEXT_FIELDS}
    errors: Dict[str, str] = {}

    form_data["rowNumber"] = parse_row_number(data.get("rowNumber"))
    status = canonical_status(_clean(data.get("status")))
    form_data["status"] = status.value

    default_name = DEFAULT_CUSTOMER_NAME if status is Status.NOT_RENEWING else None
    form_data["customerName"] = annotate_name(form_data["customerName"], status, default_name)

    if not form_data["customerName"]:
        errors["customerName"] = MESSAGES["customerName"]
    if not form_data["licensePlate"]:
        errors["licensePlate"] = MESSAGES["licensePlate"]
    if require_row_number and not form_data["rowNumber"]:
        errors["rowNumber"] = MESSAGES["rowNumber"]

    if form_data["phone"]:
        formatted = normalize_phone(form_data["phone"])
        if formatted:
            form_data["phone"] = formatted
        else:
            errors["phone"] = MESSAGES["phone"]

    if form_data["email"] and not is_valid_email(form_data["email"]):
        errors["email"] = MESSAGES["email"]

    for attr in DATE_FIELDS:
        key = WIRE_KEYS[attr]
        formatted = to_input_date(_clean(data.get(key)))
        form_data[key] = formatted
        form_data[f"{key}Input"] = formatted
        if not formatted and key in required:
            errors[key] = f"กรุณาเลือก{DATE_LABELS[key]}"

    summary = None
    if status is Status.RENEWED:
        conflicts = renewed_conflicts(form_data, current)
        for key in conflicts:
            errors.setdefault(key, MESSAGES["renewed_in_window"].format(days=ALERT_WINDOW_DAYS))
        if conflicts:
            summary = MESSAGES["renewed_summary"]
            logger.info("Rejected RENEWED status: %s inside the alert window", ", ".join(conflicts))

    if errors and summary is None:
        summary = MESSAGES["summary"]
    return ValidationResult(form_data=form_data, errors=errors, summary=summary)
