"""Map raw sheet rows and form submissions onto ``CustomerRecord``."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from renewals.core.dates import to_input_date
from renewals.core.models import DATE_FIELDS, CustomerRecord

logger = logging.getLogger(__name__)

# Header row offset of the sheet: data starts on row 2.
ROW_OFFSET = 2

# Candidate keys per field, tried in order; the first non-empty value wins.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "timestamp": ("timestamp", "Timestamp", "ประทับเวลา"),
    "customer_name": ("customerName", "CustomerName", "ชื่อลูกค้า"),
    "license_plate": ("licensePlate", "LicensePlate", "ทะเบียนรถ"),
    "policy_number": ("policyNumber", "PolicyNumber", "เลขกรมธรรม์"),
    "phone": ("phone", "Phone", "เบอร์ติดต่อหลัก", "เบอร์โทร"),
    "email": ("email", "Email", "อีเมล"),
    "act_issued_date": ("actIssuedDate", "ActIssuedDate", "วันที่ทำ พ.ร.บ."),
    "act_expiry_date": ("actExpiryDate", "ActExpiryDate", "วันที่ครบกำหนด พ.ร.บ."),
    "tax_renewal_date": ("taxRenewalDate", "TaxRenewalDate", "วันที่ต่อภาษี"),
    "tax_expiry_date": ("taxExpiryDate", "TaxExpiryDate", "วันที่ครบกำหนดต่อภาษี"),
    "voluntary_issued_date": (
        "voluntaryIssuedDate",
        "VoluntaryIssuedDate",
        "วันที่ทำกรมธรรม์ภาคสมัครใจ",
    ),
    "voluntary_expiry_date": (
        "voluntaryExpiryDate",
        "VoluntaryExpiryDate",
        "วันที่ครบกำหนดกรมธรรม์ภาคสมัครใจ",
    ),
    "registration_date": ("registrationDate", "RegistrationDate", "วันที่จดทะเบียน"),
    "status": ("status", "Status", "สถานะ"),
    "notes": ("notes", "Notes", "หมายเหตุ", "บันทึก"),
}

ROW_NUMBER_KEYS = ("rowNumber", "row", "__rowNumber", "__row")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _first_present(raw: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = raw.get(key)
        if not _is_blank(value):
            return value
    return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_row_number(value: Any) -> Optional[int]:
    """Return a positive integer row number or ``None``."""

    if _is_blank(value) or isinstance(value, bool):
        return None
    try:
        number = int(float(str(value).strip()))
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def resolve_fields(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Resolve aliased keys of ``raw`` into canonical field names.

    Text fields default to ``""`` and dates to ``None``. Status keeps its raw
    value (``None`` when absent) so reconciliation can tell whether the sheet
    holds a legacy code. ``row_number`` is ``None`` when no row key exists.
    """

    resolved: Dict[str, Any] = {}
    for name, keys in FIELD_ALIASES.items():
        value = _first_present(raw, keys)
        if name in DATE_FIELDS or name in ("timestamp", "status"):
            resolved[name] = _as_text(value) or None
        else:
            resolved[name] = _as_text(value)
    resolved["row_number"] = parse_row_number(_first_present(raw, ROW_NUMBER_KEYS))
    return resolved


def normalize_record(raw: Mapping[str, Any], index: int = 0) -> CustomerRecord:
    """Build a ``CustomerRecord`` from ``raw`` at position ``index``."""

    fields = resolve_fields(raw)
    if fields["row_number"] is None:
        fields["row_number"] = index + ROW_OFFSET
    date_inputs = {name: to_input_date(fields[name]) for name in DATE_FIELDS}
    for name, formatted in date_inputs.items():
        if not formatted:
            # Unparsable cells are treated as empty rather than carried along.
            fields[name] = None
    fields["date_inputs"] = date_inputs
    return CustomerRecord(**fields)


def normalize_records(raws: Iterable[Mapping[str, Any]]) -> List[CustomerRecord]:
    """Normalize a provider payload, skipping rows without a name or plate."""

    records: List[CustomerRecord] = []
    skipped = 0
    for index, raw in enumerate(raws):
        if not isinstance(raw, Mapping):
            skipped += 1
            continue
        record = normalize_record(raw, index)
        if not (record.customer_name or record.license_plate):
            skipped += 1
            continue
        records.append(record)
    if skipped:
        logger.debug("Skipped %d blank or malformed rows", skipped)
    return records
