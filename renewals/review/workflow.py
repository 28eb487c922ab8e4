"""Staff-facing helpers: search, edit, status changes and submissions."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from renewals.core.models import DATE_FIELDS, WIRE_KEYS, CustomerRecord
from renewals.core.quality import ValidationResult, validate_submission
from renewals.export.store import StoreResult
from renewals.ingestion.normalizer import normalize_record, parse_row_number
from renewals.processing.pipeline import RecordSink

logger = logging.getLogger(__name__)


@dataclass
class SubmissionOutcome:
    """Result of a create or update request.

    ``saved`` means validation passed and the record was handed to the sink;
    ``store_result`` tells whether the sheet actually accepted it.
    """

    validation: ValidationResult
    store_result: Optional[StoreResult] = None

    @property
    def saved(self) -> bool:
        return self.validation.is_valid and self.store_result is not None

    @property
    def synced(self) -> bool:
        return bool(self.store_result and self.store_result.ok)


def search_customers(records: Iterable[CustomerRecord], query: str | None) -> List[CustomerRecord]:
    """Case-insensitive substring match over customer name and license plate."""

    needle = (query or "").strip().casefold()
    records = list(records)
    if not needle:
        return records
    return [
        record
        for record in records
        if needle in (record.customer_name or "").casefold() or needle in (record.license_plate or "").casefold()
    ]


def find_by_row(records: Iterable[CustomerRecord], row_number: Any) -> Optional[CustomerRecord]:
    """Return the record stored at ``row_number`` if present."""

    wanted = parse_row_number(row_number)
    if wanted is None:
        return None
    return next((record for record in records if record.row_number == wanted), None)


def record_to_form(record: CustomerRecord) -> Dict[str, Any]:
    """Wire-keyed values for pre-filling an edit form."""

    form = record.to_wire()
    form["rowNumber"] = record.row_number
    for attr in DATE_FIELDS:
        key = WIRE_KEYS[attr]
        form[f"{key}Input"] = record.date_inputs.get(attr, "")
    return form


def _record_from_form(form_data: Mapping[str, Any], timestamp: str) -> CustomerRecord:
    values = dict(form_data)
    values["timestamp"] = values.get("timestamp") or timestamp
    record = normalize_record(values)
    if not form_data.get("rowNumber"):
        record.row_number = None
    return record


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def submit_customer(
    data: Mapping[str, Any],
    sink: RecordSink,
    today: Optional[date] = None,
    update: bool = False,
) -> SubmissionOutcome:
    """Validate a form submission and forward it to the sink when valid.

    A sink failure does not turn the submission into an error: the record is
    reported as saved and the failed ``store_result`` is logged and returned.
    """

    validation = validate_submission(data, today=today, require_row_number=update)
    if not validation.is_valid:
        logger.info("Submission rejected: %s", ", ".join(sorted(validation.errors)))
        return SubmissionOutcome(validation=validation)

    record = _record_from_form(validation.form_data, _now_iso())
    if update:
        result = sink.update(validation.form_data["rowNumber"], record.to_wire())
    else:
        result = sink.create(record.to_wire())
    if not result.ok:
        logger.warning("Customer %s saved locally but sheet sync failed: %s", record.license_plate, result.reason)
    return SubmissionOutcome(validation=validation, store_result=result)


def edit_customer(
    records: Iterable[CustomerRecord],
    row_number: Any,
    updates: Mapping[str, Any],
    sink: RecordSink,
    today: Optional[date] = None,
) -> Optional[SubmissionOutcome]:
    """Apply ``updates`` on top of the stored row and submit the whole record.

    Fields the caller does not mention keep their stored values. Returns
    ``None`` when no customer lives at ``row_number``.
    """

    found = find_by_row(records, row_number)
    if found is None:
        logger.warning("Row %s not found; nothing to edit", row_number)
        return None
    form = record_to_form(found)
    form.update(updates)
    form["rowNumber"] = found.row_number
    return submit_customer(form, sink, today=today, update=True)


def delete_customers(sink: RecordSink, row_numbers: Iterable[Any]) -> StoreResult:
    """Bulk-delete rows through the sink."""

    rows = list(row_numbers)
    result = sink.delete(rows)
    if result.ok:
        logger.info("Deleted %d rows", len(rows))
    else:
        logger.warning("Bulk delete failed: %s", result.reason)
    return result


def records_to_rows(records: Iterable[CustomerRecord]) -> List[Dict[str, Any]]:
    """Convert records to dictionaries for tabular rendering."""

    def _sanitize(value: Any) -> Any:
        if isinstance(value, str):
            return " ".join(value.split())
        return value

    sanitized_rows = []
    for record in records:
        row = record.to_dict()
        row.pop("date_inputs", None)
        sanitized_rows.append({key: _sanitize(value) for key, value in row.items()})
    return sanitized_rows
