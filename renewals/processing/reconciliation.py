"""Keep stored renewal status and display name consistent with the calendar.

Reconciliation runs on every due-list read. It canonicalizes legacy status
codes, refuses ``RENEWED`` while an expiry date still needs attention and
derives the "not renewing" name annotation, reporting whether the sheet row
has drifted and must be written back.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Iterable, List, Optional

from renewals.core.dates import expiry_distances
from renewals.core.models import (
    ALERT_WINDOW_DAYS,
    NOT_RENEWING_SUFFIX,
    STATUS_ALIASES,
    CustomerRecord,
    Status,
)

logger = logging.getLogger(__name__)


def canonical_status(raw: Any) -> Status:
    """Map a stored status (code, label or Thai label) onto ``Status``.

    Unknown and empty values fall back to ``NOT_NOTIFIED``; old rows hold
    free text here and must not break the view.
    """

    if isinstance(raw, Status):
        return raw
    if raw is None:
        return Status.NOT_NOTIFIED
    text = str(raw).strip()
    if not text:
        return Status.NOT_NOTIFIED
    if text in STATUS_ALIASES:
        return STATUS_ALIASES[text]
    if text.endswith(".0") and text[:-2] in STATUS_ALIASES:
        # Numeric cells come back from the sheet as floats.
        return STATUS_ALIASES[text[:-2]]
    try:
        return Status(text.upper())
    except ValueError:
        return Status.NOT_NOTIFIED


def has_upcoming_expiry(distances: Iterable[Optional[int]], window: int = ALERT_WINDOW_DAYS) -> bool:
    """True when any known distance is below ``window``, overdue included."""

    return any(value is not None and value < window for value in distances)


def strip_annotation(name: str) -> str:
    text = (name or "").rstrip()
    while text.endswith(NOT_RENEWING_SUFFIX):
        text = text[: -len(NOT_RENEWING_SUFFIX)].rstrip()
    return text


def annotate_name(name: str, status: Status, default_name: Optional[str] = None) -> str:
    """Return ``name`` with the not-renewing suffix added or removed for ``status``."""

    name = name or ""
    annotated = name.rstrip().endswith(NOT_RENEWING_SUFFIX)
    if status is not Status.NOT_RENEWING:
        return strip_annotation(name) if annotated else name
    if annotated and strip_annotation(name):
        return name.rstrip()
    bare = strip_annotation(name)
    if not bare:
        if not default_name:
            return NOT_RENEWING_SUFFIX
        bare = default_name
    return f"{bare} {NOT_RENEWING_SUFFIX}"


@dataclass
class ReconciliationResult:
    """Outcome of reconciling one customer."""

    customer: CustomerRecord
    stored_status: Optional[str]
    canonical: Status
    final_status: Status
    stored_name: str
    distances: List[Optional[int]]

    @property
    def downgraded(self) -> bool:
        return self.canonical is not self.final_status

    @property
    def needs_write_back(self) -> bool:
        return (
            (self.stored_status or "") != self.canonical.value
            or self.downgraded
            or self.stored_name != self.customer.customer_name
        )


def reconcile(
    customer: CustomerRecord,
    today: Optional[date] = None,
    window: int = ALERT_WINDOW_DAYS,
) -> ReconciliationResult:
    """Reconcile ``customer`` against the calendar as of ``today``.

    The returned customer is a copy carrying the corrected status label and
    name; the input record is left untouched.
    """

    current = today or date.today()
    distances = expiry_distances(customer, current)
    canonical = canonical_status(customer.status)

    final_status = canonical
    if canonical is Status.RENEWED and has_upcoming_expiry(distances, window):
        final_status = Status.IN_PROGRESS

    final_name = annotate_name(customer.customer_name, final_status)
    corrected = replace(
        customer,
        status=final_status.value,
        customer_name=final_name,
        date_inputs=dict(customer.date_inputs),
    )
    result = ReconciliationResult(
        customer=corrected,
        stored_status=customer.status,
        canonical=canonical,
        final_status=final_status,
        stored_name=customer.customer_name,
        distances=distances,
    )
    if result.downgraded:
        logger.info(
            "Row %s: RENEWED downgraded to IN_PROGRESS, expiry within %d days",
            customer.row_number,
            window,
        )
    return result
