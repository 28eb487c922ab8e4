"""Select and rank customers whose renewal dates fall inside the alert window."""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List, Optional

from renewals.core.dates import expiry_distances, min_days, parse_datetime
from renewals.core.models import ALERT_WINDOW_DAYS, CustomerRecord, Status
from renewals.processing.reconciliation import ReconciliationResult, has_upcoming_expiry, reconcile

MIN_WINDOW_DAYS = 1
MAX_WINDOW_DAYS = 365


@dataclass
class DueItem:
    """A customer on the due list with its reconciled state."""

    customer: CustomerRecord
    act_days: Optional[int]
    tax_days: Optional[int]
    voluntary_days: Optional[int]
    days_remaining: Optional[int]
    reconciliation: ReconciliationResult

    @property
    def needs_write_back(self) -> bool:
        return self.reconciliation.needs_write_back


def clamp_window(days: Any) -> int:
    """Coerce a user-supplied window to ``1..365``; junk means the default."""

    try:
        value = int(str(days).strip())
    except (TypeError, ValueError):
        return ALERT_WINDOW_DAYS
    return min(MAX_WINDOW_DAYS, max(MIN_WINDOW_DAYS, value))


def _chronological_key(customer: CustomerRecord) -> float:
    for value in (customer.act_expiry_date, customer.timestamp, customer.act_issued_date):
        parsed = parse_datetime(value)
        if parsed is None:
            continue
        try:
            return parsed.timestamp()
        except (OverflowError, OSError, ValueError):
            continue
    return -math.inf


def _urgency(days: Optional[int]) -> float:
    return math.inf if days is None else days


def select_due(
    customers: Iterable[CustomerRecord],
    window: int = ALERT_WINDOW_DAYS,
    today: Optional[date] = None,
) -> List[DueItem]:
    """Return reconciled customers due within ``window`` days, most urgent first.

    Customers whose reconciled status is ``NOT_RENEWING`` stay out of the list;
    their reconciliation is still computed so the caller can write it back via
    :func:`select_candidates`.
    """

    return [
        item
        for item in select_candidates(customers, window, today)
        if item.reconciliation.final_status is not Status.NOT_RENEWING
    ]


def select_candidates(
    customers: Iterable[CustomerRecord],
    window: int = ALERT_WINDOW_DAYS,
    today: Optional[date] = None,
) -> List[DueItem]:
    """Rank and reconcile every customer inside the window, before exclusion."""

    current = today or date.today()
    ranked = []
    for customer in customers:
        distances = expiry_distances(customer, current)
        if not has_upcoming_expiry(distances, window):
            continue
        ranked.append((customer, distances, min_days(distances)))

    ranked.sort(key=lambda entry: (_urgency(entry[2]), _chronological_key(entry[0])))

    items: List[DueItem] = []
    for customer, distances, nearest in ranked:
        result = reconcile(customer, current)
        act_days, tax_days, voluntary_days = distances
        items.append(
            DueItem(
                customer=result.customer,
                act_days=act_days,
                tax_days=tax_days,
                voluntary_days=voluntary_days,
                days_remaining=nearest,
                reconciliation=result,
            )
        )
    return items
