"""Due-list orchestration: fetch, select, reconcile and write back."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Protocol, Sequence

from renewals.core.models import ALERT_WINDOW_DAYS, CustomerRecord, Status
from renewals.export.store import EXCEPTION, StoreResult
from renewals.ingestion.normalizer import normalize_records
from renewals.processing.expiry import DueItem, clamp_window, select_candidates

logger = logging.getLogger(__name__)

DEFAULT_WRITE_BACK_WORKERS = 4


class RecordProvider(Protocol):
    def fetch_all(self) -> List[Dict[str, Any]]: ...


class RecordSink(Protocol):
    def create(self, record: Dict[str, Any]) -> StoreResult: ...

    def update(self, row_number: Optional[int], record: Dict[str, Any]) -> StoreResult: ...

    def delete(self, row_numbers: Any) -> StoreResult: ...


@dataclass
class WriteBack:
    row_number: Optional[int]
    result: StoreResult


@dataclass
class DueReport:
    """Everything a due-list view needs, plus what happened to write-backs."""

    items: List[DueItem]
    window: int
    today: date
    total_customers: int = 0
    write_backs: List[WriteBack] = field(default_factory=list)

    @property
    def failed_write_backs(self) -> List[WriteBack]:
        return [entry for entry in self.write_backs if not entry.result.ok]


def load_customers(provider: RecordProvider) -> List[CustomerRecord]:
    """Fetch and normalize every customer; a failing provider yields ``[]``."""

    try:
        raws = provider.fetch_all()
    except Exception:
        logger.exception("Record provider failed; treating as no data")
        return []
    return normalize_records(raws or [])


def _write_back(sink: RecordSink, customer: CustomerRecord) -> StoreResult:
    try:
        return sink.update(customer.row_number, customer.to_wire())
    except Exception as exc:
        logger.exception("Write-back of row %s raised", customer.row_number)
        return StoreResult.failure(EXCEPTION, text=str(exc))


def dispatch_write_backs(
    sink: RecordSink,
    customers: Sequence[CustomerRecord],
    max_workers: int = DEFAULT_WRITE_BACK_WORKERS,
) -> List[WriteBack]:
    """Send every corrected row concurrently and wait for all to settle.

    Failures are logged and returned; they are never retried here and never
    stop the remaining updates.
    """

    if not customers:
        return []
    workers = max(1, min(max_workers, len(customers)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="write-back") as pool:
        futures = [(customer, pool.submit(_write_back, sink, customer)) for customer in customers]
        outcomes = [WriteBack(customer.row_number, future.result()) for customer, future in futures]

    failed = [entry for entry in outcomes if not entry.result.ok]
    for entry in failed:
        logger.warning("Write-back of row %s failed: %s", entry.row_number, entry.result.reason)
    logger.info("Write-backs settled: %d ok, %d failed", len(outcomes) - len(failed), len(failed))
    return outcomes


def build_due_report(
    provider: RecordProvider,
    sink: RecordSink | None = None,
    window: Any = ALERT_WINDOW_DAYS,
    today: Optional[date] = None,
    max_workers: int = DEFAULT_WRITE_BACK_WORKERS,
) -> DueReport:
    """Produce the ranked due list and sync drifted rows back to the store."""

    current = today or date.today()
    days = clamp_window(window)
    customers = load_customers(provider)
    candidates = select_candidates(customers, days, current)

    drifted = [item.customer for item in candidates if item.needs_write_back]
    write_backs: List[WriteBack] = []
    if drifted and sink is not None:
        write_backs = dispatch_write_backs(sink, drifted, max_workers)
    elif drifted:
        logger.info("%d rows need a write-back but no sink is configured", len(drifted))

    items = [item for item in candidates if item.reconciliation.final_status is not Status.NOT_RENEWING]
    logger.info(
        "Due list for %d days: %d of %d customers", days, len(items), len(customers)
    )
    return DueReport(
        items=items,
        window=days,
        today=current,
        total_customers=len(customers),
        write_backs=write_backs,
    )
