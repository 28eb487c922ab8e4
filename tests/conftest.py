"""Pytest configuration to make the local package importable without installation."""
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Ensure repository root is on sys.path for module resolution
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from renewals.export.store import NO_ROWS, StoreResult


TODAY = date(2024, 6, 1)


def days_from(today: date, days: int) -> str:
    return (today + timedelta(days=days)).isoformat()


class FakeStore:
    """In-memory provider and sink that records every call."""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None, fail_rows: tuple = ()) -> None:
        self.rows = rows or []
        self.fail_rows = set(fail_rows)
        self.created: List[Dict[str, Any]] = []
        self.updated: List[tuple] = []
        self.deleted: List[List[Any]] = []

    def fetch_all(self) -> List[Dict[str, Any]]:
        return list(self.rows)

    def create(self, record: Dict[str, Any]) -> StoreResult:
        self.created.append(record)
        return StoreResult.success(200)

    def update(self, row_number, record: Dict[str, Any]) -> StoreResult:
        self.updated.append((row_number, record))
        if row_number in self.fail_rows:
            return StoreResult.failure("response-error", status_code=500, text="boom")
        return StoreResult.success(200)

    def delete(self, row_numbers) -> StoreResult:
        rows = list(row_numbers)
        self.deleted.append(rows)
        return StoreResult.success(200) if rows else StoreResult.failure(NO_ROWS)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep real store endpoints and secrets files out of the tests."""

    for key in (
        "SHEET_WEBHOOK_URL",
        "SHEET_DATA_URL",
        "SHEET_UPDATE_URL",
        "SHEET_TIMEOUT",
        "WRITE_BACK_WORKERS",
        "GOOGLE_SHEETS_SPREADSHEET_ID",
        "GOOGLE_SHEETS_WORKSHEET",
        "GOOGLE_SHEETS_SERVICE_ACCOUNT",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SHEETS_ENV_FILE", str(tmp_path / "missing.env"))


@pytest.fixture
def today() -> date:
    """A fixed calendar day so day counts are deterministic."""

    return TODAY


@pytest.fixture
def make_raw(today: date):
    """Build a raw sheet row with expiry dates expressed as day offsets."""

    def _make(name: str = "Somchai", plate: str = "1กก-1234", act=None, tax=None, voluntary=None, **extra):
        row: Dict[str, Any] = {"customerName": name, "licensePlate": plate}
        if act is not None:
            row["actExpiryDate"] = days_from(today, act)
        if tax is not None:
            row["taxExpiryDate"] = days_from(today, tax)
        if voluntary is not None:
            row["voluntaryExpiryDate"] = days_from(today, voluntary)
        row.update(extra)
        return row

    return _make


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()
