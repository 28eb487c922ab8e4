"""Clients for the spreadsheet-backed customer store.

The sheet is fronted by a small webhook: ``SHEET_DATA_URL`` returns every row
as JSON, ``SHEET_WEBHOOK_URL`` appends a record and ``SHEET_UPDATE_URL``
accepts ``update``/``delete`` actions. Every failure is reported as a
``StoreResult`` reason instead of an exception so callers keep rendering.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import requests

from renewals.core.settings import StoreSettings, load_settings
from renewals.ingestion.normalizer import parse_row_number

logger = logging.getLogger(__name__)

MISSING_WRITE_URL = "missing-write-url"
MISSING_UPDATE_URL = "missing-update-url"
MISSING_ROW_NUMBER = "missing-row-number"
RESPONSE_ERROR = "response-error"
EXCEPTION = "exception"
NO_ROWS = "no-rows"

# Row 1 holds the sheet headers.
FIRST_DATA_ROW = 2


@dataclass
class StoreResult:
    """Outcome of a single store operation."""

    ok: bool
    reason: Optional[str] = None
    status_code: Optional[int] = None
    text: Optional[str] = None

    @classmethod
    def success(cls, status_code: Optional[int] = None) -> "StoreResult":
        return cls(ok=True, status_code=status_code)

    @classmethod
    def failure(cls, reason: str, status_code: Optional[int] = None, text: Optional[str] = None) -> "StoreResult":
        return cls(ok=False, reason=reason, status_code=status_code, text=text)


def _extract_rows(payload: Any) -> List[Dict[str, Any]]:
    if isinstance(payload, dict):
        payload = payload.get("records")
    if not isinstance(payload, list):
        return []
    return [row for row in payload if isinstance(row, dict)]


class SheetStoreClient:
    """Record provider and record sink backed by the sheet webhook."""

    def __init__(self, settings: StoreSettings | None = None, session: requests.Session | None = None) -> None:
        self.settings = settings or load_settings()
        self.session = session or requests.Session()

    def fetch_all(self) -> List[Dict[str, Any]]:
        """Return every raw row, or an empty list when the sheet is unreachable."""

        if not self.settings.data_url:
            logger.warning("SHEET_DATA_URL is not set; returning empty customer list.")
            return []
        try:
            response = self.session.get(
                self.settings.data_url,
                headers={"Accept": "application/json"},
                timeout=self.settings.timeout,
            )
            if not response.ok:
                logger.warning("Customer fetch failed with HTTP %s", response.status_code)
                return []
            rows = _extract_rows(response.json())
        except (requests.RequestException, ValueError):
            logger.exception("Error fetching customers from sheet")
            return []
        logger.info("Fetched %d rows from the customer sheet", len(rows))
        return rows

    def create(self, record: Dict[str, Any]) -> StoreResult:
        """Append ``record`` to the sheet."""

        if not self.settings.write_url:
            logger.warning("SHEET_WEBHOOK_URL is not set; skipping sheet sync.")
            return StoreResult.failure(MISSING_WRITE_URL)
        return self._post(self.settings.write_url, record, "create")

    def update(self, row_number: Optional[int], record: Dict[str, Any]) -> StoreResult:
        """Overwrite the sheet row ``row_number`` with ``record``."""

        if not row_number:
            return StoreResult.failure(MISSING_ROW_NUMBER)
        if not self.settings.update_url:
            logger.warning("SHEET_UPDATE_URL is not set; skipping update of row %s.", row_number)
            return StoreResult.failure(MISSING_UPDATE_URL)
        payload = {"action": "update", "rowNumber": row_number, "record": record}
        return self._post(self.settings.update_url, payload, f"update row {row_number}")

    def delete(self, row_numbers: Iterable[Any]) -> StoreResult:
        """Delete the given data rows; header and invalid numbers are ignored."""

        rows = sorted(
            {
                number
                for number in (parse_row_number(value) for value in row_numbers)
                if number is not None and number >= FIRST_DATA_ROW
            }
        )
        if not rows:
            return StoreResult.failure(NO_ROWS)
        if not self.settings.update_url:
            logger.warning("SHEET_UPDATE_URL is not set; skipping delete of %d rows.", len(rows))
            return StoreResult.failure(MISSING_UPDATE_URL)
        payload = {"action": "delete", "rowNumbers": rows}
        return self._post(self.settings.update_url, payload, f"delete rows {rows}")

    def _post(self, url: str, payload: Dict[str, Any], label: str) -> StoreResult:
        try:
            response = self.session.post(
                url,
                headers={"Content-Type": "application/json"},
                json=payload,
                timeout=self.settings.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Sheet %s failed: %s", label, exc)
            return StoreResult.failure(EXCEPTION, text=str(exc))
        if not response.ok:
            logger.warning("Sheet %s rejected with HTTP %s", label, response.status_code)
            return StoreResult.failure(RESPONSE_ERROR, status_code=response.status_code, text=response.text)
        return StoreResult.success(response.status_code)


class GoogleSheetsProvider:
    """Read-only provider that reads the worksheet directly with gspread."""

    def __init__(
        self,
        spreadsheet_id: str,
        worksheet_title: str = "Sheet1",
        service_account_path: Path | None = None,
        client: Any = None,
    ) -> None:
        self.spreadsheet_id = spreadsheet_id
        self.worksheet_title = worksheet_title
        self.service_account_path = service_account_path
        self._client = client

    @classmethod
    def from_settings(cls, settings: StoreSettings) -> Optional["GoogleSheetsProvider"]:
        if not settings.spreadsheet_id:
            return None
        return cls(settings.spreadsheet_id, settings.worksheet_title, settings.service_account_path)

    def _get_client(self) -> Any:
        if self._client is None:
            try:
                import gspread
            except ImportError as exc:  # pragma: no cover - optional dependency
                raise ImportError("gspread is required for the Google Sheets provider") from exc

            self._client = (
                gspread.service_account(filename=str(self.service_account_path))
                if self.service_account_path
                else gspread.service_account()
            )
        return self._client

    def fetch_all(self) -> List[Dict[str, Any]]:
        """Return worksheet rows keyed by header; positions map to sheet rows."""

        try:
            worksheet = self._get_client().open_by_key(self.spreadsheet_id).worksheet(self.worksheet_title)
            rows = worksheet.get_all_records()
        except ImportError:
            raise
        except Exception:
            logger.exception("Error reading worksheet %s", self.worksheet_title)
            return []
        return _extract_rows(rows)
