"""Resolve store endpoints and runtime knobs from the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from renewals.core.utils import get_config_value, get_int_config, load_env_file

DEFAULT_SHEETS_ENV_FILE = Path("secrets/sheets.env")
DEFAULT_TIMEOUT_SECONDS = 15
DEFAULT_WRITE_BACK_WORKERS = 4
_SHEETS_ENV_LOADED = False


@dataclass(frozen=True)
class StoreSettings:
    """Endpoints of the spreadsheet webhook plus optional gspread access."""

    write_url: Optional[str] = None
    data_url: Optional[str] = None
    update_url: Optional[str] = None
    timeout: int = DEFAULT_TIMEOUT_SECONDS
    write_back_workers: int = DEFAULT_WRITE_BACK_WORKERS
    spreadsheet_id: Optional[str] = None
    worksheet_title: str = "Sheet1"
    service_account_path: Optional[Path] = None


def _ensure_sheets_env() -> None:
    """Populate store env vars from secrets/sheets.env once per process."""

    global _SHEETS_ENV_LOADED
    if _SHEETS_ENV_LOADED:
        return
    _SHEETS_ENV_LOADED = True

    env_path = Path(os.getenv("SHEETS_ENV_FILE", DEFAULT_SHEETS_ENV_FILE))
    load_env_file(env_path)


def load_settings() -> StoreSettings:
    """Build ``StoreSettings`` from environment variables.

    ``SHEET_UPDATE_URL`` falls back to ``SHEET_WEBHOOK_URL`` because the
    webhook script usually dispatches on the ``action`` field of the body.
    """

    _ensure_sheets_env()
    write_url = get_config_value("SHEET_WEBHOOK_URL") or None
    account = get_config_value("GOOGLE_SHEETS_SERVICE_ACCOUNT")
    return StoreSettings(
        write_url=write_url,
        data_url=get_config_value("SHEET_DATA_URL") or None,
        update_url=get_config_value("SHEET_UPDATE_URL") or write_url,
        timeout=max(1, get_int_config("SHEET_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)),
        write_back_workers=max(1, get_int_config("WRITE_BACK_WORKERS", DEFAULT_WRITE_BACK_WORKERS)),
        spreadsheet_id=get_config_value("GOOGLE_SHEETS_SPREADSHEET_ID") or None,
        worksheet_title=get_config_value("GOOGLE_SHEETS_WORKSHEET", "Sheet1"),
        service_account_path=Path(account) if account else None,
    )
