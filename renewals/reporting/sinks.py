"""File exports for the due list."""
import csv
from pathlib import Path
from typing import Any, Dict, Iterable, List

from renewals.reporting.templates import DUE_REPORT_HEADERS


def ensure_output_dir(output_path: Path) -> None:
    """Create parent folders for sink outputs when missing."""

    output_path.parent.mkdir(parents=True, exist_ok=True)


def write_excel(rows: Iterable[Dict[str, Any]], output_path: Path) -> None:
    """Write rows to an Excel workbook using openpyxl."""

    rows = list(rows)
    if not rows:
        return

    try:
        from openpyxl import Workbook
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise ImportError("openpyxl is required for Excel exports") from exc

    ensure_output_dir(output_path)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "due_customers"
    sheet.append(DUE_REPORT_HEADERS)
    for row in rows:
        sheet.append([row.get(header, "") for header in DUE_REPORT_HEADERS])
    workbook.save(output_path)


def write_csv(rows: Iterable[Dict[str, Any]], output_path: Path) -> None:
    """Write due rows to a CSV file with consistent headers."""

    rows: List[Dict[str, Any]] = list(rows)
    ensure_output_dir(output_path)
    with output_path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=DUE_REPORT_HEADERS)
        writer.writeheader()
        writer.writerows(rows)
