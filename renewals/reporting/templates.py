"""Map due-list items onto the flat rows used by exports and the CLI."""
from typing import Any, Dict, Iterable, List, Optional

from renewals.processing.expiry import DueItem

DUE_REPORT_HEADERS = [
    "Row",
    "Customer_Name",
    "License_Plate",
    "Phone",
    "Status",
    "Act_Expiry",
    "Tax_Expiry",
    "Voluntary_Expiry",
    "Days_Remaining",
    "Notes",
]


def _clean_text(value: Optional[str]) -> str:
    if not value:
        return ""
    return " ".join(value.split())


def _format_days(value: Optional[int]) -> str:
    return "" if value is None else str(value)


def due_item_to_row(item: DueItem) -> Dict[str, Any]:
    """Convert a ``DueItem`` into the report row dictionary."""

    customer = item.customer
    return {
        "Row": customer.row_number or "",
        "Customer_Name": _clean_text(customer.customer_name),
        "License_Plate": _clean_text(customer.license_plate),
        "Phone": customer.phone or "",
        "Status": customer.status or "",
        "Act_Expiry": customer.date_inputs.get("act_expiry_date", ""),
        "Tax_Expiry": customer.date_inputs.get("tax_expiry_date", ""),
        "Voluntary_Expiry": customer.date_inputs.get("voluntary_expiry_date", ""),
        "Days_Remaining": _format_days(item.days_remaining),
        "Notes": _clean_text(customer.notes),
    }


def due_items_to_rows(items: Iterable[DueItem]) -> List[Dict[str, Any]]:
    """Convert due-list items into report rows, preserving their order."""

    return [due_item_to_row(item) for item in items]
