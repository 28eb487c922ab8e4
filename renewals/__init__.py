"""Renewal tracking for vehicle-insurance customers kept in a spreadsheet."""
from renewals.core import (
    CustomerRecord,
    Status,
    configure_logging,
    days_until,
    load_settings,
    min_expiry,
    validate_submission,
)
from renewals.export import GoogleSheetsProvider, SheetStoreClient, StoreResult
from renewals.ingestion import normalize_record, normalize_records, resolve_fields
from renewals.processing.expiry import DueItem, select_due
from renewals.processing.pipeline import DueReport, build_due_report
from renewals.processing.reconciliation import canonical_status, reconcile
from renewals.review import edit_customer, search_customers, submit_customer

__all__ = [
    "CustomerRecord",
    "DueItem",
    "DueReport",
    "GoogleSheetsProvider",
    "SheetStoreClient",
    "Status",
    "StoreResult",
    "build_due_report",
    "canonical_status",
    "configure_logging",
    "days_until",
    "edit_customer",
    "load_settings",
    "min_expiry",
    "normalize_record",
    "normalize_records",
    "reconcile",
    "resolve_fields",
    "search_customers",
    "select_due",
    "submit_customer",
    "validate_submission",
]
