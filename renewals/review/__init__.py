"""Review utilities for staff-facing workflows."""
from renewals.review.workflow import (
    delete_customers,
    edit_customer,
    find_by_row,
    record_to_form,
    records_to_rows,
    search_customers,
    submit_customer,
)

__all__ = [
    "delete_customers",
    "edit_customer",
    "find_by_row",
    "record_to_form",
    "records_to_rows",
    "search_customers",
    "submit_customer",
]
