"""Core building blocks for the renewals package."""
from renewals.core.logging import configure_logging
from renewals.core.models import CustomerRecord, Status
from renewals.core.dates import days_until, min_expiry, parse_date, to_input_date
from renewals.core.settings import StoreSettings, load_settings
from renewals.core.quality import ValidationResult, validate_submission

__all__ = [
    "configure_logging",
    "CustomerRecord",
    "Status",
    "days_until",
    "min_expiry",
    "parse_date",
    "to_input_date",
    "StoreSettings",
    "load_settings",
    "ValidationResult",
    "validate_submission",
]
