"""Data models for customer records kept in the renewal spreadsheet."""
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class Status(str, Enum):
    """Renewal follow-up state of a customer."""

    NOT_NOTIFIED = "NOT_NOTIFIED"
    IN_PROGRESS = "IN_PROGRESS"
    NOT_RENEWING = "NOT_RENEWING"
    RENEWED = "RENEWED"


# Values already present in the sheet; keep every entry for old rows.
STATUS_ALIASES: Dict[str, Status] = {
    "1": Status.NOT_NOTIFIED,
    "2": Status.IN_PROGRESS,
    "3": Status.NOT_RENEWING,
    "4": Status.RENEWED,
    "ยังไม่แจ้ง": Status.NOT_NOTIFIED,
    "กำลังดำเนินการ": Status.IN_PROGRESS,
    "ไม่ต่อ": Status.NOT_RENEWING,
    "ต่อแล้ว": Status.RENEWED,
}

NOT_RENEWING_SUFFIX = "(ลูกค้าไม่ต่อ)"
DEFAULT_CUSTOMER_NAME = "ลูกค้า"
ALERT_WINDOW_DAYS = 30

DATE_FIELDS = (
    "act_issued_date",
    "act_expiry_date",
    "tax_renewal_date",
    "tax_expiry_date",
    "voluntary_issued_date",
    "voluntary_expiry_date",
    "registration_date",
)

# (pair name, issued field, expiry field)
DATE_PAIRS = (
    ("act", "act_issued_date", "act_expiry_date"),
    ("tax", "tax_renewal_date", "tax_expiry_date"),
    ("voluntary", "voluntary_issued_date", "voluntary_expiry_date"),
)

WIRE_KEYS: Dict[str, str] = {
    "row_number": "rowNumber",
    "timestamp": "timestamp",
    "customer_name": "customerName",
    "license_plate": "licensePlate",
    "policy_number": "policyNumber",
    "phone": "phone",
    "email": "email",
    "act_issued_date": "actIssuedDate",
    "act_expiry_date": "actExpiryDate",
    "tax_renewal_date": "taxRenewalDate",
    "tax_expiry_date": "taxExpiryDate",
    "voluntary_issued_date": "voluntaryIssuedDate",
    "voluntary_expiry_date": "voluntaryExpiryDate",
    "registration_date": "registrationDate",
    "status": "status",
    "notes": "notes",
}


@dataclass
class CustomerRecord:
    """A single vehicle-insurance customer row from the external sheet."""

    row_number: Optional[int] = None
    customer_name: str = ""
    license_plate: str = ""
    policy_number: str = ""
    phone: str = ""
    email: str = ""
    act_issued_date: Optional[str] = None
    act_expiry_date: Optional[str] = None
    tax_renewal_date: Optional[str] = None
    tax_expiry_date: Optional[str] = None
    voluntary_issued_date: Optional[str] = None
    voluntary_expiry_date: Optional[str] = None
    registration_date: Optional[str] = None
    status: Optional[str] = None
    notes: str = ""
    timestamp: Optional[str] = None
    date_inputs: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary representation for tabular rendering."""

        return asdict(self)

    def to_wire(self) -> Dict[str, Any]:
        """Return the camelCase payload understood by the sheet webhook.

        The row number travels beside the record, not inside it, and blank
        dates are sent as ``None`` so the sheet cell is cleared.
        """

        payload: Dict[str, Any] = {}
        for attr, key in WIRE_KEYS.items():
            if attr == "row_number":
                continue
            value = getattr(self, attr)
            if attr in DATE_FIELDS:
                value = value or None
            elif attr == "status":
                value = value or Status.NOT_NOTIFIED.value
            elif value is None:
                value = ""
            payload[key] = value
        return payload
