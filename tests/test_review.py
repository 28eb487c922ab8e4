"""Tests for staff-facing review helpers."""
from conftest import FakeStore, days_from

from renewals.core.models import CustomerRecord
from renewals.ingestion.normalizer import normalize_records
from renewals.review.workflow import (
    delete_customers,
    edit_customer,
    find_by_row,
    record_to_form,
    records_to_rows,
    search_customers,
    submit_customer,
)


def test_search_matches_name_or_plate(make_raw):
    records = normalize_records([make_raw(name="Somchai", plate="1กก-1234"), make_raw(name="Malee", plate="ABC-99")])
    assert [r.customer_name for r in search_customers(records, "abc")] == ["Malee"]
    assert [r.customer_name for r in search_customers(records, "SOM")] == ["Somchai"]
    assert len(search_customers(records, "  ")) == 2


def test_find_by_row(make_raw):
    records = normalize_records([make_raw(name="A"), make_raw(name="B")])
    assert find_by_row(records, "3").customer_name == "B"
    assert find_by_row(records, 99) is None
    assert find_by_row(records, "x") is None


def test_record_to_form_carries_input_dates(make_raw):
    [record] = normalize_records([make_raw(actExpiryDate="01/07/2024")])
    form = record_to_form(record)
    assert form["rowNumber"] == 2
    assert form["actExpiryDateInput"] == "2024-07-01"


def test_records_to_rows_flattens_whitespace():
    rows = records_to_rows([CustomerRecord(customer_name="  Demo   User ", notes="a\nb")])
    assert rows[0]["customer_name"] == "Demo User"
    assert rows[0]["notes"] == "a b"
    assert "date_inputs" not in rows[0]


def test_create_is_forwarded_to_sink(today):
    store = FakeStore()
    outcome = submit_customer(
        {"customerName": "Somchai", "licensePlate": "1กก-1234", "phone": "081-234-5678", "actExpiryDate": days_from(today, 90)},
        store,
        today=today,
    )
    assert outcome.saved and outcome.synced
    [record] = store.created
    assert record["phone"] == "081-2345678"
    assert record["status"] == "NOT_NOTIFIED"
    assert record["actExpiryDate"] == days_from(today, 90)
    assert record["taxExpiryDate"] is None
    assert record["timestamp"]


def test_renewed_inside_window_is_not_sent(today):
    store = FakeStore()
    outcome = submit_customer(
        {"customerName": "Somchai", "licensePlate": "1กก-1234", "status": "RENEWED", "actExpiryDate": days_from(today, 5)},
        store,
        today=today,
    )
    assert not outcome.saved
    assert "actExpiryDate" in outcome.validation.errors
    assert store.created == []


def test_edit_to_not_renewing_does_not_double_append(today):
    store = FakeStore()
    data = {"rowNumber": "4", "customerName": "Somchai", "licensePlate": "1กก-1234", "status": "NOT_RENEWING"}

    submit_customer(data, store, today=today, update=True)
    first_name = store.updated[0][1]["customerName"]
    submit_customer({**data, "customerName": first_name}, store, today=today, update=True)

    assert first_name == "Somchai (ลูกค้าไม่ต่อ)"
    assert store.updated[1][1]["customerName"] == first_name
    assert store.updated[0][0] == 4


def test_sync_failure_still_counts_as_saved(today):
    store = FakeStore(fail_rows=(4,))
    outcome = submit_customer(
        {"rowNumber": "4", "customerName": "A", "licensePlate": "B"}, store, today=today, update=True
    )
    assert outcome.saved
    assert not outcome.synced
    assert outcome.store_result.reason == "response-error"


def test_delete_customers_delegates():
    store = FakeStore()
    assert delete_customers(store, [2, 5]).ok
    assert store.deleted == [[2, 5]]


def test_edit_keeps_fields_the_caller_did_not_touch(make_raw, today):
    records = normalize_records(
        [make_raw(name="Somchai", act=10, tax=50, phone="081-2345678", notes="keep me", status="2")]
    )
    store = FakeStore()

    outcome = edit_customer(records, "2", {"licensePlate": "9ขข-9999", "status": "3"}, store, today=today)

    assert outcome.saved
    [(row_number, record)] = store.updated
    assert row_number == 2
    assert record["customerName"] == "Somchai (ลูกค้าไม่ต่อ)"
    assert record["licensePlate"] == "9ขข-9999"
    assert record["phone"] == "081-2345678"
    assert record["notes"] == "keep me"
    assert record["actExpiryDate"] == days_from(today, 10)
    assert record["taxExpiryDate"] == days_from(today, 50)
    assert record["status"] == "NOT_RENEWING"


def test_edit_to_renewed_checks_stored_expiries(make_raw, today):
    records = normalize_records([make_raw(name="Somchai", act=10)])
    store = FakeStore()

    outcome = edit_customer(records, 2, {"status": "RENEWED"}, store, today=today)

    assert not outcome.saved
    assert "actExpiryDate" in outcome.validation.errors
    assert store.updated == []


def test_edit_unknown_row_returns_none(make_raw, today):
    store = FakeStore()
    assert edit_customer(normalize_records([make_raw()]), 9, {"notes": "x"}, store, today=today) is None
    assert store.updated == []
