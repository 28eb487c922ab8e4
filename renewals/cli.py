"""Command-line access to the renewal tracker."""
import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from renewals.core.logging import configure_logging
from renewals.core.settings import StoreSettings, load_settings
from renewals.export.store import GoogleSheetsProvider, SheetStoreClient
from renewals.processing.pipeline import build_due_report, load_customers
from renewals.reporting.sinks import write_csv, write_excel
from renewals.reporting.templates import DUE_REPORT_HEADERS, due_items_to_rows
from renewals.review.workflow import (
    delete_customers,
    edit_customer,
    records_to_rows,
    search_customers,
    submit_customer,
)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI entry point."""

    parser = argparse.ArgumentParser(description="Track vehicle-insurance renewals")
    parser.add_argument("--log-level", help="Override LOG_LEVEL for this run")
    commands = parser.add_subparsers(dest="command", required=True)

    due = commands.add_parser("due", help="List customers with an expiry inside the alert window")
    due.add_argument("--days", default="30", help="Alert window in days (1-365)")
    due.add_argument("--output", type=Path, help="CSV file to write the due list to")
    due.add_argument("--excel", type=Path, help="Excel file to write the due list to")

    search = commands.add_parser("search", help="Search customers by name or license plate")
    search.add_argument("query", nargs="?", default="")

    for name, help_text in (("add", "Create a customer"), ("edit", "Update a customer row")):
        command = commands.add_parser(name, help=help_text)
        command.add_argument(
            "--set",
            dest="fields",
            action="append",
            default=[],
            metavar="FIELD=VALUE",
            help="Field value using sheet names, e.g. customerName=Somchai",
        )
        if name == "edit":
            command.add_argument("--row", required=True, help="Sheet row number to update")

    delete = commands.add_parser("delete", help="Delete customer rows")
    delete.add_argument("rows", nargs="+")
    return parser


def parse_assignments(pairs: Sequence[str]) -> Dict[str, str]:
    """Turn ``FIELD=VALUE`` strings into a dictionary."""

    values: Dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Expected FIELD=VALUE, got {pair!r}")
        key, value = pair.split("=", 1)
        values[key.strip()] = value
    return values


def _provider_for(settings: StoreSettings, client: SheetStoreClient):
    if not settings.data_url:
        sheets = GoogleSheetsProvider.from_settings(settings)
        if sheets is not None:
            return sheets
    return client


def _print_rows(rows: List[dict], headers: Sequence[str]) -> None:
    print("\t".join(headers))
    for row in rows:
        print("\t".join(str(row.get(header, "") or "") for header in headers))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entrypoint for running the tracker from the command line."""

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    settings = load_settings()
    client = SheetStoreClient(settings)
    provider = _provider_for(settings, client)

    if args.command == "due":
        report = build_due_report(provider, client, window=args.days, max_workers=settings.write_back_workers)
        rows = due_items_to_rows(report.items)
        _print_rows(rows, DUE_REPORT_HEADERS)
        if args.output:
            write_csv(rows, args.output)
        if args.excel:
            write_excel(rows, args.excel)
        return 0

    if args.command == "search":
        customers = load_customers(provider)
        results = search_customers(customers, args.query)
        headers = ["row_number", "customer_name", "license_plate", "phone", "status", "act_expiry_date"]
        _print_rows(records_to_rows(results), headers)
        print(f"{len(results)} of {len(customers)} customers")
        return 0

    if args.command in {"add", "edit"}:
        try:
            data = parse_assignments(args.fields)
        except ValueError as exc:
            parser.error(str(exc))
        if args.command == "edit":
            outcome = edit_customer(load_customers(provider), args.row, data, client)
            if outcome is None:
                print(f"Row {args.row} not found", file=sys.stderr)
                return 1
        else:
            outcome = submit_customer(data, client)
        if not outcome.validation.is_valid:
            print(outcome.validation.summary, file=sys.stderr)
            for field_name, message in outcome.validation.errors.items():
                print(f"  {field_name}: {message}", file=sys.stderr)
            return 1
        print("Saved" if outcome.synced else f"Saved (sheet sync failed: {outcome.store_result.reason})")
        return 0

    result = delete_customers(client, args.rows)
    print("Deleted" if result.ok else f"Delete failed: {result.reason}")
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
