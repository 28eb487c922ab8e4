"""Clients for the external customer store."""
from renewals.export.store import GoogleSheetsProvider, SheetStoreClient, StoreResult

__all__ = ["GoogleSheetsProvider", "SheetStoreClient", "StoreResult"]
