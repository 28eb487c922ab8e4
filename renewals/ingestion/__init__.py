"""Normalization of raw sheet rows and form payloads."""
from renewals.ingestion.normalizer import normalize_record, normalize_records, resolve_fields

__all__ = ["normalize_record", "normalize_records", "resolve_fields"]
