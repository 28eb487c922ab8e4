"""Reconciliation, due-list selection and orchestration."""
