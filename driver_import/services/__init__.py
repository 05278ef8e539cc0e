"""Reconciliation pipeline services (mapping, validation, duplicates, grid, import)."""
