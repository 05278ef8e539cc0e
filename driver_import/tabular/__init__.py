"""Delimited text parsing."""
