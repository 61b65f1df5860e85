"""Shared helpers for datetime handling and record validation."""
