"""Shared helpers for error responses and correlation-aware logging."""
