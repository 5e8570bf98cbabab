"""Shared utility functions for the TreeOps backend."""

from .sanitization import sanitize_identifier

__all__ = ["sanitize_identifier"]
