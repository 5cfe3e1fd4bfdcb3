"""
Shield Permissions - Exceptions
===============================
Structured errors for permission key handling.

Unauthenticated checks never raise; they resolve to deny/read-only.
Store errors are not wrapped here and propagate to the caller.
"""

from __future__ import annotations


class ShieldError(Exception):
    """Base error for shield permission operations."""
    pass


class InvalidSlugError(ShieldError):
    """A slug, action or identity contains the reserved relation separator."""

    def __init__(self, value: str, field: str, reason: str = ""):
        self.value = value
        self.field = field
        self.reason = reason or "must not contain the reserved '__' separator"
        super().__init__(f"{field} '{value}' {self.reason}.")


class MalformedKeyError(ShieldError):
    """Permission key cannot be split into action and resource parts."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Malformed permission key '{key}': {reason}.")
