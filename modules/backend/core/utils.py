"""
Core Utilities.

Shared helpers used across the backend.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return the current UTC time without tzinfo.

    Note timestamps and response metadata are stored and compared as naive
    UTC values, so every clock read in the backend goes through here.
    Tests patch it per module to control created_at/updated_at.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
