"""
Utility helpers shared across the storefront package
"""

from datetime import datetime, timezone


def utcnow():
    """Current UTC time as a naive datetime, matching the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
