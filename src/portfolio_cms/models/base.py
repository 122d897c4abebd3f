# ABOUTME: Shared helpers for the SQLModel table definitions.
# ABOUTME: Provides the UTC timestamp factory used by created_at/updated_at columns.

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(UTC)
