# ABOUTME: SQLModel for the generic key/value site settings table.
# ABOUTME: Values are arbitrary JSON (logo URL, SEO text, brand colors, feature flags).

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from portfolio_cms.models.base import utc_now


class SiteSetting(SQLModel, table=True):
    """A single site setting addressed by its key."""

    __tablename__ = "site_settings"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    key: str = Field(unique=True, index=True)
    value: Any = Field(default=None, sa_column=Column(JSON))
    description: str | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
