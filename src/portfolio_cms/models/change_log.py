# ABOUTME: SQLModel for the change log that backs the change notification feed.
# ABOUTME: One entry is appended in the same transaction as every table write.

from datetime import datetime
from enum import Enum

from sqlmodel import Field, SQLModel

from portfolio_cms.models.base import utc_now


class ChangeType(str, Enum):
    """Kind of write recorded in the change log."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class ChangeLogEntry(SQLModel, table=True):
    """Records one write to one table row."""

    __tablename__ = "change_log"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    table_name: str = Field(index=True)
    change_type: ChangeType
    row_id: str
    created_at: datetime = Field(default_factory=utc_now)
