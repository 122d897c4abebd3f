# ABOUTME: SQLModel for messages submitted through the public contact and hire-me forms.
# ABOUTME: Status changes are made by the admin; no transition is enforced.

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from portfolio_cms.models.base import utc_now


class MessageStatus(str, Enum):
    """Lifecycle label of a contact message."""

    UNREAD = "unread"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"


class ContactMessage(SQLModel, table=True):
    """A message left by a site visitor."""

    __tablename__ = "contact_messages"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    email: str
    subject: str
    message: str
    status: MessageStatus = Field(default=MessageStatus.UNREAD, index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
