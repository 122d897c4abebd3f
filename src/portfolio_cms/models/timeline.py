# ABOUTME: SQLModel for timeline events (work, education, projects, achievements).
# ABOUTME: A missing end_date means the event is ongoing.

from datetime import date, datetime
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from portfolio_cms.models.base import utc_now


class EventCategory(str, Enum):
    """Closed set of timeline event categories."""

    WORK = "work"
    EDUCATION = "education"
    PROJECT = "project"
    ACHIEVEMENT = "achievement"


class TimelineEvent(SQLModel, table=True):
    """An entry on the career timeline."""

    __tablename__ = "timeline_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    profile_id: UUID | None = Field(default=None, index=True)
    title: str
    organization: str
    location: str | None = None
    start_date: date
    end_date: date | None = Field(default=None, description="None while ongoing")
    description: str
    event_type: EventCategory = EventCategory.WORK
    skills: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    image_url: str | None = None
    link_url: str | None = None
    order_index: int = Field(default=0, description="Manual sort position")
    is_featured: bool = False

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
