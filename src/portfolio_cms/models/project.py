# ABOUTME: SQLModels for portfolio projects and certifications.
# ABOUTME: Technologies are stored as a JSON list of tag strings.

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from portfolio_cms.models.base import utc_now


class Project(SQLModel, table=True):
    """A project card with its technology tags and links."""

    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    profile_id: UUID | None = Field(default=None, index=True)
    title: str
    description: str
    technologies: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    image_url: str | None = None
    github_url: str | None = None
    demo_url: str | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Certification(SQLModel, table=True):
    """A certification; date is free text and may read 'In Progress'."""

    __tablename__ = "certifications"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    profile_id: UUID | None = Field(default=None, index=True)
    title: str
    issuer: str
    date: str
    credential: str | None = None
    link: str | None = None
    logo_url: str | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
