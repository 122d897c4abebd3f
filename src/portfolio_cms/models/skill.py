# ABOUTME: SQLModel for a single skill with its category and proficiency level.
# ABOUTME: Categories are free text and only used for grouping on the public site.

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from portfolio_cms.models.base import utc_now


class Skill(SQLModel, table=True):
    """A skill shown in the skills section."""

    __tablename__ = "skills"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    profile_id: UUID | None = Field(default=None, index=True)
    name: str
    category: str
    level: int = Field(ge=0, le=100, description="Proficiency from 0 to 100")

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
