# ABOUTME: SQLModels for the single portfolio owner profile and its social links.
# ABOUTME: One profile per deployment; social links are one row per platform.

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from portfolio_cms.models.base import utc_now


class UserProfile(SQLModel, table=True):
    """The portfolio owner's profile shown in the hero and about sections."""

    __tablename__ = "user_profile"
    model_config = {"validate_assignment": True}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    title: str
    email: str
    phone: str | None = None
    location: str | None = None
    bio: str | None = None
    profile_image: str | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class SocialLink(SQLModel, table=True):
    """A link to the owner's account on one social platform."""

    __tablename__ = "social_links"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    profile_id: UUID | None = Field(default=None, index=True)
    platform: str = Field(index=True, description="Platform name, e.g. 'github'")
    url: str

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
