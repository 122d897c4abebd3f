# ABOUTME: SQLModels for denormalized display caches refreshed outside the admin forms.
# ABOUTME: Holds achievement badge progress and cached GitHub repository statistics.

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from portfolio_cms.models.base import utc_now


class Achievement(SQLModel, table=True):
    """A badge with progress towards unlocking it."""

    __tablename__ = "achievements"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str
    description: str
    category: str
    icon: str | None = None
    rarity: str | None = None
    progress: int = 0
    max_progress: int = 1
    is_unlocked: bool = False
    unlock_date: datetime | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class GitHubStats(SQLModel, table=True):
    """Cached repository statistics for one GitHub account."""

    __tablename__ = "github_stats"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    username: str = Field(unique=True, index=True)
    total_repos: int = 0
    total_stars: int = 0
    total_forks: int = 0
    total_contributions: int | None = None
    current_streak: int | None = None
    languages: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    contribution_data: list[int] | None = Field(default=None, sa_column=Column(JSON))
    last_updated: datetime = Field(default_factory=utc_now)

    created_at: datetime = Field(default_factory=utc_now)
