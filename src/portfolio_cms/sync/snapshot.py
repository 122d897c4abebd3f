# ABOUTME: Immutable views of portfolio content held by the snapshot store.
# ABOUTME: Presentation code reads these; only the store replaces them.

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from portfolio_cms.models import (
    Achievement,
    Certification,
    ContactMessage,
    EventCategory,
    GitHubStats,
    MessageStatus,
    Project,
    Skill,
    TimelineEvent,
)
from portfolio_cms.sync.ids import Persisted, RowId


class _View(BaseModel):
    model_config = ConfigDict(frozen=True)


class ProfileView(_View):
    name: str
    title: str
    email: str
    phone: str | None = None
    location: str | None = None
    bio: str | None = None
    profile_image: str | None = None
    social: dict[str, str] = Field(default_factory=dict)


class SkillView(_View):
    id: RowId
    name: str
    category: str
    level: int

    @classmethod
    def from_row(cls, row: Skill) -> "SkillView":
        return cls(
            id=Persisted(remote_id=row.id),
            name=row.name,
            category=row.category,
            level=row.level,
        )


class ProjectView(_View):
    id: RowId
    title: str
    description: str
    technologies: list[str] = Field(default_factory=list)
    image_url: str | None = None
    github_url: str | None = None
    demo_url: str | None = None

    @classmethod
    def from_row(cls, row: Project) -> "ProjectView":
        return cls(
            id=Persisted(remote_id=row.id),
            title=row.title,
            description=row.description,
            technologies=list(row.technologies or []),
            image_url=row.image_url,
            github_url=row.github_url,
            demo_url=row.demo_url,
        )


class CertificationView(_View):
    id: RowId
    title: str
    issuer: str
    date: str
    credential: str | None = None
    link: str | None = None
    logo_url: str | None = None

    @classmethod
    def from_row(cls, row: Certification) -> "CertificationView":
        return cls(
            id=Persisted(remote_id=row.id),
            title=row.title,
            issuer=row.issuer,
            date=row.date,
            credential=row.credential,
            link=row.link,
            logo_url=row.logo_url,
        )


class TimelineView(_View):
    id: RowId
    title: str
    organization: str
    description: str
    event_type: EventCategory
    start_date: date
    end_date: date | None = None
    location: str | None = None
    skills: list[str] = Field(default_factory=list)
    image_url: str | None = None
    link_url: str | None = None
    order_index: int = 0
    is_featured: bool = False

    @property
    def is_ongoing(self) -> bool:
        """An event without an end date is still in progress."""
        return self.end_date is None

    @classmethod
    def from_row(cls, row: TimelineEvent) -> "TimelineView":
        skills = row.skills
        # Older rows stored skills as comma-separated text.
        if isinstance(skills, str):
            skills = [s.strip() for s in skills.split(",") if s.strip()]
        return cls(
            id=Persisted(remote_id=row.id),
            title=row.title,
            organization=row.organization,
            description=row.description,
            event_type=row.event_type,
            start_date=row.start_date,
            end_date=row.end_date,
            location=row.location,
            skills=list(skills or []),
            image_url=row.image_url,
            link_url=row.link_url,
            order_index=row.order_index or 0,
            is_featured=bool(row.is_featured),
        )


class MessageView(_View):
    id: RowId
    name: str
    email: str
    subject: str
    message: str
    status: MessageStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: ContactMessage) -> "MessageView":
        return cls(
            id=Persisted(remote_id=row.id),
            name=row.name,
            email=row.email,
            subject=row.subject,
            message=row.message,
            status=row.status,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class AchievementView(_View):
    title: str
    description: str
    category: str
    icon: str | None = None
    rarity: str | None = None
    progress: int = 0
    max_progress: int = 1
    is_unlocked: bool = False

    @classmethod
    def from_row(cls, row: Achievement) -> "AchievementView":
        return cls.model_validate(row.model_dump())


class GitHubStatsView(_View):
    username: str
    total_repos: int = 0
    total_stars: int = 0
    total_forks: int = 0
    total_contributions: int | None = None
    current_streak: int | None = None
    languages: dict[str, Any] = Field(default_factory=dict)
    last_updated: datetime | None = None

    @classmethod
    def from_row(cls, row: GitHubStats) -> "GitHubStatsView":
        return cls.model_validate(row.model_dump())


class PortfolioSnapshot(_View):
    """Everything the public site and the admin panel display."""

    profile: ProfileView
    skills: list[SkillView]
    projects: list[ProjectView]
    certifications: list[CertificationView]
    timeline: list[TimelineView]
    settings: dict[str, Any]
    messages: list[MessageView] = Field(default_factory=list)
    achievements: list[AchievementView] = Field(default_factory=list)
    github_stats: GitHubStatsView | None = None
    loaded_at: datetime | None = None


def sort_timeline(events: list[TimelineView]) -> list[TimelineView]:
    """Order events by order_index ascending, breaking ties by newest start_date."""
    by_start = sorted(events, key=lambda event: event.start_date, reverse=True)
    return sorted(by_start, key=lambda event: event.order_index)


def format_period(event: TimelineView) -> str:
    """Render an event's date range, e.g. 'Jan 2021 - Present'."""
    start = event.start_date.strftime("%b %Y")
    if event.end_date is None:
        return f"{start} - Present"
    return f"{start} - {event.end_date.strftime('%b %Y')}"
