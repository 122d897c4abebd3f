# ABOUTME: Pydantic form models for every admin editor and the public contact forms.
# ABOUTME: Field names match the table columns so validated forms dump straight into rows.

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from portfolio_cms.forms.validators import (
    EmailText,
    OptionalImageUrl,
    OptionalUrl,
    RequiredText,
    TagList,
    check_optional_url,
)
from portfolio_cms.models import EventCategory

SETTING_KEY_PATTERN = r"^[A-Za-z0-9_.-]+$"
MIN_PASSWORD_LENGTH = 8


class _Form(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ProfileForm(_Form):
    """Profile editor: identity, contact fields and social links."""

    name: RequiredText
    title: RequiredText
    email: EmailText
    phone: str | None = None
    location: str | None = None
    bio: str | None = None
    profile_image: OptionalImageUrl = None
    social: dict[str, str] = Field(default_factory=dict)

    @field_validator("social")
    @classmethod
    def _check_social(cls, links: dict[str, str]) -> dict[str, str]:
        cleaned: dict[str, str] = {}
        for platform, url in links.items():
            platform = platform.strip().lower()
            if not platform:
                raise ValueError("platform names must not be empty")
            # A blank URL removes the link.
            cleaned[platform] = check_optional_url(url) or ""
        return cleaned


class SkillForm(_Form):
    """Skill editor. Levels outside 0-100 are rejected."""

    name: RequiredText
    category: RequiredText
    level: int = Field(ge=0, le=100)


class ProjectForm(_Form):
    """Project editor."""

    title: RequiredText
    description: RequiredText
    technologies: TagList = Field(default_factory=list)
    image_url: OptionalImageUrl = None
    github_url: OptionalUrl = None
    demo_url: OptionalUrl = None


class CertificationForm(_Form):
    """Certification editor. The date is free text such as 'May 2023' or 'In Progress'."""

    title: RequiredText
    issuer: RequiredText
    date: RequiredText
    credential: str | None = None
    link: OptionalUrl = None
    logo_url: OptionalImageUrl = None


class TimelineForm(_Form):
    """Timeline event editor. Leave end_date empty for an ongoing event."""

    title: RequiredText
    organization: RequiredText
    description: RequiredText
    event_type: EventCategory = EventCategory.WORK
    start_date: date
    end_date: date | None = None
    location: str | None = None
    skills: TagList = Field(default_factory=list)
    image_url: OptionalImageUrl = None
    link_url: OptionalUrl = None
    order_index: int = 0
    is_featured: bool = False

    @field_validator("end_date", mode="before")
    @classmethod
    def _blank_end_date(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("end_date")
    @classmethod
    def _end_after_start(cls, value: date | None, info: ValidationInfo) -> date | None:
        start = info.data.get("start_date")
        if value is not None and start is not None and value < start:
            raise ValueError("end date must be after start date")
        return value


class ContactForm(_Form):
    """Public contact form."""

    name: RequiredText
    email: EmailText
    subject: RequiredText
    message: RequiredText


class HireMeForm(_Form):
    """Public lead-capture form; submitted as a contact message."""

    name: RequiredText
    email: EmailText
    company: str = ""
    project_type: RequiredText
    budget: RequiredText
    timeline: RequiredText
    description: RequiredText

    def to_contact_form(self) -> ContactForm:
        """Compose the contact message this lead is stored as."""
        body = (
            f"Company: {self.company}\n"
            f"Project Type: {self.project_type}\n"
            f"Budget: {self.budget}\n"
            f"Timeline: {self.timeline}\n"
            f"\n"
            f"Description:\n{self.description}"
        )
        return ContactForm(
            name=self.name,
            email=self.email,
            subject=f"{self.project_type} - {self.budget}",
            message=body,
        )


class SettingForm(_Form):
    """Site setting editor; value is any JSON-compatible value."""

    key: str = Field(pattern=SETTING_KEY_PATTERN, min_length=1)
    value: Any = None
    description: str | None = None


class RegistrationForm(_Form):
    """Account sign-up: the email is normalized the same way the public forms do it."""

    email: EmailText
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
