# ABOUTME: Hardcoded content shown when the database is empty or unreachable.
# ABOUTME: Every snapshot slice has a default so the public site never renders blank.

from datetime import date
from typing import Any

from portfolio_cms.models import EventCategory
from portfolio_cms.sync.ids import Pending
from portfolio_cms.sync.snapshot import (
    CertificationView,
    PortfolioSnapshot,
    ProfileView,
    ProjectView,
    SkillView,
    TimelineView,
)

DEFAULT_SOCIAL_PLATFORMS = ("github", "linkedin", "twitter", "instagram", "facebook")

DEFAULT_SETTINGS: dict[str, Any] = {
    "site_name": "Portfolio",
    "site_logo": None,
    "site_favicon": None,
    "seo_title": "Portfolio",
    "seo_description": "Projects, skills and experience.",
    "primary_color": "#7c3aed",
    "secondary_color": "#0ea5e9",
    "contact_form_enabled": True,
}


def default_profile() -> ProfileView:
    return ProfileView(
        name="Your Name",
        title="Software Developer",
        email="hello@example.com",
        phone=None,
        location="Earth",
        bio="I build things for the web and write about what I learn along the way.",
        profile_image=None,
        social={platform: "" for platform in DEFAULT_SOCIAL_PLATFORMS},
    )


def default_skills() -> list[SkillView]:
    rows = [
        ("Python", "Programming Languages", 85),
        ("TypeScript", "Programming Languages", 75),
        ("SQL", "Databases", 70),
        ("Docker", "DevOps", 60),
        ("Git", "Tools", 80),
    ]
    return [
        SkillView(id=Pending(local_index=i), name=name, category=category, level=level)
        for i, (name, category, level) in enumerate(rows)
    ]


def default_projects() -> list[ProjectView]:
    return [
        ProjectView(
            id=Pending(local_index=0),
            title="Portfolio Site",
            description="This site: content managed from an admin panel and refreshed live.",
            technologies=["Python", "SQL"],
        ),
        ProjectView(
            id=Pending(local_index=1),
            title="Open Source Contributions",
            description="Fixes and features contributed to libraries I use every day.",
            technologies=["Git"],
        ),
    ]


def default_certifications() -> list[CertificationView]:
    return [
        CertificationView(
            id=Pending(local_index=0),
            title="Cloud Practitioner",
            issuer="Certification Body",
            date="In Progress",
        ),
    ]


def default_timeline() -> list[TimelineView]:
    return [
        TimelineView(
            id=Pending(local_index=0),
            title="Software Developer",
            organization="Freelance",
            description="Building web applications for small businesses.",
            event_type=EventCategory.WORK,
            start_date=date(2022, 1, 1),
            order_index=0,
        ),
        TimelineView(
            id=Pending(local_index=1),
            title="B.Sc. Computer Science",
            organization="University",
            description="Algorithms, databases and distributed systems.",
            event_type=EventCategory.EDUCATION,
            start_date=date(2018, 9, 1),
            end_date=date(2022, 6, 30),
            order_index=1,
        ),
    ]


def default_settings() -> dict[str, Any]:
    return dict(DEFAULT_SETTINGS)


def default_snapshot() -> PortfolioSnapshot:
    """Build a fully populated snapshot from the hardcoded defaults."""
    return PortfolioSnapshot(
        profile=default_profile(),
        skills=default_skills(),
        projects=default_projects(),
        certifications=default_certifications(),
        timeline=default_timeline(),
        settings=default_settings(),
    )
