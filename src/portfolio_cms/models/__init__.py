# ABOUTME: Models package for the portfolio content tables.
# ABOUTME: Exports every SQLModel table and the enums they use.

from portfolio_cms.models.cache import Achievement, GitHubStats
from portfolio_cms.models.change_log import ChangeLogEntry, ChangeType
from portfolio_cms.models.message import ContactMessage, MessageStatus
from portfolio_cms.models.profile import SocialLink, UserProfile
from portfolio_cms.models.project import Certification, Project
from portfolio_cms.models.setting import SiteSetting
from portfolio_cms.models.skill import Skill
from portfolio_cms.models.timeline import EventCategory, TimelineEvent
from portfolio_cms.models.user import AuthUser

__all__ = [
    "Achievement",
    "AuthUser",
    "Certification",
    "ChangeLogEntry",
    "ChangeType",
    "ContactMessage",
    "EventCategory",
    "GitHubStats",
    "MessageStatus",
    "Project",
    "SiteSetting",
    "Skill",
    "SocialLink",
    "TimelineEvent",
    "UserProfile",
]
