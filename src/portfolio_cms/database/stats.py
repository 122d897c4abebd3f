# ABOUTME: Dashboard statistics for the admin panel.
# ABOUTME: Plain row counts per content table plus the number of unread messages.

from portfolio_cms.database.service import DatabaseService
from portfolio_cms.models import (
    Certification,
    ContactMessage,
    MessageStatus,
    Project,
    Skill,
    TimelineEvent,
)


def get_dashboard_stats(db_service: DatabaseService) -> dict[str, int]:
    """Get row counts shown on the admin dashboard.

    Args:
        db_service: The DatabaseService instance to query.

    Returns:
        Dictionary containing:
            - total_projects: Number of projects
            - total_skills: Number of skills
            - total_certifications: Number of certifications
            - timeline_events: Number of timeline events
            - contact_messages: Number of contact messages
            - unread_messages: Number of messages still marked unread
    """
    return {
        "total_projects": db_service.count_rows(Project),
        "total_skills": db_service.count_rows(Skill),
        "total_certifications": db_service.count_rows(Certification),
        "timeline_events": db_service.count_rows(TimelineEvent),
        "contact_messages": db_service.count_rows(ContactMessage),
        "unread_messages": db_service.count_rows(
            ContactMessage,
            ContactMessage.status == MessageStatus.UNREAD,
        ),
    }
