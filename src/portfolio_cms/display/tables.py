# ABOUTME: Rich table rendering for the admin content lists.
# ABOUTME: Numbers rows in display order so commands can refer to them by position.

from collections.abc import Sequence
from typing import Any

from rich.table import Table

from portfolio_cms.models import MessageStatus
from portfolio_cms.sync.ids import Pending, RowId
from portfolio_cms.sync.snapshot import (
    CertificationView,
    MessageView,
    ProjectView,
    SkillView,
    TimelineView,
    format_period,
)

STATUS_COLORS: dict[MessageStatus, str] = {
    MessageStatus.UNREAD: "yellow",
    MessageStatus.READ: "white",
    MessageStatus.REPLIED: "green",
    MessageStatus.ARCHIVED: "dim",
}


def _truncate(text: str | None, max_length: int) -> str:
    """Truncate text to max length with ellipsis."""
    if text is None:
        return ""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def _id_cell(row_id: RowId) -> str:
    if isinstance(row_id, Pending):
        return "[dim]default[/dim]"
    return f"[dim]{row_id}[/dim]"


def _new_table(title: str | None, *columns: tuple[str, dict[str, Any]]) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("#", style="dim", width=4)
    for name, options in columns:
        table.add_column(name, **options)
    table.add_column("ID", no_wrap=True)
    return table


def render_skills(skills: Sequence[SkillView], title: str | None = "Skills") -> Table:
    table = _new_table(
        title,
        ("Name", {"style": "cyan", "no_wrap": True}),
        ("Category", {"style": "magenta"}),
        ("Level", {"justify": "right"}),
    )
    for i, skill in enumerate(skills, start=1):
        table.add_row(str(i), skill.name, skill.category, f"{skill.level}%", _id_cell(skill.id))
    return table


def render_projects(projects: Sequence[ProjectView], title: str | None = "Projects") -> Table:
    table = _new_table(
        title,
        ("Title", {"style": "cyan", "no_wrap": True}),
        ("Technologies", {"style": "magenta", "max_width": 30}),
        ("Links", {"style": "green"}),
    )
    for i, project in enumerate(projects, start=1):
        links = [
            label
            for label, url in (("code", project.github_url), ("demo", project.demo_url))
            if url
        ]
        table.add_row(
            str(i),
            project.title,
            ", ".join(project.technologies),
            " ".join(links),
            _id_cell(project.id),
        )
    return table


def render_certifications(
    certifications: Sequence[CertificationView], title: str | None = "Certifications"
) -> Table:
    table = _new_table(
        title,
        ("Title", {"style": "cyan", "no_wrap": True}),
        ("Issuer", {"style": "magenta"}),
        ("Date", {"style": "green"}),
    )
    for i, cert in enumerate(certifications, start=1):
        table.add_row(str(i), cert.title, cert.issuer, cert.date, _id_cell(cert.id))
    return table


def render_timeline(events: Sequence[TimelineView], title: str | None = "Timeline") -> Table:
    """Render timeline events in the order given, with their order index."""
    table = _new_table(
        title,
        ("Title", {"style": "cyan", "no_wrap": True}),
        ("Organization", {"style": "magenta"}),
        ("Type", {}),
        ("Period", {"style": "green"}),
        ("Order", {"justify": "right", "style": "dim"}),
    )
    for i, event in enumerate(events, start=1):
        title_cell = f"★ {event.title}" if event.is_featured else event.title
        table.add_row(
            str(i),
            title_cell,
            event.organization,
            event.event_type.value,
            format_period(event),
            str(event.order_index),
            _id_cell(event.id),
        )
    return table


def render_messages(messages: Sequence[MessageView], title: str | None = "Messages") -> Table:
    table = _new_table(
        title,
        ("From", {"style": "cyan", "no_wrap": True}),
        ("Subject", {"max_width": 40}),
        ("Status", {}),
        ("Received", {"style": "dim"}),
    )
    for i, message in enumerate(messages, start=1):
        color = STATUS_COLORS[message.status]
        received = message.created_at.strftime("%Y-%m-%d %H:%M") if message.created_at else ""
        table.add_row(
            str(i),
            f"{message.name} <{message.email}>",
            _truncate(message.subject, 40),
            f"[{color}]{message.status.value}[/{color}]",
            received,
            _id_cell(message.id),
        )
    return table


def render_settings(settings: dict[str, Any], title: str | None = "Site Settings") -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value")
    for key in sorted(settings):
        value = settings[key]
        table.add_row(key, "[dim]unset[/dim]" if value is None else _truncate(str(value), 60))
    return table
