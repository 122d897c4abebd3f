# ABOUTME: Status display functions for the admin dashboard and session summary.
# ABOUTME: Provides Rich panels for content counts and the signed-in account.

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from portfolio_cms.auth import GateResult

DASHBOARD_LABELS: dict[str, str] = {
    "total_projects": "Projects",
    "total_skills": "Skills",
    "total_certifications": "Certifications",
    "timeline_events": "Timeline Events",
    "contact_messages": "Messages",
    "unread_messages": "Unread Messages",
}


def render_dashboard(stats: dict[str, int]) -> Panel:
    """Display content counts for the admin dashboard.

    Args:
        stats: Counts as returned by get_dashboard_stats.

    Returns:
        Rich Panel with one row per count; unread messages are highlighted.
    """
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column(justify="right")
    for key, label in DASHBOARD_LABELS.items():
        value = stats.get(key, 0)
        if key == "unread_messages" and value:
            table.add_row(label, f"[yellow]{value}[/yellow]")
        else:
            table.add_row(label, str(value))

    return Panel(
        table,
        title="Dashboard",
        border_style="blue",
        padding=(1, 2),
    )


def render_session_status(result: GateResult) -> Panel:
    """Display who is signed in and whether they have admin rights."""
    content = Text()
    if result.user is None:
        content.append("Not signed in", style="yellow")
        border = "yellow"
    else:
        content.append("Signed in as ", style="dim")
        content.append(result.user.email, style="bold cyan")
        content.append("\nRole: ", style="dim")
        if result.user.is_admin:
            content.append("admin", style="bold green")
        else:
            content.append("visitor (no admin rights)", style="yellow")
        border = "green" if result.user.is_admin else "yellow"

    return Panel(
        content,
        title="Session",
        border_style=border,
        padding=(1, 2),
    )
