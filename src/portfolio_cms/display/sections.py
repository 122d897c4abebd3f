# ABOUTME: Renders the public portfolio site from a snapshot as Rich panels.
# ABOUTME: One function per site section plus render_site for the whole page.

from collections import defaultdict
from collections.abc import Callable

from rich.columns import Columns
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from portfolio_cms.sync.snapshot import PortfolioSnapshot, format_period

LEVEL_BAR_WIDTH = 20


def _accent(snapshot: PortfolioSnapshot) -> str:
    color = snapshot.settings.get("primary_color")
    return color if isinstance(color, str) and color else "cyan"


def _level_bar(level: int) -> str:
    filled = round(level / 100 * LEVEL_BAR_WIDTH)
    return "█" * filled + "░" * (LEVEL_BAR_WIDTH - filled)


def render_hero(snapshot: PortfolioSnapshot) -> Panel:
    """Name, title and social links."""
    profile = snapshot.profile
    content = Text(justify="center")
    content.append(f"{profile.name}\n", style=f"bold {_accent(snapshot)}")
    content.append(f"{profile.title}\n", style="bold")
    if profile.location:
        content.append(f"{profile.location}\n", style="dim")

    links = [(platform, url) for platform, url in profile.social.items() if url]
    if links:
        content.append("\n")
        for i, (platform, url) in enumerate(links):
            if i:
                content.append("  ·  ", style="dim")
            content.append(platform.capitalize(), style=f"link {url}")

    title = snapshot.settings.get("site_name") or "Portfolio"
    return Panel(content, title=str(title), border_style=_accent(snapshot), padding=(1, 2))


def render_about(snapshot: PortfolioSnapshot) -> Panel:
    """Bio, GitHub statistics and unlocked achievements."""
    parts: list[RenderableType] = [Text(snapshot.profile.bio or "")]

    stats = snapshot.github_stats
    if stats is not None:
        line = Text()
        line.append(f"\nGitHub @{stats.username}: ", style="bold")
        line.append(
            f"{stats.total_repos} repos · {stats.total_stars} stars · {stats.total_forks} forks"
        )
        if stats.languages:
            top = list(stats.languages)[:5]
            line.append(f"\nTop languages: {', '.join(top)}", style="dim")
        parts.append(line)

    unlocked = [a for a in snapshot.achievements if a.is_unlocked]
    if unlocked:
        badges = Text("\nAchievements: ", style="bold")
        badges.append(", ".join(f"{a.icon or '🏆'} {a.title}" for a in unlocked))
        parts.append(badges)

    return Panel(Group(*parts), title="About", border_style="blue", padding=(1, 2))


def render_skills(snapshot: PortfolioSnapshot) -> Panel:
    """Skills grouped by category, each with a level bar."""
    by_category: dict[str, list] = defaultdict(list)
    for skill in snapshot.skills:
        by_category[skill.category].append(skill)

    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    table.add_column(justify="right", style="dim")
    for category, skills in by_category.items():
        table.add_row(f"[magenta]{category}[/magenta]", "", "")
        for skill in skills:
            table.add_row(f"  {skill.name}", _level_bar(skill.level), f"{skill.level}%")

    return Panel(table, title="Skills", border_style="magenta", padding=(1, 2))


def render_timeline(snapshot: PortfolioSnapshot) -> Panel:
    """Timeline events in display order."""
    entries: list[RenderableType] = []
    for event in snapshot.timeline:
        entry = Text()
        marker = "★" if event.is_featured else "●"
        entry.append(f"{marker} {event.title}", style="bold cyan")
        entry.append(f" · {event.organization}", style="bold")
        entry.append(f"\n  {format_period(event)}", style="green")
        if event.location:
            entry.append(f" · {event.location}", style="dim")
        entry.append(f"\n  {event.description}")
        if event.skills:
            entry.append(f"\n  {', '.join(event.skills)}", style="dim magenta")
        entries.append(entry)

    return Panel(
        Group(*_spaced(entries)),
        title="Experience & Education",
        border_style="green",
        padding=(1, 2),
    )


def render_projects(snapshot: PortfolioSnapshot) -> Panel:
    """Project cards."""
    cards = []
    for project in snapshot.projects:
        body = Text(project.description)
        if project.technologies:
            body.append(f"\n\n{', '.join(project.technologies)}", style="magenta")
        for label, url in (("Code", project.github_url), ("Demo", project.demo_url)):
            if url:
                body.append(f"\n{label}: ", style="bold")
                body.append(url, style=f"link {url}")
        cards.append(Panel(body, title=project.title, border_style="cyan", width=44))

    return Panel(Columns(cards), title="Projects", border_style="cyan", padding=(1, 1))


def render_certifications(snapshot: PortfolioSnapshot) -> Panel:
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column(style="magenta")
    table.add_column(style="green")
    for cert in snapshot.certifications:
        table.add_row(cert.title, cert.issuer, cert.date)
    return Panel(table, title="Certifications", border_style="yellow", padding=(1, 2))


def render_contact(snapshot: PortfolioSnapshot) -> Panel:
    """Contact details and how to send a message."""
    profile = snapshot.profile
    content = Text()
    content.append("Email: ", style="bold")
    content.append(profile.email)
    if profile.phone:
        content.append("\nPhone: ", style="bold")
        content.append(profile.phone)
    if profile.location:
        content.append("\nLocation: ", style="bold")
        content.append(profile.location)

    if snapshot.settings.get("contact_form_enabled", True):
        content.append("\n\nSend a message with ", style="dim")
        content.append("portfolio-cms contact", style="bold cyan")
        content.append(" or ", style="dim")
        content.append("portfolio-cms hire-me", style="bold cyan")
    return Panel(content, title="Contact", border_style="blue", padding=(1, 2))


SECTIONS: dict[str, Callable[[PortfolioSnapshot], Panel]] = {
    "hero": render_hero,
    "about": render_about,
    "skills": render_skills,
    "timeline": render_timeline,
    "projects": render_projects,
    "certifications": render_certifications,
    "contact": render_contact,
}


def render_site(snapshot: PortfolioSnapshot, section: str | None = None) -> Group:
    """Render one section by name, or every section in page order.

    Raises:
        KeyError: If section is not a known section name.
    """
    names = [section] if section is not None else list(SECTIONS)
    return Group(*(SECTIONS[name](snapshot) for name in names))


def _spaced(renderables: list[RenderableType]) -> list[RenderableType]:
    spaced: list[RenderableType] = []
    for i, renderable in enumerate(renderables):
        if i:
            spaced.append(Text(""))
        spaced.append(renderable)
    return spaced
