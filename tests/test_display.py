# ABOUTME: Tests for the display module: site sections, admin tables and status panels.
# ABOUTME: Renders to a recording Rich console and checks the visible text.

import io
from datetime import UTC, date, datetime
from uuid import uuid4

import pytest
from rich.console import Console, RenderableType
from rich.panel import Panel
from rich.table import Table

from portfolio_cms.auth import AuthState, GateDecision, GateResult
from portfolio_cms.display import SECTIONS, render_dashboard, render_session_status, render_site
from portfolio_cms.display.tables import render_messages, render_settings, render_timeline
from portfolio_cms.models import AuthUser, EventCategory, MessageStatus
from portfolio_cms.sync import Pending, Persisted, PortfolioSnapshot, format_period
from portfolio_cms.sync.defaults import default_snapshot
from portfolio_cms.sync.snapshot import GitHubStatsView, MessageView, TimelineView


def _render(renderable: RenderableType) -> str:
    console = Console(record=True, width=140, file=io.StringIO())
    console.print(renderable)
    return console.export_text()


def _event(title: str, end_date: date | None, **kwargs: object) -> TimelineView:
    return TimelineView(
        id=Persisted(remote_id=uuid4()),
        title=title,
        organization="Acme",
        description="Built things",
        event_type=EventCategory.WORK,
        start_date=date(2021, 1, 1),
        end_date=end_date,
        **kwargs,
    )


@pytest.fixture
def snapshot() -> PortfolioSnapshot:
    return default_snapshot()


class TestFormatPeriod:
    """Tests for format_period."""

    def test_ongoing_event(self) -> None:
        """Test that an event without an end date reads as ongoing."""
        assert format_period(_event("Engineer", None)) == "Jan 2021 - Present"

    def test_finished_event(self) -> None:
        assert format_period(_event("Engineer", date(2023, 6, 30))) == "Jan 2021 - Jun 2023"


class TestRenderSite:
    """Tests for the public site sections."""

    def test_all_sections_in_page_order(self, snapshot: PortfolioSnapshot) -> None:
        """Test that the full page renders every section."""
        text = _render(render_site(snapshot))

        for title in ("About", "Skills", "Experience & Education", "Projects", "Contact"):
            assert title in text
        assert snapshot.profile.name in text

    def test_single_section(self, snapshot: PortfolioSnapshot) -> None:
        """Test that one section can be rendered alone."""
        text = _render(render_site(snapshot, "skills"))

        assert "Skills" in text
        assert "Contact" not in text

    def test_unknown_section(self, snapshot: PortfolioSnapshot) -> None:
        with pytest.raises(KeyError):
            render_site(snapshot, "blog")

    def test_sections_return_panels(self, snapshot: PortfolioSnapshot) -> None:
        for render in SECTIONS.values():
            assert isinstance(render(snapshot), Panel)

    def test_site_name_setting_titles_hero(self, snapshot: PortfolioSnapshot) -> None:
        """Test that the site_name setting is used as the hero title."""
        custom = snapshot.model_copy(
            update={"settings": {**snapshot.settings, "site_name": "Ada's Corner"}}
        )
        assert "Ada's Corner" in _render(render_site(custom, "hero"))

    def test_contact_form_disabled(self, snapshot: PortfolioSnapshot) -> None:
        """Test that the contact hint is hidden when the form is disabled."""
        custom = snapshot.model_copy(
            update={"settings": {**snapshot.settings, "contact_form_enabled": False}}
        )
        assert "portfolio-cms contact" not in _render(render_site(custom, "contact"))

    def test_about_includes_github_stats(self, snapshot: PortfolioSnapshot) -> None:
        custom = snapshot.model_copy(
            update={
                "github_stats": GitHubStatsView(
                    username="octocat",
                    total_repos=3,
                    total_stars=8,
                    total_forks=3,
                    languages={"Python": 2},
                )
            }
        )
        text = _render(render_site(custom, "about"))
        assert "@octocat" in text
        assert "8 stars" in text
        assert "Python" in text

    def test_timeline_shows_present(self, snapshot: PortfolioSnapshot) -> None:
        custom = snapshot.model_copy(update={"timeline": [_event("Engineer", None)]})
        assert "Jan 2021 - Present" in _render(render_site(custom, "timeline"))


class TestAdminTables:
    """Tests for the numbered admin tables."""

    def test_timeline_table(self) -> None:
        """Test that rows are numbered in the given order."""
        events = [_event("Second", None, order_index=0), _event("First", date(2020, 1, 1))]
        table = render_timeline(events)

        assert isinstance(table, Table)
        assert table.row_count == 2
        text = _render(table)
        assert text.index("Second") < text.index("First")

    def test_default_rows_marked(self, snapshot: PortfolioSnapshot) -> None:
        """Test that placeholder rows are labelled as defaults instead of an id."""
        assert isinstance(snapshot.timeline[0].id, Pending)
        assert "default" in _render(render_timeline(snapshot.timeline))

    def test_messages_table(self) -> None:
        message = MessageView(
            id=Persisted(remote_id=uuid4()),
            name="Grace",
            email="grace@example.com",
            subject="Hello",
            message="Hi there",
            status=MessageStatus.UNREAD,
            created_at=datetime(2024, 5, 1, 9, 30, tzinfo=UTC),
        )
        text = _render(render_messages([message]))

        assert "Grace <grace@example.com>" in text
        assert "unread" in text
        assert "2024-05-01 09:30" in text

    def test_settings_table_marks_unset(self) -> None:
        text = _render(render_settings({"site_logo": None, "site_name": "Portfolio"}))
        assert "unset" in text
        assert "Portfolio" in text


class TestStatusPanels:
    """Tests for the dashboard and session panels."""

    def test_dashboard_counts(self) -> None:
        panel = render_dashboard({"total_projects": 4, "unread_messages": 2})

        assert isinstance(panel, Panel)
        assert panel.title == "Dashboard"
        text = _render(panel)
        assert "Projects" in text
        assert "Unread Messages" in text

    def test_session_signed_out(self) -> None:
        result = GateResult(state=AuthState.UNAUTHENTICATED, decision=GateDecision.REDIRECT_LOGIN)
        assert "Not signed in" in _render(render_session_status(result))

    def test_session_admin(self) -> None:
        user = AuthUser(email="ada@example.com", password_hash="x", is_admin=True)
        result = GateResult(state=AuthState.ADMIN, decision=GateDecision.ALLOW, user=user)

        text = _render(render_session_status(result))

        assert "ada@example.com" in text
        assert "admin" in text
