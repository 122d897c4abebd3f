# ABOUTME: Tests for the portfolio-cms command line interface.
# ABOUTME: Runs commands through Typer's CliRunner against a temporary database and fake keyring.

import os
from collections.abc import Generator
from datetime import timedelta
from pathlib import Path
from unittest import mock

import httpx
import pytest
from rich.console import Console
from sqlalchemy.exc import OperationalError
from sqlmodel import select
from typer.testing import CliRunner

from portfolio_cms.auth import AuthService, SessionStore
from portfolio_cms.cli import app
from portfolio_cms.config import get_settings
from portfolio_cms.database import DatabaseService
from portfolio_cms.github import GitHubClient
from portfolio_cms.models import (
    ChangeLogEntry,
    ContactMessage,
    GitHubStats,
    MessageStatus,
    SiteSetting,
    Skill,
)
from portfolio_cms.models.base import utc_now

RUST_FIELDS = ["-f", "name=Rust", "-f", "category=Languages"]


@pytest.fixture
def runner() -> CliRunner:
    """Create a CliRunner instance for testing Typer commands."""
    return CliRunner()


@pytest.fixture(autouse=True)
def wide_console() -> Generator[None, None, None]:
    """Render CLI output wide enough that tables keep one row per line."""
    with mock.patch("portfolio_cms.cli.console", Console(width=200)):
        yield


@pytest.fixture
def fake_keyring() -> Generator[dict[tuple[str, str], str], None, None]:
    """Replace the OS keyring with an in-memory dict."""
    passwords: dict[tuple[str, str], str] = {}
    with mock.patch("portfolio_cms.auth.session_store.keyring") as mock_keyring:
        mock_keyring.set_password.side_effect = lambda service, name, token: passwords.update(
            {(service, name): token}
        )
        mock_keyring.get_password.side_effect = lambda service, name: passwords.get(
            (service, name)
        )
        mock_keyring.delete_password.side_effect = lambda service, name: passwords.pop(
            (service, name), None
        )
        yield passwords


def _db() -> DatabaseService:
    settings = get_settings()
    db_service = DatabaseService(db_path=settings.db_path)
    db_service.init_db()
    return db_service


def _sign_in(is_admin: bool = True, email: str = "ada@example.com") -> None:
    """Create an account and store its session as if `login` had run."""
    settings = get_settings()
    auth_service = AuthService(_db(), settings.secret_key, session_ttl_seconds=3600)
    if is_admin:
        auth_service.provision_admin(email, "s3cret-pass")
    else:
        auth_service.register(email, "s3cret-pass")
    SessionStore(settings.sessions_file).store_token(auth_service.login(email, "s3cret-pass"))


class TestCLIBasics:
    """Tests for basic CLI structure."""

    def test_app_has_help(self, runner: CliRunner, temp_settings_env: str) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Usage" in result.output

    @pytest.mark.parametrize(
        "command", ["init", "setup-admin", "login", "logout", "status", "show", "contact"]
    )
    def test_public_commands_exist(
        self, runner: CliRunner, temp_settings_env: str, command: str
    ) -> None:
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0

    def test_admin_group_lists_commands(self, runner: CliRunner, temp_settings_env: str) -> None:
        result = runner.invoke(app, ["admin", "--help"])
        assert result.exit_code == 0
        for command in ("dashboard", "add", "move", "upload", "github-refresh", "watch"):
            assert command in result.output


class TestInitCommand:
    """Tests for the init command."""

    def test_init_creates_database_and_bucket(
        self, runner: CliRunner, temp_settings_env: str
    ) -> None:
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert "Database ready" in result.output
        assert "created" in result.output
        assert (Path(temp_settings_env) / "storage" / "portfolio").is_dir()

    def test_init_twice_reports_ready(self, runner: CliRunner, temp_settings_env: str) -> None:
        runner.invoke(app, ["init"])
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert "'portfolio' ready" in result.output

    def test_init_prunes_old_change_log_entries(
        self, runner: CliRunner, temp_settings_env: str
    ) -> None:
        """Test that change log entries past the retention window are removed."""
        db_service = _db()
        db_service.insert_row(Skill(name="Go", category="Languages", level=50))
        db_service.insert_row(Skill(name="SQL", category="Languages", level=60))
        with db_service.get_session() as session:
            for entry in session.exec(select(ChangeLogEntry)).all():
                entry.created_at = utc_now() - timedelta(days=2)
                session.add(entry)
            session.commit()

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert "Pruned 1 old change log entries" in result.output
        assert len(db_service.changes_since(0)) == 1


class TestShowCommand:
    """Tests for rendering the public site."""

    def test_empty_database_shows_defaults(
        self, runner: CliRunner, temp_settings_env: str
    ) -> None:
        """Test that an empty database still renders a complete site."""
        result = runner.invoke(app, ["show"])

        assert result.exit_code == 0
        assert "Your Name" in result.output
        assert "Experience & Education" in result.output

    def test_section_option(self, runner: CliRunner, temp_settings_env: str) -> None:
        _db().insert_row(Skill(name="Haskell", category="Languages", level=40))

        result = runner.invoke(app, ["show", "--section", "skills"])

        assert result.exit_code == 0
        assert "Haskell" in result.output
        assert "Contact" not in result.output

    def test_invalid_section(self, runner: CliRunner, temp_settings_env: str) -> None:
        result = runner.invoke(app, ["show", "--section", "blog"])
        assert result.exit_code != 0


class TestContactCommands:
    """Tests for the public contact and hire-me commands."""

    def test_contact_stores_message(self, runner: CliRunner, temp_settings_env: str) -> None:
        result = runner.invoke(
            app,
            [
                "contact",
                "--name",
                "Grace",
                "--email",
                "grace@example.com",
                "--subject",
                "Hello",
                "--message",
                "Nice site",
            ],
        )

        assert result.exit_code == 0
        assert "Message sent" in result.output
        messages = _db().list_rows(ContactMessage)
        assert [m.status for m in messages] == [MessageStatus.UNREAD]

    def test_contact_invalid_email(self, runner: CliRunner, temp_settings_env: str) -> None:
        """Test that field errors are listed and nothing is stored."""
        result = runner.invoke(
            app,
            [
                "contact",
                "--name",
                "Grace",
                "--email",
                "grace",
                "--subject",
                "Hello",
                "--message",
                "Nice site",
            ],
        )

        assert result.exit_code == 1
        assert "Invalid Input" in result.output
        assert "email" in result.output
        assert _db().count_rows(ContactMessage) == 0

    def test_contact_prompts_for_missing_fields(
        self, runner: CliRunner, temp_settings_env: str
    ) -> None:
        result = runner.invoke(
            app,
            ["contact", "--name", "Grace", "--email", "grace@example.com"],
            input="Hello\nNice site\n",
        )

        assert result.exit_code == 0
        assert _db().list_rows(ContactMessage)[0].message == "Nice site"

    def test_contact_database_failure_exits_cleanly(
        self, runner: CliRunner, temp_settings_env: str
    ) -> None:
        """Test that a failed write is reported instead of crashing with a traceback."""
        locked = OperationalError("INSERT", {}, Exception("database is locked"))
        with mock.patch.object(DatabaseService, "insert_row", side_effect=locked):
            result = runner.invoke(
                app,
                [
                    "contact",
                    "--name",
                    "Grace",
                    "--email",
                    "grace@example.com",
                    "--subject",
                    "Hello",
                    "--message",
                    "Nice site",
                ],
            )

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Message not sent" in result.output
        assert "ContactError" in result.output
        assert "Traceback" not in result.output

    def test_hire_me(self, runner: CliRunner, temp_settings_env: str) -> None:
        result = runner.invoke(
            app,
            [
                "hire-me",
                "--name",
                "Grace",
                "--email",
                "grace@example.com",
                "--project-type",
                "Web App",
                "--budget",
                "$5k",
                "--timeline",
                "1 month",
                "--description",
                "A dashboard",
            ],
        )

        assert result.exit_code == 0
        assert _db().list_rows(ContactMessage)[0].subject == "Web App - $5k"


class TestAuthCommands:
    """Tests for setup-admin, login, logout and status."""

    def test_setup_admin_creates_account(
        self, runner: CliRunner, temp_settings_env: str
    ) -> None:
        with mock.patch("portfolio_cms.cli.Prompt.ask", side_effect=["s3cret-pass"] * 2):
            result = runner.invoke(app, ["setup-admin", "ada@example.com"])

        assert result.exit_code == 0
        assert "ada@example.com is now an admin" in result.output

    def test_setup_admin_password_mismatch(
        self, runner: CliRunner, temp_settings_env: str
    ) -> None:
        with mock.patch("portfolio_cms.cli.Prompt.ask", side_effect=["s3cret-pass", "other"]):
            result = runner.invoke(app, ["setup-admin", "ada@example.com"])

        assert result.exit_code == 1
        assert "Passwords do not match" in result.output

    def test_setup_admin_revoke_unknown(self, runner: CliRunner, temp_settings_env: str) -> None:
        result = runner.invoke(app, ["setup-admin", "nobody@example.com", "--revoke"])

        assert result.exit_code == 1
        assert "UserNotFoundError" in result.output

    def test_login_stores_session(
        self,
        runner: CliRunner,
        temp_settings_env: str,
        fake_keyring: dict[tuple[str, str], str],
    ) -> None:
        settings = get_settings()
        AuthService(_db(), settings.secret_key, 3600).register("ada@example.com", "s3cret-pass")

        with mock.patch("portfolio_cms.cli.Prompt.ask", return_value="s3cret-pass"):
            result = runner.invoke(app, ["login", "--email", "Ada@Example.com"])

        assert result.exit_code == 0
        assert "Signed in as ada@example.com" in result.output
        assert ("portfolio-cms", "default") in fake_keyring

    def test_login_wrong_password(
        self,
        runner: CliRunner,
        temp_settings_env: str,
        fake_keyring: dict[tuple[str, str], str],
    ) -> None:
        settings = get_settings()
        AuthService(_db(), settings.secret_key, 3600).register("ada@example.com", "s3cret-pass")

        with mock.patch("portfolio_cms.cli.Prompt.ask", return_value="wrong-pass"):
            result = runner.invoke(app, ["login", "--email", "ada@example.com"])

        assert result.exit_code == 1
        assert "Invalid email or password" in result.output
        assert fake_keyring == {}

    def test_status_and_logout(
        self,
        runner: CliRunner,
        temp_settings_env: str,
        fake_keyring: dict[tuple[str, str], str],
    ) -> None:
        _sign_in()

        status = runner.invoke(app, ["status"])
        assert status.exit_code == 0
        assert "ada@example.com" in status.output
        assert "admin" in status.output
        assert "Stored sessions: default" in status.output

        logout = runner.invoke(app, ["logout"])
        assert logout.exit_code == 0
        assert fake_keyring == {}
        after = runner.invoke(app, ["status"]).output
        assert "Not signed in" in after
        assert "Stored sessions" not in after


class TestAdminGate:
    """Tests for the access gate in front of admin commands."""

    def test_signed_out_asks_to_sign_in(
        self,
        runner: CliRunner,
        temp_settings_env: str,
        fake_keyring: dict[tuple[str, str], str],
    ) -> None:
        result = runner.invoke(app, ["admin", "dashboard"])

        assert result.exit_code == 1
        assert "Sign In Required" in result.output

    def test_non_admin_is_denied(
        self,
        runner: CliRunner,
        temp_settings_env: str,
        fake_keyring: dict[tuple[str, str], str],
    ) -> None:
        _sign_in(is_admin=False)

        result = runner.invoke(app, ["admin", "list", "skill"])

        assert result.exit_code == 1
        assert "Access Denied" in result.output
        assert "ada@example.com" in result.output

    def test_admin_sees_dashboard(
        self,
        runner: CliRunner,
        temp_settings_env: str,
        fake_keyring: dict[tuple[str, str], str],
    ) -> None:
        _sign_in()

        result = runner.invoke(app, ["admin", "dashboard"])

        assert result.exit_code == 0
        assert "Dashboard" in result.output


class TestAdminContentCommands:
    """Tests for editing content as a signed-in admin."""

    @pytest.fixture(autouse=True)
    def signed_in_admin(
        self, temp_settings_env: str, fake_keyring: dict[tuple[str, str], str]
    ) -> None:
        _sign_in()

    def _add_event(self, runner: CliRunner, title: str, start: str) -> None:
        result = runner.invoke(
            app,
            [
                "admin",
                "add",
                "timeline",
                "-f",
                f"title={title}",
                "-f",
                "organization=Acme",
                "-f",
                f"description={title} at Acme",
                "-f",
                f"start_date={start}",
            ],
        )
        assert result.exit_code == 0, result.output

    def test_add_and_list_skill(self, runner: CliRunner) -> None:
        add = runner.invoke(
            app,
            ["admin", "add", "skill", *RUST_FIELDS, "-f", "level=70"],
        )
        assert add.exit_code == 0
        assert "Skill added" in add.output

        listing = runner.invoke(app, ["admin", "list", "skill"])
        assert "Rust" in listing.output
        assert "70%" in listing.output

    def test_add_invalid_skill(self, runner: CliRunner) -> None:
        """Test that out-of-range levels are reported per field and not stored."""
        result = runner.invoke(
            app,
            ["admin", "add", "skill", *RUST_FIELDS, "-f", "level=150"],
        )

        assert result.exit_code == 1
        assert "level" in result.output
        assert _db().count_rows(Skill) == 0

    def test_malformed_field(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["admin", "add", "skill", "-f", "name"])
        assert result.exit_code != 0

    def test_update_by_position(self, runner: CliRunner) -> None:
        _db().insert_row(Skill(name="Rust", category="Languages", level=70))

        result = runner.invoke(app, ["admin", "update", "skill", "1", "-f", "level=90"])

        assert result.exit_code == 0
        assert _db().list_rows(Skill)[0].level == 90

    def test_remove_by_id(self, runner: CliRunner) -> None:
        skill = _db().insert_row(Skill(name="Rust", category="Languages", level=70))

        result = runner.invoke(app, ["admin", "remove", "skill", str(skill.id)])

        assert result.exit_code == 0
        assert _db().count_rows(Skill) == 0

    def test_bad_reference(self, runner: CliRunner) -> None:
        _db().insert_row(Skill(name="Rust", category="Languages", level=70))
        result = runner.invoke(app, ["admin", "remove", "skill", "7"])
        assert result.exit_code != 0

    def test_move_timeline_event(self, runner: CliRunner) -> None:
        """Test that moving the second event up puts it first."""
        self._add_event(runner, "Intern", "2019-06-01")
        self._add_event(runner, "Lead", "2022-01-01")

        before = runner.invoke(app, ["admin", "list", "timeline"]).output
        assert before.index("Lead") < before.index("Intern")

        result = runner.invoke(app, ["admin", "move", "2", "up"])
        assert result.exit_code == 0

        after = runner.invoke(app, ["admin", "list", "timeline"]).output
        assert after.index("Intern") < after.index("Lead")

    def test_move_past_top(self, runner: CliRunner) -> None:
        self._add_event(runner, "Lead", "2022-01-01")

        result = runner.invoke(app, ["admin", "move", "1", "up"])

        assert result.exit_code == 1
        assert "ReorderError" in result.output

    def test_profile_and_social_link(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app,
            [
                "admin",
                "profile",
                "-f",
                "name=Ada Lovelace",
                "-f",
                "social.github=https://github.com/ada",
            ],
        )
        assert result.exit_code == 0
        assert "Profile updated" in result.output

        hero = runner.invoke(app, ["show", "--section", "hero"])
        assert "Ada Lovelace" in hero.output

    def test_mark_message(self, runner: CliRunner) -> None:
        _db().insert_row(
            ContactMessage(name="Grace", email="grace@example.com", subject="Hi", message="Hello")
        )

        result = runner.invoke(app, ["admin", "mark", "1", "read"])

        assert result.exit_code == 0
        assert _db().list_rows(ContactMessage)[0].status == MessageStatus.READ

    def test_setting_and_unset(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["admin", "setting", "contact_form_enabled", "false"])
        assert result.exit_code == 0
        assert _db().list_rows(SiteSetting)[0].value is False

        result = runner.invoke(app, ["admin", "unset", "contact_form_enabled"])
        assert result.exit_code == 0
        assert _db().count_rows(SiteSetting) == 0

    def test_upload_sets_profile_image(self, runner: CliRunner, temp_settings_env: str) -> None:
        image = Path(temp_settings_env) / "me.png"
        image.write_bytes(b"\x89PNG")

        with mock.patch.dict(
            os.environ, {"PORTFOLIO_CMS_STORAGE_PUBLIC_URL": "https://cdn.example.com"}
        ):
            get_settings.cache_clear()
            result = runner.invoke(
                app, ["admin", "upload", str(image), "avatars/me.png", "--profile-image"]
            )
            get_settings.cache_clear()

        assert result.exit_code == 0, result.output
        assert "https://cdn.example.com/portfolio/avatars/me.png" in result.output
        assert "Profile updated" in result.output

    def test_upload_rejects_non_image(self, runner: CliRunner, temp_settings_env: str) -> None:
        notes = Path(temp_settings_env) / "notes.txt"
        notes.write_text("hello")

        result = runner.invoke(app, ["admin", "upload", str(notes), "notes.txt"])

        assert result.exit_code == 1
        assert "Unsupported file type" in result.output

    def test_github_refresh(self, runner: CliRunner) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/users/ada":
                return httpx.Response(200, json={"public_repos": 1})
            return httpx.Response(
                200, json=[{"language": "Python", "stargazers_count": 4, "forks_count": 1}]
            )

        def fake_client(**kwargs: object) -> GitHubClient:
            return GitHubClient(http_client=httpx.Client(transport=httpx.MockTransport(handler)))

        with mock.patch("portfolio_cms.cli.GitHubClient", side_effect=fake_client):
            result = runner.invoke(app, ["admin", "github-refresh", "https://github.com/ada"])

        assert result.exit_code == 0, result.output
        assert "@ada" in result.output
        assert _db().list_rows(GitHubStats)[0].total_stars == 4

    def test_github_refresh_without_url(self, runner: CliRunner) -> None:
        """Test that a missing URL with no profile link explains how to set one."""
        result = runner.invoke(app, ["admin", "github-refresh"])

        assert result.exit_code == 1
        assert "No GitHub URL" in result.output

    def test_watch_stops_after_duration(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["admin", "watch", "--duration", "0.1"])

        assert result.exit_code == 0
        assert "Stopped watching" in result.output
