# ABOUTME: Portfolio CMS command line interface using Typer.
# ABOUTME: Public commands render the site and take messages; admin commands edit content.

import json
import threading
from collections.abc import Generator
from contextlib import contextmanager
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Annotated, Any
from uuid import UUID

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt

from portfolio_cms.auth import (
    AuthError,
    AuthGate,
    AuthService,
    GateDecision,
    InvalidCredentialsError,
    SessionStore,
)
from portfolio_cms.config import Settings, ensure_data_dir, get_settings
from portfolio_cms.contact import ContactError, ContactService
from portfolio_cms.database import ChangeFeed, DatabaseService
from portfolio_cms.database.stats import get_dashboard_stats
from portfolio_cms.display import (
    SECTIONS,
    display_access_denied,
    display_error,
    display_login_required,
    display_notification,
    display_validation_errors,
    render_dashboard,
    render_session_status,
    render_site,
)
from portfolio_cms.display import tables
from portfolio_cms.forms import FormValidationError
from portfolio_cms.github import GitHubClient, GitHubError, GitHubStatsSync
from portfolio_cms.log import configure_logging
from portfolio_cms.models import AuthUser, MessageStatus
from portfolio_cms.models.base import utc_now
from portfolio_cms.storage import ObjectStorage, StorageError
from portfolio_cms.sync import (
    LIST_ENTITIES,
    EntityKind,
    MoveDirection,
    MutationOp,
    MutationResult,
    Notifier,
    Persisted,
    PortfolioSnapshot,
    PortfolioStore,
    RowId,
    StoreVariant,
    SyncError,
)

app = typer.Typer(
    name="portfolio-cms",
    help="Manage and preview a portfolio site from the terminal.",
    add_completion=False,
)
admin_app = typer.Typer(
    help="Edit portfolio content. Requires a signed-in admin account.",
    no_args_is_help=True,
)
app.add_typer(admin_app, name="admin")

console = Console()

FieldsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--field",
        "-f",
        help="Field value as key=value. Repeat for several fields.",
    ),
]


class SiteSection(str, Enum):
    HERO = "hero"
    ABOUT = "about"
    SKILLS = "skills"
    TIMELINE = "timeline"
    PROJECTS = "projects"
    CERTIFICATIONS = "certifications"
    CONTACT = "contact"


def _get_db(settings: Settings) -> DatabaseService:
    db_service = DatabaseService(db_path=settings.db_path, database_url=settings.database_url)
    db_service.init_db()
    return db_service


def _get_auth(db_service: DatabaseService, settings: Settings) -> AuthService:
    return AuthService(
        db_service,
        secret_key=settings.secret_key,
        session_ttl_seconds=settings.session_ttl_minutes * 60,
    )


def _get_storage(settings: Settings) -> ObjectStorage:
    return ObjectStorage(
        root_dir=settings.storage_dir,
        bucket=settings.storage_bucket,
        public_url=settings.get_storage_public_url(),
        max_bytes=settings.max_upload_bytes,
    )


def _print_notifications(notifier: Notifier) -> Notifier:
    notifier.add_listener(lambda notification: console.print(display_notification(notification)))
    return notifier


def _open_store(
    db_service: DatabaseService,
    settings: Settings,
    variant: StoreVariant = StoreVariant.ADMIN,
    feed: ChangeFeed | None = None,
) -> PortfolioStore:
    store = PortfolioStore(
        db_service,
        feed=feed,
        notifier=_print_notifications(Notifier()),
        variant=variant,
        debounce_seconds=settings.refetch_debounce_seconds,
    )
    return store.open()


def _prune_change_log(db_service: DatabaseService, settings: Settings) -> int:
    cutoff = utc_now() - timedelta(hours=settings.change_log_retention_hours)
    return db_service.prune_change_log(cutoff)


def _require_admin(db_service: DatabaseService, settings: Settings) -> AuthUser:
    """Pass the auth gate or exit with an explicit sign-in or access-denied message.

    Returns:
        The signed-in admin account.
    """
    token = SessionStore(settings.sessions_file).get_token()
    result = AuthGate(_get_auth(db_service, settings)).check(token, require_admin=True)
    if result.decision is GateDecision.REDIRECT_LOGIN:
        console.print(display_login_required())
        raise typer.Exit(code=1)
    if result.decision is GateDecision.ACCESS_DENIED:
        console.print(display_access_denied(result.user.email if result.user else None))
        raise typer.Exit(code=1)
    return result.user  # type: ignore[return-value]


@contextmanager
def _user_errors() -> Generator[None, None, None]:
    """Print expected failures as panels and exit with code 1."""
    try:
        yield
    except FormValidationError as e:
        console.print(display_validation_errors(e.errors))
        raise typer.Exit(code=1) from None
    except (SyncError, StorageError, GitHubError, AuthError, ContactError) as e:
        console.print(display_error(e))
        raise typer.Exit(code=1) from None


def _check_result(result: MutationResult) -> None:
    if not result.ok:
        raise typer.Exit(code=1)


def _parse_value(raw: str) -> Any:
    """Interpret a setting value as JSON, falling back to plain text."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _parse_fields(fields: list[str] | None) -> dict[str, Any]:
    """Parse repeated key=value options into a payload.

    Keys of the form "social.<platform>" are collected into a nested "social" map.
    """
    payload: dict[str, Any] = {}
    for field in fields or []:
        key, sep, value = field.partition("=")
        key = key.strip()
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {field!r}", param_hint="--field")
        if key.startswith("social."):
            payload.setdefault("social", {})[key.removeprefix("social.")] = value
        else:
            payload[key] = value
    return payload


def _resolve_ref(snapshot: PortfolioSnapshot, kind: EntityKind, ref: str) -> RowId:
    """Turn a UUID or a 1-based list position into a row reference.

    Positions follow the order rows are listed in, so unsaved default rows
    resolve to their Pending id.
    """
    entity = LIST_ENTITIES.get(kind)
    if entity is None:
        raise typer.BadParameter(f"{kind.value} rows are not addressed by reference")

    try:
        return Persisted(remote_id=UUID(ref))
    except ValueError:
        pass

    items = getattr(snapshot, entity.slice_name)
    if not ref.isdigit() or not 1 <= int(ref) <= len(items):
        raise typer.BadParameter(
            f"Expected an id or a number from 1 to {len(items)}, got {ref!r}"
        )
    return items[int(ref) - 1].id


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG, INFO, WARNING, ERROR).",
        ),
    ] = None,
) -> None:
    """Portfolio CMS.

    Preview the portfolio site, send messages, and manage its content
    as an admin. Content changes made elsewhere are picked up live.
    """
    configure_logging(log_level or get_settings().log_level)
    if ctx.invoked_subcommand is None:
        console.print("[dim]Use --help to see available commands.[/dim]")


@app.command()
def init() -> None:
    """Create the database tables and the image bucket."""
    settings = get_settings()
    ensure_data_dir()
    pruned = _prune_change_log(_get_db(settings), settings)
    created = _get_storage(settings).ensure_bucket()

    console.print(f"[green]Database ready at[/green] [cyan]{settings.get_database_url()}[/cyan]")
    if pruned:
        console.print(f"[dim]Pruned {pruned} old change log entries.[/dim]")
    bucket_state = "created" if created else "ready"
    console.print(
        f"[green]Storage bucket '{settings.storage_bucket}' {bucket_state} in[/green] "
        f"[cyan]{settings.storage_dir}[/cyan]"
    )


@app.command("setup-admin")
def setup_admin(
    email: Annotated[str, typer.Argument(help="Email of the account to grant admin rights.")],
    revoke: Annotated[
        bool,
        typer.Option("--revoke", help="Remove admin rights instead of granting them."),
    ] = False,
) -> None:
    """Grant or revoke admin rights.

    Creates the account first if it does not exist yet; you will be asked
    for its password.
    """
    settings = get_settings()
    auth_service = _get_auth(_get_db(settings), settings)

    with _user_errors():
        if revoke:
            user = auth_service.revoke_admin(email)
            console.print(f"[yellow]Admin rights removed from {user.email}.[/yellow]")
            return

        password = None
        if auth_service.get_user(email) is None:
            console.print(f"[dim]No account for {email} yet; creating one.[/dim]")
            password = Prompt.ask("[bold]Choose a password[/bold]", password=True)
            confirm = Prompt.ask("[bold]Repeat the password[/bold]", password=True)
            if password != confirm:
                console.print("[red]Error: Passwords do not match.[/red]")
                raise typer.Exit(code=1)
        user = auth_service.provision_admin(email, password)

    console.print(f"[green]Success! {user.email} is now an admin.[/green]")


@app.command()
def login(
    email: Annotated[
        str | None,
        typer.Option("--email", "-e", help="Account email."),
    ] = None,
) -> None:
    """Sign in and store the session in the OS keyring."""
    settings = get_settings()
    auth_service = _get_auth(_get_db(settings), settings)

    if email is None:
        email = Prompt.ask("[bold]Email[/bold]")
    password = Prompt.ask("[bold]Password[/bold]", password=True)

    try:
        token = auth_service.login(email, password)
    except InvalidCredentialsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from None

    SessionStore(settings.sessions_file).store_token(token)
    console.print(f"[green]Signed in as [bold]{email.strip().lower()}[/bold].[/green]")


@app.command()
def logout() -> None:
    """Forget the stored session."""
    settings = get_settings()
    SessionStore(settings.sessions_file).delete_token()
    console.print("[green]Signed out.[/green]")


@app.command()
def status() -> None:
    """Show who is signed in and the database location."""
    settings = get_settings()
    db_service = _get_db(settings)
    session_store = SessionStore(settings.sessions_file)
    result = AuthGate(_get_auth(db_service, settings)).check(
        session_store.get_token(), require_admin=False
    )

    console.print(render_session_status(result))
    sessions = session_store.list_sessions()
    if sessions:
        console.print(f"[dim]Stored sessions: {', '.join(sessions)}[/dim]")
    console.print(f"[dim]Database: {settings.get_database_url()}[/dim]")


@app.command()
def show(
    section: Annotated[
        SiteSection | None,
        typer.Option("--section", "-s", help="Render only one section of the site."),
    ] = None,
) -> None:
    """Render the public portfolio site."""
    settings = get_settings()
    db_service = _get_db(settings)
    store = PortfolioStore(db_service, variant=StoreVariant.PUBLIC)
    with store:
        console.print(render_site(store.snapshot, section.value if section else None))


def _prompt_missing(payload: dict[str, str | None]) -> dict[str, str]:
    return {
        key: value
        if value is not None
        else Prompt.ask(f"[bold]{key.replace('_', ' ').capitalize()}[/bold]")
        for key, value in payload.items()
    }


@app.command()
def contact(
    name: Annotated[str | None, typer.Option("--name", help="Your name.")] = None,
    email: Annotated[str | None, typer.Option("--email", help="Your email.")] = None,
    subject: Annotated[str | None, typer.Option("--subject", help="Message subject.")] = None,
    message: Annotated[str | None, typer.Option("--message", help="Message text.")] = None,
) -> None:
    """Send a message to the portfolio owner."""
    settings = get_settings()
    service = ContactService(_get_db(settings), notifier=_print_notifications(Notifier()))
    payload = _prompt_missing(
        {"name": name, "email": email, "subject": subject, "message": message}
    )
    with _user_errors():
        service.submit(payload)


@app.command("hire-me")
def hire_me(
    name: Annotated[str | None, typer.Option("--name", help="Your name.")] = None,
    email: Annotated[str | None, typer.Option("--email", help="Your email.")] = None,
    company: Annotated[str, typer.Option("--company", help="Company name.")] = "",
    project_type: Annotated[
        str | None, typer.Option("--project-type", help="Kind of project.")
    ] = None,
    budget: Annotated[str | None, typer.Option("--budget", help="Budget range.")] = None,
    timeline: Annotated[str | None, typer.Option("--timeline", help="Desired timeline.")] = None,
    description: Annotated[
        str | None, typer.Option("--description", help="What you need built.")
    ] = None,
) -> None:
    """Request a quote for a project."""
    settings = get_settings()
    service = ContactService(_get_db(settings), notifier=_print_notifications(Notifier()))
    payload: dict[str, Any] = _prompt_missing(
        {
            "name": name,
            "email": email,
            "project_type": project_type,
            "budget": budget,
            "timeline": timeline,
            "description": description,
        }
    )
    payload["company"] = company
    with _user_errors():
        service.submit_hire_me(payload)


@admin_app.command()
def dashboard() -> None:
    """Show content counts and unread messages."""
    settings = get_settings()
    db_service = _get_db(settings)
    _require_admin(db_service, settings)
    console.print(render_dashboard(get_dashboard_stats(db_service)))


@admin_app.command("list")
def list_rows(
    kind: Annotated[EntityKind, typer.Argument(help="What to list.")],
) -> None:
    """List content rows with their numbers and ids."""
    settings = get_settings()
    db_service = _get_db(settings)
    _require_admin(db_service, settings)

    with _open_store(db_service, settings) as store:
        snapshot = store.snapshot
    renderers = {
        EntityKind.SKILL: lambda: tables.render_skills(snapshot.skills),
        EntityKind.PROJECT: lambda: tables.render_projects(snapshot.projects),
        EntityKind.CERTIFICATION: lambda: tables.render_certifications(snapshot.certifications),
        EntityKind.TIMELINE: lambda: tables.render_timeline(snapshot.timeline),
        EntityKind.MESSAGE: lambda: tables.render_messages(snapshot.messages),
        EntityKind.SETTING: lambda: tables.render_settings(snapshot.settings),
        EntityKind.PROFILE: lambda: render_site(snapshot, "hero"),
    }
    console.print(renderers[kind]())


@admin_app.command()
def add(
    kind: Annotated[EntityKind, typer.Argument(help="What to add.")],
    fields: FieldsOption = None,
) -> None:
    """Add a skill, project, certification or timeline event."""
    settings = get_settings()
    db_service = _get_db(settings)
    _require_admin(db_service, settings)
    payload = _parse_fields(fields)

    with _user_errors(), _open_store(db_service, settings) as store:
        _check_result(store.mutate(kind, MutationOp.CREATE, payload))


@admin_app.command()
def update(
    kind: Annotated[EntityKind, typer.Argument(help="What to update.")],
    ref: Annotated[str, typer.Argument(help="Row id or list number.")],
    fields: FieldsOption = None,
) -> None:
    """Change fields of an existing row; other fields keep their values."""
    settings = get_settings()
    db_service = _get_db(settings)
    _require_admin(db_service, settings)
    payload = _parse_fields(fields)

    with _user_errors(), _open_store(db_service, settings) as store:
        row_id = _resolve_ref(store.snapshot, kind, ref)
        _check_result(store.mutate(kind, MutationOp.UPDATE, payload, row_id))


@admin_app.command()
def remove(
    kind: Annotated[EntityKind, typer.Argument(help="What to remove.")],
    ref: Annotated[str, typer.Argument(help="Row id or list number.")],
) -> None:
    """Delete a row."""
    settings = get_settings()
    db_service = _get_db(settings)
    _require_admin(db_service, settings)

    with _user_errors(), _open_store(db_service, settings) as store:
        row_id = _resolve_ref(store.snapshot, kind, ref)
        _check_result(store.mutate(kind, MutationOp.DELETE, row_id=row_id))


@admin_app.command()
def move(
    ref: Annotated[str, typer.Argument(help="Timeline event id or list number.")],
    direction: Annotated[MoveDirection, typer.Argument(help="Direction to move.")],
) -> None:
    """Move a timeline event one place up or down."""
    settings = get_settings()
    db_service = _get_db(settings)
    _require_admin(db_service, settings)

    with _user_errors(), _open_store(db_service, settings) as store:
        row_id = _resolve_ref(store.snapshot, EntityKind.TIMELINE, ref)
        _check_result(store.reorder_timeline(row_id, direction))
        console.print(tables.render_timeline(store.snapshot.timeline))


@admin_app.command()
def profile(fields: FieldsOption = None) -> None:
    """Edit the profile. Use social.<platform>=url for links; an empty url removes one."""
    settings = get_settings()
    db_service = _get_db(settings)
    _require_admin(db_service, settings)
    payload = _parse_fields(fields)

    with _user_errors(), _open_store(db_service, settings) as store:
        _check_result(store.save_profile(payload))


@admin_app.command()
def mark(
    ref: Annotated[str, typer.Argument(help="Message id or list number.")],
    new_status: Annotated[MessageStatus, typer.Argument(metavar="STATUS", help="New status.")],
) -> None:
    """Mark a contact message unread, read, replied or archived."""
    settings = get_settings()
    db_service = _get_db(settings)
    _require_admin(db_service, settings)

    with _user_errors(), _open_store(db_service, settings) as store:
        row_id = _resolve_ref(store.snapshot, EntityKind.MESSAGE, ref)
        _check_result(store.set_message_status(row_id, new_status))


@admin_app.command()
def setting(
    key: Annotated[str, typer.Argument(help="Setting name, e.g. site_name.")],
    value: Annotated[str, typer.Argument(help="Value; JSON is parsed, anything else is text.")],
    description: Annotated[
        str | None,
        typer.Option("--description", "-d", help="What the setting controls."),
    ] = None,
) -> None:
    """Set a site setting."""
    settings = get_settings()
    db_service = _get_db(settings)
    _require_admin(db_service, settings)

    with _user_errors(), _open_store(db_service, settings) as store:
        _check_result(store.set_setting(key, _parse_value(value), description))


@admin_app.command()
def unset(key: Annotated[str, typer.Argument(help="Setting name.")]) -> None:
    """Remove a site setting."""
    settings = get_settings()
    db_service = _get_db(settings)
    _require_admin(db_service, settings)

    with _user_errors(), _open_store(db_service, settings) as store:
        _check_result(store.delete_setting(key))


@admin_app.command()
def upload(
    file: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="Image to upload."),
    ],
    dest: Annotated[str, typer.Argument(help="Path inside the bucket, e.g. projects/app.png.")],
    profile_image: Annotated[
        bool,
        typer.Option("--profile-image", help="Use the uploaded image as the profile picture."),
    ] = False,
) -> None:
    """Upload an image and print its public URL."""
    settings = get_settings()
    db_service = _get_db(settings)
    _require_admin(db_service, settings)

    with _user_errors():
        url = _get_storage(settings).upload(file, dest)
        console.print(f"[green]Uploaded to[/green] [cyan]{url}[/cyan]")
        if profile_image:
            with _open_store(db_service, settings) as store:
                _check_result(store.save_profile({"profile_image": url}))


@admin_app.command("github-refresh")
def github_refresh(
    url: Annotated[
        str | None,
        typer.Argument(help="GitHub profile URL. Defaults to the profile's GitHub link."),
    ] = None,
) -> None:
    """Refresh the cached GitHub repository statistics."""
    settings = get_settings()
    db_service = _get_db(settings)
    _require_admin(db_service, settings)

    if url is None:
        with _open_store(db_service, settings) as store:
            url = store.snapshot.profile.social.get("github") or None
    if not url:
        console.print("[red]Error: No GitHub URL given and none set on the profile.[/red]")
        console.print("[dim]Set one with: portfolio-cms admin profile -f social.github=URL[/dim]")
        raise typer.Exit(code=1)

    with _user_errors(), GitHubClient(
        token=settings.github_token, base_url=settings.github_api_url
    ) as client:
        stats = GitHubStatsSync(db_service, client).refresh(url)

    console.print(
        Panel(
            f"[bold]@{stats.username}[/bold]\n"
            f"Repositories: [cyan]{stats.total_repos}[/cyan]\n"
            f"Stars: [cyan]{stats.total_stars}[/cyan]\n"
            f"Forks: [cyan]{stats.total_forks}[/cyan]",
            title="GitHub Stats",
            border_style="green",
            padding=(1, 2),
        )
    )


@admin_app.command()
def watch(
    duration: Annotated[
        float,
        typer.Option("--duration", help="Stop after this many seconds; 0 runs until Ctrl+C."),
    ] = 0.0,
) -> None:
    """Follow content changes made by other sessions and print each refresh."""
    settings = get_settings()
    db_service = _get_db(settings)
    _require_admin(db_service, settings)
    _prune_change_log(db_service, settings)

    feed = ChangeFeed(db_service, poll_interval=settings.feed_poll_seconds)
    store = _open_store(db_service, settings, feed=feed)
    store.add_listener(
        lambda snapshot: console.print(
            f"[dim]{snapshot.loaded_at:%H:%M:%S}[/dim] refreshed: "
            f"{len(snapshot.projects)} projects, {len(snapshot.skills)} skills, "
            f"{len(snapshot.timeline)} timeline events, {len(snapshot.messages)} messages"
        )
    )

    console.print("[dim]Watching for changes. Press Ctrl+C to stop.[/dim]")
    feed.start()
    try:
        threading.Event().wait(duration if duration > 0 else None)
    except KeyboardInterrupt:
        pass
    finally:
        feed.stop()
        store.close()
    console.print("[dim]Stopped watching.[/dim]")


if __name__ == "__main__":
    app()
