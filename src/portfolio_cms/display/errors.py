# ABOUTME: Error display helpers for formatting error messages with Rich.
# ABOUTME: Provides panels for failures, invalid form fields, denied access and notifications.

import traceback

from rich.panel import Panel
from rich.text import Text

from portfolio_cms.sync.notifications import Notification, NotificationLevel

NOTIFICATION_STYLES: dict[NotificationLevel, str] = {
    NotificationLevel.INFO: "cyan",
    NotificationLevel.SUCCESS: "green",
    NotificationLevel.ERROR: "red",
}


def display_error(error: Exception, verbose: bool = False) -> Panel:
    """Format an error as a Rich Panel.

    Args:
        error: The exception to display.
        verbose: If True, include full traceback information.

    Returns:
        A Rich Panel containing formatted error information.
    """
    error_type = type(error).__name__
    error_message = str(error)

    content = Text()
    content.append(f"{error_type}: ", style="bold red")
    content.append(error_message, style="red")

    if verbose:
        content.append("\n\n")
        content.append("Traceback:", style="dim")
        content.append("\n")
        tb_text = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        content.append(tb_text, style="dim")

    return Panel(
        content,
        title="Error",
        border_style="red",
        padding=(1, 2),
    )


def display_validation_errors(errors: dict[str, str]) -> Panel:
    """List each invalid form field with its message.

    Args:
        errors: Field name to message, as carried by FormValidationError.

    Returns:
        A Rich Panel with one line per field.
    """
    content = Text()
    content.append("Please fix the following fields:\n\n", style="bold yellow")
    for i, (field, message) in enumerate(sorted(errors.items())):
        if i:
            content.append("\n")
        content.append(f"• {field}: ", style="bold")
        content.append(message, style="yellow")

    return Panel(
        content,
        title="Invalid Input",
        border_style="yellow",
        padding=(1, 2),
    )


def display_login_required() -> Panel:
    """Shown when an admin command runs without a valid session."""
    message = Text()
    message.append("You need to sign in first.\n\n", style="bold yellow")
    message.append("Run ", style="dim")
    message.append("portfolio-cms login", style="bold cyan")
    message.append(" and try again.", style="dim")

    return Panel(
        message,
        title="Sign In Required",
        border_style="yellow",
        padding=(1, 2),
    )


def display_access_denied(email: str | None = None) -> Panel:
    """Shown when a signed-in account without admin rights runs an admin command.

    Args:
        email: The signed-in account, if known.

    Returns:
        A Rich Panel explaining the account lacks admin rights.
    """
    message = Text()
    message.append("Access denied\n\n", style="bold red")
    who = email or "This account"
    message.append(f"{who} does not have admin rights.\n", style="red")
    message.append(
        "An existing admin can grant them with 'portfolio-cms setup-admin'.",
        style="dim",
    )

    return Panel(
        message,
        title="Access Denied",
        border_style="red",
        padding=(1, 2),
    )


def display_notification(notification: Notification) -> Text:
    """Format a store notification as a single styled line."""
    style = NOTIFICATION_STYLES[notification.level]
    line = Text()
    line.append(f"{notification.title}: ", style=f"bold {style}")
    line.append(notification.message, style=style)
    return line
