# ABOUTME: Display package for Rich-formatted CLI output.
# ABOUTME: Exports site sections, admin tables, error panels and status panels.

from portfolio_cms.display.errors import (
    display_access_denied,
    display_error,
    display_login_required,
    display_notification,
    display_validation_errors,
)
from portfolio_cms.display.sections import SECTIONS, render_site
from portfolio_cms.display.status import render_dashboard, render_session_status

__all__ = [
    "SECTIONS",
    "display_access_denied",
    "display_error",
    "display_login_required",
    "display_notification",
    "display_validation_errors",
    "render_dashboard",
    "render_session_status",
    "render_site",
]
