# ABOUTME: Exceptions raised by sign-in, session and admin provisioning operations.
# ABOUTME: All derive from AuthError so callers can catch authentication failures at once.

from portfolio_cms.errors import PortfolioCMSError


class AuthError(PortfolioCMSError):
    """Base exception for authentication errors."""

    pass


class InvalidCredentialsError(AuthError):
    """Raised when an email and password do not match a stored account."""

    pass


class UserNotFoundError(AuthError):
    """Raised when no account exists for an email address."""

    pass


class UserExistsError(AuthError):
    """Raised when registering an email address that already has an account."""

    pass


class SessionExpiredError(AuthError):
    """Raised when a session token is expired, malformed or signed with another key."""

    pass
