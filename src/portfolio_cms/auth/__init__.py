# ABOUTME: Auth package for admin sign-in, session storage and the access gate.
# ABOUTME: Exports AuthService, AuthGate, SessionStore and auth exceptions.

from portfolio_cms.auth.exceptions import (
    AuthError,
    InvalidCredentialsError,
    SessionExpiredError,
    UserExistsError,
    UserNotFoundError,
)
from portfolio_cms.auth.gate import AuthGate, AuthState, GateDecision, GateResult
from portfolio_cms.auth.service import AuthService
from portfolio_cms.auth.session_store import SessionStore

__all__ = [
    "AuthError",
    "AuthGate",
    "AuthService",
    "AuthState",
    "GateDecision",
    "GateResult",
    "InvalidCredentialsError",
    "SessionExpiredError",
    "SessionStore",
    "UserExistsError",
    "UserNotFoundError",
]
