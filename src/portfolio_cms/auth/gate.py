# ABOUTME: Access gate deciding whether a session may use the admin commands.
# ABOUTME: Moves unauthenticated -> authenticated -> admin and returns an explicit decision.

from enum import Enum

from pydantic import BaseModel, ConfigDict

from portfolio_cms.auth.service import AuthService
from portfolio_cms.models import AuthUser


class AuthState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"


class GateDecision(str, Enum):
    """What the caller should do with the request."""

    ALLOW = "allow"
    REDIRECT_LOGIN = "redirect_login"
    ACCESS_DENIED = "access_denied"


class GateResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    state: AuthState
    decision: GateDecision
    user: AuthUser | None = None

    @property
    def allowed(self) -> bool:
        return self.decision is GateDecision.ALLOW


class AuthGate:
    """Checks a session token against the account table.

    Admin status is read from the account on every check, so revoking it takes
    effect on the next command without signing out.
    """

    def __init__(self, auth_service: AuthService) -> None:
        self._auth_service = auth_service

    def check(self, token: str | None, require_admin: bool = True) -> GateResult:
        """Resolve the session state and decide access.

        Args:
            token: Stored session token, or None when signed out.
            require_admin: Whether the guarded action needs an admin account.

        Returns:
            GateResult with the resolved state and the decision:
            ALLOW, REDIRECT_LOGIN for no valid session, or ACCESS_DENIED for a
            signed-in account without admin rights.
        """
        user = self._auth_service.resolve(token)
        if user is None:
            decision = GateDecision.REDIRECT_LOGIN if require_admin else GateDecision.ALLOW
            return GateResult(state=AuthState.UNAUTHENTICATED, decision=decision)

        if user.is_admin:
            return GateResult(state=AuthState.ADMIN, decision=GateDecision.ALLOW, user=user)

        decision = GateDecision.ACCESS_DENIED if require_admin else GateDecision.ALLOW
        return GateResult(state=AuthState.AUTHENTICATED, decision=decision, user=user)
