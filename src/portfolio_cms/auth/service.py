# ABOUTME: Account service for registering, signing in and provisioning admins.
# ABOUTME: Issues signed session tokens and resolves them back to accounts.

import logging

from portfolio_cms.auth.exceptions import (
    InvalidCredentialsError,
    SessionExpiredError,
    UserExistsError,
    UserNotFoundError,
)
from portfolio_cms.auth.passwords import check_needs_rehash, hash_password, verify_password
from portfolio_cms.auth.tokens import decode_session, encode_session
from portfolio_cms.database import DatabaseService
from portfolio_cms.forms import RegistrationForm, validate_form
from portfolio_cms.models import AuthUser

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Service for account credentials and session tokens."""

    def __init__(
        self, db_service: DatabaseService, secret_key: str, session_ttl_seconds: int
    ) -> None:
        """Initialize the auth service.

        Args:
            db_service: Database holding the auth_users table.
            secret_key: Key used to sign session tokens.
            session_ttl_seconds: Lifetime of an issued session.
        """
        self._db_service = db_service
        self._secret_key = secret_key
        self.session_ttl_seconds = session_ttl_seconds

    def register(self, email: str, password: str) -> AuthUser:
        """Create a non-admin account.

        Raises:
            FormValidationError: If the email is malformed or the password too short.
            UserExistsError: If the email already has an account.
        """
        form = validate_form(RegistrationForm, {"email": email, "password": password})
        email = normalize_email(form.email)

        if self.get_user(email) is not None:
            raise UserExistsError(f"An account for {email} already exists")
        user = self._db_service.insert_row(
            AuthUser(email=email, password_hash=hash_password(password))
        )
        logger.info("Registered account %s", email)
        return user

    def get_user(self, email: str) -> AuthUser | None:
        return self._db_service.find_row(AuthUser, AuthUser.email == normalize_email(email))

    def login(self, email: str, password: str) -> str:
        """Check credentials and issue a session token.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong.
        """
        user = self.get_user(email)
        if user is None or not verify_password(user.password_hash, password):
            logger.info("Failed sign-in for %s", normalize_email(email))
            raise InvalidCredentialsError("Invalid email or password")

        if check_needs_rehash(user.password_hash):
            self._db_service.update_row(
                AuthUser, user.id, {"password_hash": hash_password(password)}
            )
        return encode_session(user.id, user.email, self._secret_key, self.session_ttl_seconds)

    def resolve(self, token: str | None) -> AuthUser | None:
        """Return the account a session token belongs to, or None if it is not valid."""
        if not token:
            return None
        try:
            payload = decode_session(token, self._secret_key)
        except SessionExpiredError as e:
            logger.info("Rejected session: %s", e)
            return None
        user = self._db_service.find_row(AuthUser, AuthUser.email == payload.get("email"))
        if user is None or str(user.id) != payload["sub"]:
            return None
        return user

    def provision_admin(self, email: str, password: str | None = None) -> AuthUser:
        """Grant admin rights, creating the account first when a password is given.

        Raises:
            UserNotFoundError: If the email has no account and no password was given.
        """
        user = self.get_user(email)
        if user is None:
            if password is None:
                raise UserNotFoundError(f"No account for {normalize_email(email)}")
            user = self.register(email, password)
        updated = self._db_service.update_row(AuthUser, user.id, {"is_admin": True})
        logger.warning("Granted admin rights to %s", user.email)
        return updated or user

    def revoke_admin(self, email: str) -> AuthUser:
        """Remove admin rights from an account.

        Raises:
            UserNotFoundError: If the email has no account.
        """
        user = self.get_user(email)
        if user is None:
            raise UserNotFoundError(f"No account for {normalize_email(email)}")
        updated = self._db_service.update_row(AuthUser, user.id, {"is_admin": False})
        logger.warning("Revoked admin rights from %s", user.email)
        return updated or user
