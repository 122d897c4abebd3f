# ABOUTME: Tests for passwords, session tokens, the keyring session store and AuthService.
# ABOUTME: The OS keyring is mocked; accounts live in a temporary database.

import json
import tempfile
import time
from collections.abc import Generator
from pathlib import Path
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from keyring.errors import PasswordDeleteError

from portfolio_cms.auth import (
    AuthService,
    InvalidCredentialsError,
    SessionExpiredError,
    SessionStore,
    UserExistsError,
    UserNotFoundError,
)
from portfolio_cms.auth.passwords import hash_password, verify_password
from portfolio_cms.auth.tokens import decode_session, encode_session
from portfolio_cms.database import DatabaseService
from portfolio_cms.forms import FormValidationError
from portfolio_cms.models import AuthUser

SECRET = "test-secret-key-for-sessions"


@pytest.fixture
def temp_sessions_file() -> Path:
    """Create a temporary sessions file path."""
    with tempfile.NamedTemporaryFile(suffix=".json", delete=False) as f:
        return Path(f.name)


@pytest.fixture
def mock_keyring() -> Generator[MagicMock, None, None]:
    """Create a mock keyring for testing."""
    with patch("portfolio_cms.auth.session_store.keyring") as mock:
        mock.get_password = MagicMock(return_value=None)
        mock.set_password = MagicMock()
        mock.delete_password = MagicMock()
        yield mock


@pytest.fixture
def session_store(temp_sessions_file: Path, mock_keyring: MagicMock) -> SessionStore:
    return SessionStore(sessions_file=temp_sessions_file)


@pytest.fixture
def auth_service(db_service: DatabaseService) -> AuthService:
    return AuthService(db_service, secret_key=SECRET, session_ttl_seconds=3600)


class TestPasswords:
    """Tests for argon2 hashing."""

    def test_hash_and_verify(self) -> None:
        """Test that the right password verifies and a wrong one does not."""
        password_hash = hash_password("correct horse")
        assert password_hash != "correct horse"
        assert verify_password(password_hash, "correct horse") is True
        assert verify_password(password_hash, "wrong horse") is False

    def test_verify_with_malformed_hash(self) -> None:
        """Test that a corrupt stored hash fails verification instead of raising."""
        assert verify_password("not-a-hash", "anything") is False


class TestTokens:
    """Tests for signed session tokens."""

    def test_round_trip_claims(self) -> None:
        """Test that the subject and email survive encoding."""
        user_id = uuid4()
        token = encode_session(user_id, "ada@example.com", SECRET, ttl_seconds=60)

        payload = decode_session(token, SECRET)

        assert payload["sub"] == str(user_id)
        assert payload["email"] == "ada@example.com"

    def test_wrong_key_rejected(self) -> None:
        """Test that a token signed with another key is rejected."""
        token = encode_session(uuid4(), "ada@example.com", SECRET, ttl_seconds=60)
        with pytest.raises(SessionExpiredError):
            decode_session(token, "another-secret-key-entirely")

    def test_expired_token_rejected(self) -> None:
        """Test that an expired token is rejected."""
        token = encode_session(uuid4(), "ada@example.com", SECRET, ttl_seconds=-60)
        with pytest.raises(SessionExpiredError):
            decode_session(token, SECRET)

    def test_garbage_rejected(self) -> None:
        """Test that a malformed token is rejected."""
        with pytest.raises(SessionExpiredError):
            decode_session("not.a.token", SECRET)


class TestSessionStore:
    """Tests for keyring-backed session storage."""

    def test_default_sessions_file(self, mock_keyring: MagicMock) -> None:
        """Test that SessionStore uses the default path when none provided."""
        store = SessionStore()
        assert store.sessions_file == Path.home() / ".portfolio-cms" / "sessions.json"

    def test_store_token(self, session_store: SessionStore, mock_keyring: MagicMock) -> None:
        """Test that tokens are written to the keyring and the name is listed."""
        session_store.store_token("token-value")

        mock_keyring.set_password.assert_called_once_with(
            "portfolio-cms", "default", "token-value"
        )
        assert session_store.list_sessions() == ["default"]

    def test_get_token(self, session_store: SessionStore, mock_keyring: MagicMock) -> None:
        """Test reading a token back from the keyring."""
        mock_keyring.get_password.return_value = "token-value"
        assert session_store.get_token() == "token-value"
        mock_keyring.get_password.assert_called_once_with("portfolio-cms", "default")

    def test_delete_token(
        self, session_store: SessionStore, mock_keyring: MagicMock, temp_sessions_file: Path
    ) -> None:
        """Test that deleting removes the keyring entry and the listed name."""
        session_store.store_token("token-value", "work")
        session_store.delete_token("work")

        mock_keyring.delete_password.assert_called_once_with("portfolio-cms", "work")
        assert json.loads(temp_sessions_file.read_text()) == {"sessions": []}

    def test_delete_missing_token(
        self, session_store: SessionStore, mock_keyring: MagicMock
    ) -> None:
        """Test that deleting a session that was never stored is not an error."""
        mock_keyring.delete_password.side_effect = PasswordDeleteError("not found")
        session_store.delete_token()
        assert session_store.list_sessions() == []

    def test_invalid_sessions_file(
        self, session_store: SessionStore, temp_sessions_file: Path
    ) -> None:
        """Test that an unreadable sessions file lists nothing."""
        temp_sessions_file.write_text("{not json")
        assert session_store.list_sessions() == []


class TestAuthService:
    """Tests for registering, signing in and admin provisioning."""

    def test_register_and_login(self, auth_service: AuthService) -> None:
        """Test that a registered account can sign in and be resolved."""
        user = auth_service.register("Ada@Example.com", "s3cret-pass")

        token = auth_service.login("ada@example.com", "s3cret-pass")

        assert user.email == "ada@example.com"
        assert user.is_admin is False
        resolved = auth_service.resolve(token)
        assert resolved is not None
        assert resolved.id == user.id

    def test_register_duplicate(self, auth_service: AuthService) -> None:
        """Test that an email can only be registered once."""
        auth_service.register("ada@example.com", "s3cret-pass")
        with pytest.raises(UserExistsError):
            auth_service.register("ADA@example.com", "another-pass")

    def test_register_validates_input(self, auth_service: AuthService) -> None:
        """Test that malformed emails and short passwords are rejected."""
        with pytest.raises(FormValidationError) as exc_info:
            auth_service.register("ada", "short")
        assert set(exc_info.value.errors) == {"email", "password"}

    def test_register_uses_contact_email_rules(self, auth_service: AuthService) -> None:
        """Test that sign-up rejects the same malformed addresses as the public forms."""
        with pytest.raises(FormValidationError) as exc_info:
            auth_service.register("user@example..com", "s3cret-pass")
        assert exc_info.value.errors == {"email": "must be a valid email address"}
        assert auth_service.get_user("user@example..com") is None

    def test_login_wrong_password(self, auth_service: AuthService) -> None:
        """Test that a wrong password is rejected."""
        auth_service.register("ada@example.com", "s3cret-pass")
        with pytest.raises(InvalidCredentialsError):
            auth_service.login("ada@example.com", "wrong-pass")

    def test_login_unknown_email(self, auth_service: AuthService) -> None:
        """Test that an unknown email gives the same error as a wrong password."""
        with pytest.raises(InvalidCredentialsError):
            auth_service.login("nobody@example.com", "s3cret-pass")

    def test_resolve_rejects_missing_or_bad_tokens(self, auth_service: AuthService) -> None:
        """Test that no token or a forged token resolves to nobody."""
        assert auth_service.resolve(None) is None
        assert auth_service.resolve("forged") is None

    def test_resolve_rejects_token_for_deleted_account(
        self, db_service: DatabaseService, auth_service: AuthService
    ) -> None:
        """Test that a token outlives its account only as a rejected token."""
        user = auth_service.register("ada@example.com", "s3cret-pass")
        token = auth_service.login("ada@example.com", "s3cret-pass")
        db_service.delete_row(AuthUser, user.id)

        assert auth_service.resolve(token) is None

    def test_provision_and_revoke_admin(self, auth_service: AuthService) -> None:
        """Test that admin rights come only from explicit provisioning."""
        auth_service.register("ada@example.com", "s3cret-pass")

        assert auth_service.provision_admin("ada@example.com").is_admin is True
        assert auth_service.revoke_admin("ada@example.com").is_admin is False

    def test_provision_admin_creates_account_with_password(
        self, auth_service: AuthService
    ) -> None:
        """Test that provisioning an unknown email with a password creates the account."""
        user = auth_service.provision_admin("new@example.com", "s3cret-pass")
        assert user.is_admin is True
        assert auth_service.login("new@example.com", "s3cret-pass")

    def test_provision_unknown_email_without_password(self, auth_service: AuthService) -> None:
        """Test that provisioning needs an existing account or a password."""
        with pytest.raises(UserNotFoundError):
            auth_service.provision_admin("nobody@example.com")

    def test_session_ttl_is_applied(self, auth_service: AuthService) -> None:
        """Test that issued tokens expire after the configured lifetime."""
        auth_service.register("ada@example.com", "s3cret-pass")
        token = auth_service.login("ada@example.com", "s3cret-pass")

        payload = decode_session(token, SECRET)

        assert payload["exp"] - payload["iat"] == 3600
        assert payload["iat"] <= int(time.time())
