# ABOUTME: Session store keeping sign-in tokens in the OS keyring.
# ABOUTME: Maintains a list of session names in a JSON file since keyring cannot enumerate.

import json
from pathlib import Path
from typing import Any

import keyring
from keyring.errors import PasswordDeleteError


class SessionStore:
    """Service for storing session tokens using the OS keyring."""

    SERVICE_NAME = "portfolio-cms"
    DEFAULT_SESSIONS_FILE = Path.home() / ".portfolio-cms" / "sessions.json"

    def __init__(self, sessions_file: Path | None = None) -> None:
        """Initialize the session store.

        Args:
            sessions_file: Path to JSON file storing session names.
                Defaults to ~/.portfolio-cms/sessions.json
        """
        self.sessions_file = (
            sessions_file if sessions_file is not None else self.DEFAULT_SESSIONS_FILE
        )

    def store_token(self, token: str, name: str = "default") -> None:
        """Store a session token in the OS keyring.

        Args:
            token: The signed session token.
            name: Name identifying this session. Defaults to "default".
        """
        keyring.set_password(self.SERVICE_NAME, name, token)
        self._add_session_to_list(name)

    def get_token(self, name: str = "default") -> str | None:
        """Retrieve a session token from the OS keyring.

        Returns:
            The token if found, None otherwise.
        """
        return keyring.get_password(self.SERVICE_NAME, name)

    def delete_token(self, name: str = "default") -> None:
        """Delete a session token. Deleting a missing session is not an error."""
        try:
            keyring.delete_password(self.SERVICE_NAME, name)
        except PasswordDeleteError:
            pass
        self._remove_session_from_list(name)

    def list_sessions(self) -> list[str]:
        """List all stored session names."""
        return self._load_sessions()

    def _load_sessions(self) -> list[str]:
        """Load session names from the sessions file.

        Returns:
            List of session names, or empty list if file doesn't exist or is empty/invalid.
        """
        if not self.sessions_file.exists():
            return []

        try:
            content = self.sessions_file.read_text().strip()
            if not content:
                return []
            data: dict[str, Any] = json.loads(content)
            sessions = data.get("sessions", [])
            if isinstance(sessions, list):
                return [str(s) for s in sessions]
            return []
        except (json.JSONDecodeError, OSError):
            return []

    def _save_sessions(self, sessions: list[str]) -> None:
        self.sessions_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.sessions_file, "w") as f:
            json.dump({"sessions": sessions}, f, indent=2)

    def _add_session_to_list(self, name: str) -> None:
        sessions = self._load_sessions()
        if name not in sessions:
            sessions.append(name)
            self._save_sessions(sessions)

    def _remove_session_from_list(self, name: str) -> None:
        sessions = self._load_sessions()
        if name in sessions:
            sessions.remove(name)
            self._save_sessions(sessions)
