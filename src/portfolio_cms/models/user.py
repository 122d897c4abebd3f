# ABOUTME: SQLModel for accounts allowed to sign in to the admin panel.
# ABOUTME: The admin flag is only set through the explicit provisioning step.

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from portfolio_cms.models.base import utc_now


class AuthUser(SQLModel, table=True):
    """A sign-in account; its id doubles as the owner id of portfolio rows."""

    __tablename__ = "auth_users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True)
    password_hash: str
    is_admin: bool = False

    created_at: datetime = Field(default_factory=utc_now)
