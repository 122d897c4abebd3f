# ABOUTME: Row identifiers that tell unsaved rows apart from rows stored remotely.
# ABOUTME: RowId is a tagged union of Pending (local position) and Persisted (remote id).

from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Pending(BaseModel):
    """A row known only locally, addressed by its position in its snapshot list."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pending"] = "pending"
    local_index: int = Field(ge=0)

    def __str__(self) -> str:
        return f"pending:{self.local_index}"


class Persisted(BaseModel):
    """A row stored remotely, addressed by its primary key."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["persisted"] = "persisted"
    remote_id: UUID

    def __str__(self) -> str:
        return str(self.remote_id)


RowId = Annotated[Pending | Persisted, Field(discriminator="kind")]
