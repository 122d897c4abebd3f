# ABOUTME: Registry describing each editable entity kind and the mutation vocabulary.
# ABOUTME: Maps a kind to its table, form, snapshot slice, view and lookup field.

from enum import Enum

from pydantic import BaseModel
from sqlmodel import SQLModel

from portfolio_cms.forms import CertificationForm, ProjectForm, SkillForm, TimelineForm
from portfolio_cms.models import Certification, ContactMessage, Project, Skill, TimelineEvent
from portfolio_cms.sync.ids import RowId
from portfolio_cms.sync.snapshot import (
    CertificationView,
    MessageView,
    ProjectView,
    SkillView,
    TimelineView,
)


class EntityKind(str, Enum):
    """Kinds of content the admin panel edits."""

    PROFILE = "profile"
    SKILL = "skill"
    PROJECT = "project"
    CERTIFICATION = "certification"
    TIMELINE = "timeline"
    MESSAGE = "message"
    SETTING = "setting"


class MutationOp(str, Enum):
    """Operations accepted by PortfolioStore.mutate."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    REORDER = "reorder"


class MoveDirection(str, Enum):
    """Direction of a manual timeline reorder; up moves towards the top."""

    UP = "up"
    DOWN = "down"


class MutationResult(BaseModel):
    """Outcome of a mutation after its remote write."""

    ok: bool
    row_id: RowId | None = None
    error: str | None = None


class ListEntity:
    """How one list-shaped entity kind maps onto tables, forms and views."""

    def __init__(
        self,
        label: str,
        model: type[SQLModel],
        form: type[BaseModel] | None,
        slice_name: str,
        view: type[BaseModel],
        title_field: str,
    ) -> None:
        self.label = label
        self.model = model
        self.form = form
        self.slice_name = slice_name
        self.view = view
        self.title_field = title_field

    @property
    def owned(self) -> bool:
        """True when rows carry the owner's profile id."""
        return "profile_id" in self.model.model_fields


LIST_ENTITIES: dict[EntityKind, ListEntity] = {
    EntityKind.SKILL: ListEntity("Skill", Skill, SkillForm, "skills", SkillView, "name"),
    EntityKind.PROJECT: ListEntity(
        "Project", Project, ProjectForm, "projects", ProjectView, "title"
    ),
    EntityKind.CERTIFICATION: ListEntity(
        "Certification",
        Certification,
        CertificationForm,
        "certifications",
        CertificationView,
        "title",
    ),
    EntityKind.TIMELINE: ListEntity(
        "Timeline event", TimelineEvent, TimelineForm, "timeline", TimelineView, "title"
    ),
    # Messages are created by the public contact form, never by the admin.
    EntityKind.MESSAGE: ListEntity(
        "Message", ContactMessage, None, "messages", MessageView, "subject"
    ),
}
