# ABOUTME: Snapshot store holding portfolio content in memory and keeping it in sync.
# ABOUTME: Fetches all tables in parallel, refetches on change events, applies optimistic edits.

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any, TypeVar
from uuid import UUID

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from portfolio_cms.database import ChangeEvent, ChangeFeed, DatabaseService, Subscription
from portfolio_cms.forms import ProfileForm, SettingForm, validate_form
from portfolio_cms.models import (
    Achievement,
    ContactMessage,
    GitHubStats,
    MessageStatus,
    SiteSetting,
    SocialLink,
    TimelineEvent,
    UserProfile,
)
from portfolio_cms.models.base import utc_now
from portfolio_cms.sync.debounce import Debouncer
from portfolio_cms.sync.defaults import (
    DEFAULT_SETTINGS,
    default_certifications,
    default_profile,
    default_projects,
    default_skills,
    default_snapshot,
    default_timeline,
)
from portfolio_cms.sync.entities import (
    LIST_ENTITIES,
    EntityKind,
    ListEntity,
    MoveDirection,
    MutationOp,
    MutationResult,
)
from portfolio_cms.sync.exceptions import (
    ReorderError,
    RowNotFoundError,
    StoreClosedError,
    SyncError,
)
from portfolio_cms.sync.ids import Pending, Persisted, RowId
from portfolio_cms.sync.notifications import Notifier
from portfolio_cms.sync.snapshot import (
    AchievementView,
    GitHubStatsView,
    MessageView,
    PortfolioSnapshot,
    ProfileView,
    sort_timeline,
)

logger = logging.getLogger(__name__)

READ_ERRORS = (SQLAlchemyError, ValidationError)

# Longest a steady stream of changes can hold back a refetch, in debounce periods.
REFETCH_MAX_WAIT_FACTOR = 5

SnapshotListener = Callable[[PortfolioSnapshot], None]


class StoreVariant(str, Enum):
    """Which slices a store loads: the public site or the admin panel."""

    PUBLIC = "public"
    ADMIN = "admin"


PUBLIC_TABLES = (
    "user_profile",
    "social_links",
    "skills",
    "projects",
    "certifications",
    "timeline_events",
    "site_settings",
    "achievements",
    "github_stats",
)
ADMIN_TABLES = PUBLIC_TABLES + ("contact_messages",)

_LIST_DEFAULTS: dict[str, Callable[[], list[Any]]] = {
    "skills": default_skills,
    "projects": default_projects,
    "certifications": default_certifications,
    "timeline": default_timeline,
    "messages": list,
}


class PortfolioStore:
    """In-memory snapshot of portfolio content with optimistic mutations.

    Lifecycle: construct, open() to load and subscribe to changes, close()
    to release subscriptions. Also usable as a context manager. Presentation
    code reads `snapshot`; every change goes through the mutation methods.
    """

    def __init__(
        self,
        db_service: DatabaseService,
        feed: ChangeFeed | None = None,
        notifier: Notifier | None = None,
        owner_id: UUID | None = None,
        variant: StoreVariant = StoreVariant.PUBLIC,
        debounce_seconds: float = 1.0,
    ) -> None:
        """Initialize the store.

        Args:
            db_service: Database holding the content tables.
            feed: Change feed to subscribe to on open(). None disables live refresh.
            notifier: Receives user-visible success and error notifications.
            owner_id: Profile id new rows are assigned to. None uses the first profile.
            variant: PUBLIC for the site, ADMIN to also load messages and report read errors.
            debounce_seconds: Quiet period that coalesces change events into one refetch.
                A continuous burst still refetches within REFETCH_MAX_WAIT_FACTOR periods.
        """
        self._db_service = db_service
        self._feed = feed
        self.notifier = notifier if notifier is not None else Notifier()
        self.owner_id = owner_id
        self.variant = variant
        self._resolved_owner: UUID | None = None
        self._snapshot = default_snapshot()
        self._lock = threading.RLock()
        self._listeners: list[SnapshotListener] = []
        self._subscriptions: list[Subscription] = []
        self._debouncer = Debouncer(
            debounce_seconds, self._refetch, max_wait=debounce_seconds * REFETCH_MAX_WAIT_FACTOR
        )
        self._opened = False
        self._closed = False

    # Lifecycle

    def __enter__(self) -> "PortfolioStore":
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def snapshot(self) -> PortfolioSnapshot:
        """The current content; replaced wholesale on every change."""
        with self._lock:
            return self._snapshot

    @property
    def tables(self) -> tuple[str, ...]:
        """Tables this store subscribes to."""
        return ADMIN_TABLES if self.variant is StoreVariant.ADMIN else PUBLIC_TABLES

    @property
    def closed(self) -> bool:
        return self._closed

    def open(self) -> "PortfolioStore":
        """Load the snapshot and subscribe to changes on every table this store shows."""
        self._check_open()
        if self._opened:
            return self
        self.fetch_all()
        if self._feed is not None:
            for table in self.tables:
                self._subscriptions.append(self._feed.subscribe(table, self._on_change))
        self._opened = True
        return self

    def close(self) -> None:
        """Cancel any pending refetch and release every subscription."""
        self._closed = True
        self._debouncer.cancel()
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions.clear()

    def add_listener(self, listener: SnapshotListener) -> None:
        """Call listener with every new snapshot."""
        with self._lock:
            self._listeners.append(listener)

    def flush_pending(self) -> bool:
        """Run a debounced refetch now, if one is scheduled."""
        return self._debouncer.flush()

    @property
    def refetch_pending(self) -> bool:
        return self._debouncer.pending

    # Fetching

    def fetch_all(self) -> PortfolioSnapshot:
        """Reload every slice in parallel.

        A slice whose read fails keeps its previous value; a slice whose table
        is empty falls back to its default. The load always completes.

        Returns:
            The new snapshot.
        """
        self._check_open()
        owner_id = self._resolve_owner()
        loaders = self._loaders(owner_id)

        with ThreadPoolExecutor(
            max_workers=len(loaders), thread_name_prefix="portfolio-fetch"
        ) as pool:
            futures = {name: pool.submit(loader) for name, loader in loaders.items()}

        updates: dict[str, Any] = {}
        failed: list[str] = []
        for name, future in futures.items():
            try:
                updates[name] = future.result()
            except READ_ERRORS as e:
                logger.warning("Reading %s failed, keeping previous content: %s", name, e)
                failed.append(name)

        updates["loaded_at"] = utc_now()
        with self._lock:
            self._snapshot = self._snapshot.model_copy(update=updates)
            snapshot = self._snapshot

        if failed and self.variant is StoreVariant.ADMIN:
            self.notifier.error(
                "Failed to load portfolio data",
                f"Could not load {', '.join(failed)}; showing the last known content.",
            )
        self._emit(snapshot)
        return snapshot

    def _loaders(self, owner_id: UUID | None) -> dict[str, Callable[[], Any]]:
        loaders: dict[str, Callable[[], Any]] = {
            "profile": lambda: self._load_profile(owner_id),
            "skills": lambda: self._load_list(LIST_ENTITIES[EntityKind.SKILL], owner_id),
            "projects": lambda: self._load_list(LIST_ENTITIES[EntityKind.PROJECT], owner_id),
            "certifications": lambda: self._load_list(
                LIST_ENTITIES[EntityKind.CERTIFICATION], owner_id
            ),
            "timeline": lambda: self._load_list(LIST_ENTITIES[EntityKind.TIMELINE], owner_id),
            "settings": self._load_settings,
            "achievements": self._load_achievements,
            "github_stats": self._load_github_stats,
        }
        if self.variant is StoreVariant.ADMIN:
            loaders["messages"] = lambda: self._load_list(
                LIST_ENTITIES[EntityKind.MESSAGE], None
            )
        return loaders

    def _resolve_owner(self) -> UUID | None:
        if self.owner_id is not None:
            return self.owner_id
        try:
            profiles = self._db_service.list_rows(
                UserProfile, order_by=UserProfile.created_at, limit=1
            )
        except SQLAlchemyError as e:
            logger.warning("Looking up the profile owner failed: %s", e)
            return self._resolved_owner
        if profiles:
            self._resolved_owner = profiles[0].id
        return self._resolved_owner

    def _owner(self) -> UUID | None:
        return self.owner_id if self.owner_id is not None else self._resolved_owner

    def _load_profile(self, owner_id: UUID | None) -> ProfileView:
        default = default_profile()
        row = self._db_service.get_row(UserProfile, owner_id) if owner_id else None
        links = (
            self._db_service.list_rows(SocialLink, SocialLink.profile_id == owner_id)
            if owner_id
            else []
        )
        social = dict(default.social)
        social.update({link.platform: link.url for link in links})
        if row is None:
            return default.model_copy(update={"social": social})
        return ProfileView(
            name=row.name or default.name,
            title=row.title or default.title,
            email=row.email or default.email,
            phone=row.phone or default.phone,
            location=row.location or default.location,
            bio=row.bio or default.bio,
            profile_image=row.profile_image or default.profile_image,
            social=social,
        )

    def _load_list(self, entity: ListEntity, owner_id: UUID | None) -> list[Any]:
        criteria = []
        if owner_id is not None and entity.owned:
            criteria.append(entity.model.profile_id == owner_id)  # type: ignore[attr-defined]
        if entity.model is ContactMessage:
            order_by = ContactMessage.created_at.desc()  # type: ignore[attr-defined]
        else:
            order_by = entity.model.created_at  # type: ignore[attr-defined]
        rows = self._db_service.list_rows(entity.model, *criteria, order_by=order_by)
        if not rows:
            return _LIST_DEFAULTS[entity.slice_name]()
        views = [entity.view.from_row(row) for row in rows]  # type: ignore[attr-defined]
        if entity.model is TimelineEvent:
            views = sort_timeline(views)
        return views

    def _load_settings(self) -> dict[str, Any]:
        settings = dict(DEFAULT_SETTINGS)
        for row in self._db_service.list_rows(SiteSetting, order_by=SiteSetting.key):
            settings[row.key] = row.value
        return settings

    def _load_achievements(self) -> list[AchievementView]:
        rows = self._db_service.list_rows(Achievement, order_by=Achievement.created_at)
        return [AchievementView.from_row(row) for row in rows]

    def _load_github_stats(self) -> GitHubStatsView | None:
        rows = self._db_service.list_rows(
            GitHubStats,
            order_by=GitHubStats.last_updated.desc(),  # type: ignore[attr-defined]
            limit=1,
        )
        return GitHubStatsView.from_row(rows[0]) if rows else None

    # Change subscription

    def _on_change(self, event: ChangeEvent) -> None:
        if self._closed:
            return
        logger.debug("%s on %s, scheduling refetch", event.change_type.value, event.table)
        self._debouncer.trigger()

    def _refetch(self) -> None:
        if self._closed:
            return
        self.fetch_all()

    # Mutations

    def mutate(
        self,
        kind: EntityKind,
        op: MutationOp,
        payload: dict[str, Any] | None = None,
        row_id: RowId | None = None,
    ) -> MutationResult:
        """Dispatch a mutation by entity kind and operation.

        Raises:
            SyncError: If the operation is not supported for the kind or row_id is missing.
        """
        payload = payload or {}
        if kind is EntityKind.PROFILE and op in (MutationOp.CREATE, MutationOp.UPDATE):
            return self.save_profile(payload)
        if kind is EntityKind.SETTING:
            if op in (MutationOp.CREATE, MutationOp.UPDATE):
                return self.set_setting(
                    payload.get("key", ""), payload.get("value"), payload.get("description")
                )
            if op is MutationOp.DELETE:
                return self.delete_setting(payload.get("key", ""))
        if kind in LIST_ENTITIES:
            if op is MutationOp.CREATE:
                return self.create(kind, payload)
            if row_id is None:
                raise SyncError(f"{op.value} of a {kind.value} needs a row id")
            if op is MutationOp.DELETE:
                return self.delete(kind, row_id)
            if op is MutationOp.UPDATE and kind is EntityKind.MESSAGE:
                status = _parse_enum(MessageStatus, payload, "status")
                return self.set_message_status(row_id, status)
            if op is MutationOp.UPDATE:
                return self.update(kind, row_id, payload)
            if op is MutationOp.REORDER and kind is EntityKind.TIMELINE:
                direction = _parse_enum(MoveDirection, payload, "direction")
                return self.reorder_timeline(row_id, direction)
        raise SyncError(f"{op.value} is not supported for {kind.value}")

    def create(self, kind: EntityKind, payload: dict[str, Any]) -> MutationResult:
        """Validate, add locally, insert remotely, then refetch for the stored id.

        Raises:
            FormValidationError: If the payload is invalid. Nothing is written.
        """
        entity = self._editable(kind)
        form = validate_form(entity.form, payload)  # type: ignore[arg-type]
        values = form.model_dump()
        self._check_open()

        items = list(getattr(self.snapshot, entity.slice_name))
        items.append(entity.view(id=Pending(local_index=len(items)), **values))
        self._replace_slice(entity.slice_name, items)

        owner_id = self._owner()
        if owner_id is not None and entity.owned:
            values["profile_id"] = owner_id
        try:
            row = self._db_service.insert_row(entity.model(**values))
        except SQLAlchemyError as e:
            return self._write_failed(entity.label, "add", e)

        name = getattr(form, entity.title_field)
        self.notifier.success(f"{entity.label} added", f"Saved '{name}'.")
        self.fetch_all()
        remote_id = row.id  # type: ignore[attr-defined]
        return MutationResult(ok=True, row_id=Persisted(remote_id=remote_id))

    def update(self, kind: EntityKind, row_id: RowId, payload: dict[str, Any]) -> MutationResult:
        """Merge payload over the current row, validate, update locally, then remotely.

        Raises:
            RowNotFoundError: If row_id matches no local or remote row.
            FormValidationError: If the merged values are invalid. Nothing is written.
        """
        entity = self._editable(kind)
        index, current = self._local_item(entity, row_id)
        merged = {**current.model_dump(exclude={"id"}), **payload}
        form = validate_form(entity.form, merged)  # type: ignore[arg-type]
        values = form.model_dump()
        self._check_open()

        try:
            remote_id = self._remote_id(entity, row_id, current)
        except SQLAlchemyError as e:
            return self._write_failed(entity.label, "update", e)

        if index is not None:
            items = list(getattr(self.snapshot, entity.slice_name))
            items[index] = entity.view(id=Persisted(remote_id=remote_id), **values)
            self._replace_slice(entity.slice_name, items)

        try:
            row = self._db_service.update_row(entity.model, remote_id, values)
        except SQLAlchemyError as e:
            return self._write_failed(entity.label, "update", e)
        if row is None:
            return self._write_failed(entity.label, "update", "it no longer exists")

        name = getattr(form, entity.title_field)
        self.notifier.success(f"{entity.label} updated", f"Saved '{name}'.")
        return MutationResult(ok=True, row_id=Persisted(remote_id=remote_id))

    def delete(self, kind: EntityKind, row_id: RowId) -> MutationResult:
        """Remove locally, then delete remotely.

        Raises:
            RowNotFoundError: If row_id matches no local or remote row.
        """
        entity = LIST_ENTITIES[kind]
        index, current = self._local_item(entity, row_id)
        self._check_open()

        try:
            remote_id = self._remote_id(entity, row_id, current)
        except SQLAlchemyError as e:
            return self._write_failed(entity.label, "delete", e)

        if index is not None:
            items = list(getattr(self.snapshot, entity.slice_name))
            del items[index]
            self._replace_slice(entity.slice_name, items)

        try:
            deleted = self._db_service.delete_row(entity.model, remote_id)
        except SQLAlchemyError as e:
            return self._write_failed(entity.label, "delete", e)

        if deleted:
            name = getattr(current, entity.title_field)
            self.notifier.success(f"{entity.label} deleted", f"Removed '{name}'.")
        else:
            self.notifier.info(f"{entity.label} already deleted", "Nothing left to remove.")
        return MutationResult(ok=True, row_id=Persisted(remote_id=remote_id))

    def reorder_timeline(self, row_id: RowId, direction: MoveDirection) -> MutationResult:
        """Swap a timeline event's order_index with its neighbour in display order.

        Tied indices are renumbered to display positions first, so the swap
        always moves the event by exactly one place.

        Raises:
            RowNotFoundError: If row_id matches no local row.
            ReorderError: If the event is already first (up) or last (down).
        """
        entity = LIST_ENTITIES[EntityKind.TIMELINE]
        _, current = self._local_item(entity, row_id, remote_fallback=False)
        self._check_open()

        ordered = sort_timeline(list(self.snapshot.timeline))
        position = next(i for i, event in enumerate(ordered) if event.id == current.id)
        neighbour = position - 1 if direction is MoveDirection.UP else position + 1
        if not 0 <= neighbour < len(ordered):
            edge = "first" if direction is MoveDirection.UP else "last"
            raise ReorderError(f"'{current.title}' is already {edge}")

        indices = [event.order_index for event in ordered]
        if len(set(indices)) != len(indices):
            indices = list(range(len(ordered)))
        indices[position], indices[neighbour] = indices[neighbour], indices[position]

        changed = [
            (event, new_index)
            for event, new_index in zip(ordered, indices, strict=True)
            if event.order_index != new_index
        ]
        try:
            targets = [
                (self._remote_id(entity, event.id, event), new_index)
                for event, new_index in changed
            ]
        except SQLAlchemyError as e:
            return self._write_failed(entity.label, "reorder", e)

        reordered = [
            event.model_copy(update={"order_index": new_index})
            for event, new_index in zip(ordered, indices, strict=True)
        ]
        self._replace_slice(entity.slice_name, sort_timeline(reordered))

        try:
            for remote_id, new_index in targets:
                self._db_service.update_row(TimelineEvent, remote_id, {"order_index": new_index})
        except SQLAlchemyError as e:
            return self._write_failed(entity.label, "reorder", e)
        return MutationResult(ok=True, row_id=current.id)

    def save_profile(self, payload: dict[str, Any]) -> MutationResult:
        """Merge payload over the current profile, validate and upsert it with its social links.

        The first save creates the profile; it becomes the owner of new rows.

        Raises:
            FormValidationError: If the merged values are invalid. Nothing is written.
        """
        current = self.snapshot.profile
        merged = {**current.model_dump(), **payload}
        merged["social"] = {**current.social, **payload.get("social", {})}
        form = validate_form(ProfileForm, merged)
        self._check_open()

        self._replace_slice("profile", ProfileView(**form.model_dump()))

        values = form.model_dump(exclude={"social"})
        owner_id = self._owner()
        try:
            existing = (
                self._db_service.get_row(UserProfile, owner_id) if owner_id is not None else None
            )
            if existing is not None:
                self._db_service.update_row(UserProfile, existing.id, values)
            elif owner_id is not None:
                self._db_service.insert_row(UserProfile(id=owner_id, **values))
            else:
                owner_id = self._db_service.insert_row(UserProfile(**values)).id
                self._resolved_owner = owner_id
            self._save_social_links(owner_id, form.social)
        except SQLAlchemyError as e:
            return self._write_failed("Profile", "save", e)

        self.notifier.success("Profile updated", "Your profile has been saved.")
        return MutationResult(ok=True, row_id=Persisted(remote_id=owner_id))

    def _save_social_links(self, owner_id: UUID, links: dict[str, str]) -> None:
        for platform, url in links.items():
            if url:
                self._db_service.upsert_row(
                    SocialLink, {"profile_id": owner_id, "platform": platform}, {"url": url}
                )
                continue
            existing = self._db_service.find_row(
                SocialLink,
                SocialLink.profile_id == owner_id,
                SocialLink.platform == platform,
            )
            if existing is not None:
                self._db_service.delete_row(SocialLink, existing.id)

    def set_message_status(self, row_id: RowId, status: MessageStatus) -> MutationResult:
        """Mark a contact message unread, read, replied or archived.

        Raises:
            RowNotFoundError: If row_id matches no local or remote message.
        """
        entity = LIST_ENTITIES[EntityKind.MESSAGE]
        index, current = self._local_item(entity, row_id)
        self._check_open()

        try:
            remote_id = self._remote_id(entity, row_id, current)
        except SQLAlchemyError as e:
            return self._write_failed(entity.label, "update", e)

        if index is not None:
            items = list(self.snapshot.messages)
            items[index] = current.model_copy(update={"status": status})
            self._replace_slice("messages", items)

        try:
            row = self._db_service.update_row(ContactMessage, remote_id, {"status": status})
        except SQLAlchemyError as e:
            return self._write_failed(entity.label, "update", e)
        if row is None:
            return self._write_failed(entity.label, "update", "it no longer exists")

        self.notifier.success("Message updated", f"Message marked as {status.value}.")
        return MutationResult(ok=True, row_id=Persisted(remote_id=remote_id))

    def set_setting(
        self, key: str, value: Any, description: str | None = None
    ) -> MutationResult:
        """Create or replace one site setting.

        Raises:
            FormValidationError: If the key is not a valid setting name.
        """
        form = validate_form(SettingForm, {"key": key, "value": value, "description": description})
        self._check_open()

        settings = dict(self.snapshot.settings)
        settings[form.key] = form.value
        self._replace_slice("settings", settings)

        values: dict[str, Any] = {"value": form.value}
        if form.description is not None:
            values["description"] = form.description
        try:
            row = self._db_service.upsert_row(SiteSetting, {"key": form.key}, values)
        except SQLAlchemyError as e:
            return self._write_failed("Setting", "save", e)

        self.notifier.success("Setting saved", f"'{form.key}' updated.")
        return MutationResult(ok=True, row_id=Persisted(remote_id=row.id))

    def delete_setting(self, key: str) -> MutationResult:
        """Remove a site setting; keys with a default fall back to it."""
        self._check_open()
        settings = dict(self.snapshot.settings)
        settings.pop(key, None)
        if key in DEFAULT_SETTINGS:
            settings[key] = DEFAULT_SETTINGS[key]
        self._replace_slice("settings", settings)

        try:
            row = self._db_service.find_row(SiteSetting, SiteSetting.key == key)
            if row is not None:
                self._db_service.delete_row(SiteSetting, row.id)
        except SQLAlchemyError as e:
            return self._write_failed("Setting", "delete", e)

        if row is None:
            return MutationResult(ok=True)
        self.notifier.success("Setting removed", f"'{key}' deleted.")
        return MutationResult(ok=True, row_id=Persisted(remote_id=row.id))

    # Helpers

    def _editable(self, kind: EntityKind) -> ListEntity:
        entity = LIST_ENTITIES.get(kind)
        if entity is None or entity.form is None:
            raise SyncError(f"{kind.value} rows cannot be created or edited here")
        return entity

    def _local_item(
        self, entity: ListEntity, row_id: RowId, remote_fallback: bool = True
    ) -> tuple[int | None, Any]:
        """Find the snapshot row a reference points at.

        Pending references index into the snapshot list. Persisted references
        are looked up by id, falling back to reading the remote row when it is
        not in the snapshot.

        Returns:
            (index in the snapshot list or None, view of the row)
        """
        items = getattr(self.snapshot, entity.slice_name)
        if isinstance(row_id, Pending):
            if row_id.local_index >= len(items):
                raise RowNotFoundError(
                    f"No {entity.label.lower()} at position {row_id.local_index + 1}"
                )
            return row_id.local_index, items[row_id.local_index]

        for index, item in enumerate(items):
            if item.id == row_id:
                return index, item
        if remote_fallback:
            try:
                row = self._db_service.get_row(entity.model, row_id.remote_id)
            except SQLAlchemyError as e:
                logger.warning("Reading %s %s failed: %s", entity.label.lower(), row_id, e)
                row = None
            if row is not None:
                return None, entity.view.from_row(row)  # type: ignore[attr-defined]
        raise RowNotFoundError(f"No {entity.label.lower()} with id {row_id}")

    def _remote_id(self, entity: ListEntity, row_id: RowId, current: BaseModel) -> UUID:
        """Resolve a reference to a stored primary key.

        A Pending row may already be stored under a different local view (e.g.
        after another session saved it); it is looked up by its title-like field
        and owner.
        """
        if isinstance(row_id, Persisted):
            return row_id.remote_id
        if isinstance(current.id, Persisted):  # type: ignore[attr-defined]
            return current.id.remote_id  # type: ignore[attr-defined]

        title = getattr(current, entity.title_field)
        criteria = [getattr(entity.model, entity.title_field) == title]
        owner_id = self._owner()
        if owner_id is not None and entity.owned:
            criteria.append(entity.model.profile_id == owner_id)  # type: ignore[attr-defined]
        row = self._db_service.find_row(entity.model, *criteria)
        if row is None:
            raise RowNotFoundError(f"{entity.label} '{title}' has not been saved yet")
        return row.id  # type: ignore[attr-defined]

    def _replace_slice(self, name: str, value: Any) -> None:
        if isinstance(value, list):
            value = [
                item.model_copy(update={"id": Pending(local_index=i)})
                if isinstance(item.id, Pending) and item.id.local_index != i
                else item
                for i, item in enumerate(value)
            ]
        with self._lock:
            self._snapshot = self._snapshot.model_copy(update={name: value})
            snapshot = self._snapshot
        self._emit(snapshot)

    def _write_failed(self, label: str, action: str, error: Exception | str) -> MutationResult:
        message = str(error).splitlines()[0] if str(error) else type(error).__name__
        logger.error("Could not %s %s: %s", action, label.lower(), message)
        self.notifier.error(f"Could not {action} {label.lower()}", message)
        # Local state stays as edited until the next fetch reconciles it.
        if not self._closed:
            self._debouncer.trigger()
        return MutationResult(ok=False, error=message)

    def _emit(self, snapshot: PortfolioSnapshot) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(snapshot)

    def _check_open(self) -> None:
        if self._closed:
            raise StoreClosedError("The store has been closed")


EnumT = TypeVar("EnumT", bound=Enum)


def _parse_enum(enum_cls: type[EnumT], payload: dict[str, Any], key: str) -> EnumT:
    try:
        return enum_cls(payload.get(key))
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise SyncError(f"{key} must be one of: {choices}") from None
