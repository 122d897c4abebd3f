# ABOUTME: Sync package keeping an in-memory snapshot of portfolio content current.
# ABOUTME: Exports the store, its row identifiers, mutation vocabulary and notifications.

from portfolio_cms.sync.entities import (
    LIST_ENTITIES,
    EntityKind,
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
from portfolio_cms.sync.notifications import Notification, NotificationLevel, Notifier
from portfolio_cms.sync.snapshot import PortfolioSnapshot, format_period, sort_timeline
from portfolio_cms.sync.store import PortfolioStore, StoreVariant

__all__ = [
    "LIST_ENTITIES",
    "EntityKind",
    "MoveDirection",
    "MutationOp",
    "MutationResult",
    "Notification",
    "NotificationLevel",
    "Notifier",
    "Pending",
    "Persisted",
    "PortfolioSnapshot",
    "PortfolioStore",
    "ReorderError",
    "RowId",
    "RowNotFoundError",
    "StoreClosedError",
    "StoreVariant",
    "SyncError",
    "format_period",
    "sort_timeline",
]
