# ABOUTME: Exceptions raised by the snapshot store and its mutations.
# ABOUTME: Covers unresolvable row references, invalid reorders and use after close.

from portfolio_cms.errors import PortfolioCMSError


class SyncError(PortfolioCMSError):
    """Base exception for snapshot store errors."""

    pass


class RowNotFoundError(SyncError):
    """Raised when a row reference matches neither a local nor a remote row."""

    pass


class ReorderError(SyncError):
    """Raised when a timeline event cannot move further in the requested direction."""

    pass


class StoreClosedError(SyncError):
    """Raised when a closed store is asked to fetch or mutate."""

    pass
