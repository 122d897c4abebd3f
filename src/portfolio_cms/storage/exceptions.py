# ABOUTME: Exceptions raised by the object store for uploaded images.
# ABOUTME: Covers rejected files and destinations outside the bucket.

from portfolio_cms.errors import PortfolioCMSError


class StorageError(PortfolioCMSError):
    """Raised when an upload is rejected or cannot be written."""

    pass
