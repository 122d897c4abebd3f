# ABOUTME: Storage package for uploaded images.
# ABOUTME: Exports ObjectStorage and StorageError.

from portfolio_cms.storage.exceptions import StorageError
from portfolio_cms.storage.service import ObjectStorage

__all__ = ["ObjectStorage", "StorageError"]
