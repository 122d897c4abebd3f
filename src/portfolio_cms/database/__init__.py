# ABOUTME: Database package for the portfolio content store.
# ABOUTME: Provides DatabaseService for table CRUD and ChangeFeed for change subscriptions.

from portfolio_cms.database.feed import ChangeEvent, ChangeFeed, Subscription
from portfolio_cms.database.service import DatabaseService

__all__ = ["ChangeEvent", "ChangeFeed", "DatabaseService", "Subscription"]
