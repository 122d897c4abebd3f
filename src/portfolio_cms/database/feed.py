# ABOUTME: Change notification feed built on the change log table.
# ABOUTME: Polls for new entries and dispatches them to per-table subscribers.

import logging
import threading
from collections.abc import Callable

from pydantic import BaseModel

from portfolio_cms.database.service import DatabaseService
from portfolio_cms.models import ChangeType

logger = logging.getLogger(__name__)

ALL_TABLES = "*"


class ChangeEvent(BaseModel):
    """A single insert, update or delete observed on a table."""

    table: str
    change_type: ChangeType
    row_id: str
    sequence: int


ChangeCallback = Callable[[ChangeEvent], None]


class Subscription:
    """Handle returned by ChangeFeed.subscribe; releases the callback on unsubscribe."""

    def __init__(self, feed: "ChangeFeed", table: str, callback: ChangeCallback) -> None:
        self.table = table
        self.callback = callback
        self._feed = feed
        self.active = True

    def unsubscribe(self) -> None:
        """Stop delivering events to this subscription. Safe to call twice."""
        if self.active:
            self.active = False
            self._feed._remove(self)


class ChangeFeed:
    """Delivers change log entries to subscribers.

    Entries written by any process sharing the database are picked up by
    poll(), either called directly or from the background thread started
    with start(). Only entries written after the feed was created are
    delivered.
    """

    def __init__(self, db_service: DatabaseService, poll_interval: float = 1.0) -> None:
        """Initialize the feed.

        Args:
            db_service: Database whose change log is followed.
            poll_interval: Seconds between polls on the background thread.
        """
        self._db_service = db_service
        self.poll_interval = poll_interval
        self._subscriptions: list[Subscription] = []
        self._lock = threading.Lock()
        self._poll_lock = threading.Lock()
        self._cursor = db_service.latest_change_id()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def cursor(self) -> int:
        """Sequence number of the last entry delivered."""
        return self._cursor

    def subscribe(self, table: str, callback: ChangeCallback) -> Subscription:
        """Register a callback for changes to one table, or "*" for all tables."""
        subscription = Subscription(self, table, callback)
        with self._lock:
            self._subscriptions.append(subscription)
        logger.debug("Subscribed to changes on %s", table)
        return subscription

    def subscription_count(self) -> int:
        """Return the number of active subscriptions."""
        with self._lock:
            return len(self._subscriptions)

    def poll(self) -> int:
        """Deliver every change log entry newer than the cursor.

        Returns:
            Number of entries read.
        """
        with self._poll_lock:
            entries = self._db_service.changes_since(self._cursor)
            for entry in entries:
                event = ChangeEvent(
                    table=entry.table_name,
                    change_type=entry.change_type,
                    row_id=entry.row_id,
                    sequence=entry.id or 0,
                )
                self._dispatch(event)
                self._cursor = event.sequence
            return len(entries)

    def start(self) -> None:
        """Start polling on a daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="portfolio-cms-change-feed", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop the polling thread and wait for it to finish."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.poll_interval * 2 + 1)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.poll_interval):
            try:
                self.poll()
            except Exception:
                logger.exception("Polling the change log failed")

    def _dispatch(self, event: ChangeEvent) -> None:
        with self._lock:
            targets = [
                sub
                for sub in self._subscriptions
                if sub.table in (event.table, ALL_TABLES)
            ]
        for subscription in targets:
            if not subscription.active:
                continue
            try:
                subscription.callback(event)
            except Exception:
                logger.exception("Change subscriber for %s failed", subscription.table)

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
        logger.debug("Unsubscribed from changes on %s", subscription.table)
