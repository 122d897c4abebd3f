# ABOUTME: Database service for managing connections and row-level CRUD on content tables.
# ABOUTME: Every write also appends a change log entry that feeds change subscriptions.

import logging
from collections.abc import Generator, Sequence
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar
from uuid import UUID

from sqlmodel import Session, SQLModel, create_engine, func, select

from portfolio_cms.models import ChangeLogEntry, ChangeType
from portfolio_cms.models.base import utc_now

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", bound=SQLModel)


class DatabaseService:
    """Service for managing database connections and operations."""

    DEFAULT_DB_PATH = Path.home() / ".portfolio-cms" / "data.db"

    def __init__(self, db_path: Path | None = None, database_url: str | None = None) -> None:
        """Initialize the database service.

        Args:
            db_path: Path to the SQLite database file. Defaults to ~/.portfolio-cms/data.db
            database_url: Optional SQLAlchemy URL. Takes precedence over db_path.
        """
        self.db_path = db_path if db_path is not None else self.DEFAULT_DB_PATH
        self.database_url = database_url or f"sqlite:///{self.db_path}"
        connect_args: dict[str, Any] = {}
        if self.database_url.startswith("sqlite"):
            # Refetches run on timer and pool threads.
            connect_args["check_same_thread"] = False
        self._engine = create_engine(self.database_url, echo=False, connect_args=connect_args)

    def init_db(self) -> None:
        """Initialize the database by creating tables and parent directories."""
        if self.database_url == f"sqlite:///{self.db_path}":
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        SQLModel.metadata.create_all(self._engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session as a context manager.

        Yields:
            SQLModel Session for database operations.
        """
        with Session(self._engine) as session:
            yield session

    def list_rows(
        self,
        model: type[RowT],
        *criteria: Any,
        order_by: Any | Sequence[Any] | None = None,
        limit: int | None = None,
    ) -> list[RowT]:
        """Retrieve rows of a table.

        Args:
            model: The table model to query.
            *criteria: SQL expressions combined with AND.
            order_by: Column expression or list of expressions to sort by.
            limit: Maximum number of rows to return. None for no limit.

        Returns:
            List of matching rows.
        """
        with self.get_session() as session:
            statement = select(model)
            if criteria:
                statement = statement.where(*criteria)
            if order_by is not None:
                if isinstance(order_by, Sequence):
                    statement = statement.order_by(*order_by)
                else:
                    statement = statement.order_by(order_by)
            if limit is not None:
                statement = statement.limit(limit)
            results = session.exec(statement)
            return list(results.all())

    def get_row(self, model: type[RowT], row_id: UUID) -> RowT | None:
        """Retrieve a row by primary key.

        Returns:
            The row if found, None otherwise.
        """
        with self.get_session() as session:
            return session.get(model, row_id)

    def find_row(self, model: type[RowT], *criteria: Any) -> RowT | None:
        """Retrieve the first row matching all criteria.

        Returns:
            The row if found, None otherwise.
        """
        with self.get_session() as session:
            statement = select(model).where(*criteria)
            return session.exec(statement).first()

    def count_rows(self, model: type[SQLModel], *criteria: Any) -> int:
        """Count rows of a table, optionally filtered."""
        with self.get_session() as session:
            statement = select(func.count()).select_from(model)
            if criteria:
                statement = statement.where(*criteria)
            return session.exec(statement).one()

    def insert_row(self, row: RowT) -> RowT:
        """Insert a new row.

        Args:
            row: The row to insert. Its id is assigned on construction.

        Returns:
            The saved row, refreshed from the database.
        """
        with self.get_session() as session:
            session.add(row)
            row_id = row.id  # type: ignore[attr-defined]
            self._record_change(session, type(row), ChangeType.INSERT, row_id)
            session.commit()
            session.refresh(row)
            return row

    def update_row(
        self, model: type[RowT], row_id: UUID, values: dict[str, Any]
    ) -> RowT | None:
        """Apply column values to an existing row.

        Stamps updated_at when the table has one.

        Args:
            model: The table model.
            row_id: Primary key of the row.
            values: Column name to new value.

        Returns:
            The updated row, or None if no row has that id.
        """
        with self.get_session() as session:
            row = session.get(model, row_id)
            if row is None:
                return None
            for key, value in values.items():
                setattr(row, key, value)
            if "updated_at" in model.model_fields:
                row.updated_at = utc_now()  # type: ignore[attr-defined]
            session.add(row)
            self._record_change(session, model, ChangeType.UPDATE, row_id)
            session.commit()
            session.refresh(row)
            return row

    def delete_row(self, model: type[SQLModel], row_id: UUID) -> bool:
        """Delete a row by primary key.

        Returns:
            True if a row was deleted, False if none had that id.
        """
        with self.get_session() as session:
            row = session.get(model, row_id)
            if row is None:
                return False
            session.delete(row)
            self._record_change(session, model, ChangeType.DELETE, row_id)
            session.commit()
            return True

    def upsert_row(
        self, model: type[RowT], match: dict[str, Any], values: dict[str, Any]
    ) -> RowT:
        """Update the row matching all match columns, or insert it.

        Args:
            model: The table model.
            match: Column name to value identifying the row (e.g. {"key": "site_name"}).
            values: Column values to write.

        Returns:
            The inserted or updated row.
        """
        criteria = [getattr(model, column) == value for column, value in match.items()]
        existing = self.find_row(model, *criteria)
        if existing is None:
            return self.insert_row(model(**match, **values))
        updated = self.update_row(model, existing.id, values)  # type: ignore[attr-defined]
        if updated is None:
            # Deleted between the lookup and the update.
            return self.insert_row(model(**match, **values))
        return updated

    def latest_change_id(self) -> int:
        """Return the sequence number of the newest change log entry, or 0."""
        with self.get_session() as session:
            statement = select(func.max(ChangeLogEntry.id))
            latest = session.exec(statement).one()
            return latest or 0

    def changes_since(self, change_id: int, limit: int = 500) -> list[ChangeLogEntry]:
        """Retrieve change log entries newer than a sequence number, oldest first."""
        with self.get_session() as session:
            statement = (
                select(ChangeLogEntry)
                .where(ChangeLogEntry.id > change_id)  # type: ignore[operator]
                .order_by(ChangeLogEntry.id)  # type: ignore[arg-type]
                .limit(limit)
            )
            return list(session.exec(statement).all())

    def prune_change_log(self, before: datetime) -> int:
        """Delete change log entries created before a given time.

        The newest entry is always kept, so sequence numbers keep growing even on
        databases whose change_log table predates AUTOINCREMENT.

        Returns:
            Number of entries deleted.
        """
        latest = self.latest_change_id()
        with self.get_session() as session:
            statement = select(ChangeLogEntry).where(
                ChangeLogEntry.created_at < before,
                ChangeLogEntry.id != latest,  # type: ignore[arg-type]
            )
            entries = list(session.exec(statement).all())
            for entry in entries:
                session.delete(entry)
            session.commit()
        logger.info("Pruned %d change log entries", len(entries))
        return len(entries)

    def _record_change(
        self,
        session: Session,
        model: type[SQLModel],
        change_type: ChangeType,
        row_id: Any,
    ) -> None:
        session.add(
            ChangeLogEntry(
                table_name=model.__tablename__,  # type: ignore[arg-type]
                change_type=change_type,
                row_id=str(row_id),
            )
        )
