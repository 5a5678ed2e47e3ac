"""Data-access layer the submission flows read and write through.

Every flow talks to storage via table names and plain dict records so the
flows stay independent of the ORM. Writes outside a ``transaction()`` block
commit immediately; writes inside one commit together or not at all.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Sequence

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.datastructures import FileStorage

from hackhub.errors import AuthError, ConstraintError, DataAccessError
from hackhub.extensions import db
from hackhub.models import Application, Notification, Profile, TeamProblemSubmission
from hackhub.services.uploads import save_screenshot

TABLES = {
    Profile.__tablename__: Profile,
    TeamProblemSubmission.__tablename__: TeamProblemSubmission,
    Application.__tablename__: Application,
    Notification.__tablename__: Notification,
}

Record = Mapping[str, Any]


class DataAccess:
    """Table-oriented access to the relational store, auth and file storage."""

    def __init__(self, session=None) -> None:
        self._session = session if session is not None else db.session
        self._depth = 0

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    def _model(self, table: str):
        try:
            return TABLES[table]
        except KeyError:
            raise DataAccessError(f'Unknown table "{table}"') from None

    def _query(self, table: str, filters: Record | None):
        model = self._model(table)
        query = self._session.query(model)
        for column, value in (filters or {}).items():
            if not hasattr(model, column):
                raise DataAccessError(f'Unknown column "{column}" on {table}')
            query = query.filter(getattr(model, column) == value)
        return query

    def _flush(self, table: str) -> None:
        try:
            self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            current_app.logger.warning(f"Constraint violation writing {table}: {exc.orig}")
            raise ConstraintError(f"Write to {table} violates a constraint") from exc
        except SQLAlchemyError as exc:
            self._session.rollback()
            current_app.logger.error(f"Failed to write {table}: {exc}")
            raise DataAccessError(f"Failed to write {table}") from exc
        if not self.in_transaction:
            self._commit(table)

    def _commit(self, table: str = 'transaction') -> None:
        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            current_app.logger.warning(f"Constraint violation committing {table}: {exc.orig}")
            raise ConstraintError(f"Write to {table} violates a constraint") from exc
        except SQLAlchemyError as exc:
            self._session.rollback()
            current_app.logger.error(f"Failed to commit {table}: {exc}")
            raise DataAccessError(f"Failed to write {table}") from exc

    @contextmanager
    def transaction(self) -> Iterator["DataAccess"]:
        """Group writes so they commit together; any exception rolls all of them back."""
        self._depth += 1
        try:
            yield self
        except Exception:
            self._depth -= 1
            if self._depth == 0:
                self._session.rollback()
            raise
        self._depth -= 1
        if self._depth == 0:
            self._commit()

    def sign_in(self, email: str, password: str) -> Profile:
        """Verify credentials against the profiles table."""
        profile = (
            self._session.query(Profile)
            .filter(func.lower(Profile.email) == email.lower())
            .first()
        )
        if profile is None or not profile.check_password(password):
            raise AuthError("Invalid login credentials")
        return profile

    def select(self, table: str, filters: Record | None = None, *, single: bool = False):
        """Return matching rows, or the first match (or None) when ``single``."""
        try:
            query = self._query(table, filters)
            return query.first() if single else query.all()
        except SQLAlchemyError as exc:
            current_app.logger.error(f"Failed to read {table}: {exc}")
            raise DataAccessError(f"Failed to read {table}") from exc

    def insert(self, table: str, records: Record | Sequence[Record]):
        """Insert one record (returns the row) or a list of records (returns rows)."""
        model = self._model(table)
        many = not isinstance(records, Mapping)
        items = list(records) if many else [records]
        try:
            rows = [model(**dict(item)) for item in items]
        except (TypeError, ValueError) as exc:
            raise ConstraintError(f"Invalid {table} record: {exc}") from exc
        self._session.add_all(rows)
        self._flush(table)
        return rows if many else rows[0]

    def update(self, table: str, patch: Record, filters: Record) -> int:
        """Apply ``patch`` to every matching row and return how many changed."""
        if not filters:
            raise DataAccessError(f"Refusing unfiltered update of {table}")
        model = self._model(table)
        unknown = [column for column in patch if not hasattr(model, column)]
        if unknown:
            raise DataAccessError(f'Unknown column "{unknown[0]}" on {table}')
        rows = self.select(table, filters)
        try:
            for row in rows:
                for column, value in patch.items():
                    setattr(row, column, value)
        except ValueError as exc:
            self._session.rollback()
            raise ConstraintError(str(exc)) from exc
        self._flush(table)
        return len(rows)

    def upload_file(self, file: FileStorage | None) -> str:
        """Store an uploaded file and return its public URL."""
        return save_screenshot(file)


__all__ = ['DataAccess', 'TABLES']
