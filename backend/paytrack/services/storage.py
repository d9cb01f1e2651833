# Overview: Persistence gateway; every database round-trip in the app goes through here.

"""
Persistence Gateway

Wraps the Flask-SQLAlchemy session so callers never see SQLAlchemy
exceptions: connectivity loss, constraint violations and malformed
statements all surface as StorageError after the session is rolled back.

The engine's connection pool is the only shared resource; sessions are
scoped to the app context of the calling thread.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import text
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..validation import StorageError, is_storable_id


def _driver_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class Storage:
    def __init__(self, database: SQLAlchemy):
        self._db = database

    @property
    def session(self) -> Session:
        return self._db.session

    def execute(self, statement: Any, parameters: dict | None = None) -> list[dict] | int:
        """
        Run one statement and commit.

        Plain SQL strings are wrapped in text() and bound with :named
        parameters. Returns the rows as dicts for statements that produce
        rows, otherwise the affected-row count.
        """
        if isinstance(statement, str):
            statement = text(statement)
        try:
            result = self.session.execute(statement, parameters or {})
            # ORM selects come back as non-cursor results, which always carry rows
            if not isinstance(result, CursorResult) or result.returns_rows:
                rows = [dict(row) for row in result.mappings().all()]
                self.session.commit()
                return rows
            count = result.rowcount
            self.session.commit()
            return count
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError(_driver_message(e)) from e

    def scalars(self, statement: Any) -> list:
        """Run an ORM select and return the mapped objects."""
        try:
            return list(self.session.scalars(statement).all())
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError(_driver_message(e)) from e

    def get(self, model: type, ident: Any):
        # Keys past the 64-bit range cannot exist and overflow the driver
        if isinstance(ident, int) and not is_storable_id(ident):
            return None
        try:
            return self.session.get(model, ident)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError(_driver_message(e)) from e

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        All-or-nothing unit of work.

        Commits when the block exits cleanly. Any exception rolls back every
        write made inside the block; SQLAlchemy errors are re-raised as
        StorageError, everything else propagates unchanged.
        """
        session = self.session
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(_driver_message(e)) from e
        except BaseException:
            session.rollback()
            raise

    def ping(self) -> bool:
        self.execute("SELECT 1")
        return True
