"""Typed persistence operations used by the billing engines.

The gateway wraps one explicitly supplied ``Session``. It never commits on its own;
callers decide where transaction boundaries fall.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypeVar

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from rentflow.core.exceptions import DatabaseError, StorageUnavailableError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


@contextmanager
def translate_storage_errors(operation: str) -> Iterator[None]:
    """Map SQLAlchemy failures onto the application's storage exceptions."""
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        raise StorageUnavailableError(f"{operation}: database unavailable ({exc.orig or exc})") from exc
    except DBAPIError as exc:
        if exc.connection_invalidated:
            raise StorageUnavailableError(f"{operation}: connection lost") from exc
        raise DatabaseError(f"{operation}: {exc.orig or exc}") from exc
    except SQLAlchemyError as exc:
        raise DatabaseError(f"{operation}: {exc}") from exc


class StorageGateway:
    """insert / select / update / delete over ORM models, bound to one session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def ping(self) -> None:
        with translate_storage_errors("ping"):
            self.session.execute(text("SELECT 1"))

    def insert_rows(self, model: type[ModelT], rows: Iterable[Mapping[str, Any]]) -> list[ModelT]:
        """Insert rows and flush so generated ids and defaults are populated."""
        objects = [model(**dict(row)) for row in rows]
        if not objects:
            return []
        with translate_storage_errors(f"insert {model.__name__}"):
            self.session.add_all(objects)
            self.session.flush()
        return objects

    def get(self, model: type[ModelT], row_id: int) -> ModelT | None:
        with translate_storage_errors(f"get {model.__name__}"):
            return self.session.get(model, row_id)

    def select_rows(
        self,
        model: type[ModelT],
        *criteria: Any,
        order_by: Any = None,
        limit: int | None = None,
        **filters: Any,
    ) -> list[ModelT]:
        stmt = select(model).where(*criteria).filter_by(**filters)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        with translate_storage_errors(f"select {model.__name__}"):
            return list(self.session.scalars(stmt).all())

    def update_rows(self, model: type[ModelT], patch: Mapping[str, Any], **filters: Any) -> int:
        if not filters:
            raise ValueError("update_rows requires at least one filter")
        stmt = update(model).filter_by(**filters).values(**dict(patch))
        with translate_storage_errors(f"update {model.__name__}"):
            return self.session.execute(stmt).rowcount

    def delete_rows(self, model: type[ModelT], **filters: Any) -> int:
        if not filters:
            raise ValueError("delete_rows requires at least one filter")
        stmt = delete(model).filter_by(**filters)
        with translate_storage_errors(f"delete {model.__name__}"):
            return self.session.execute(stmt).rowcount

    def commit(self) -> None:
        """Commit current transaction and rollback on failure."""
        try:
            with translate_storage_errors("commit"):
                self.session.commit()
        except DatabaseError:
            self.rollback()
            raise

    def rollback(self) -> None:
        try:
            self.session.rollback()
        except SQLAlchemyError:
            logger.exception("database.rollback_failed", extra={"event": "database.rollback_failed"})
