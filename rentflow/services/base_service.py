"""Shared service base with explicit session injection."""

from __future__ import annotations

from decimal import InvalidOperation

from sqlalchemy.orm import Session

from rentflow.core.exceptions import NotFoundError, ServiceError, StorageUnavailableError, ValidationError
from rentflow.core.results import ErrorKind, Failure
from rentflow.database.gateway import StorageGateway
from rentflow.orchestration.state_machine import InvalidTransitionError


def failure_from_exception(exc: Exception) -> Failure:
    """Collapse an exception raised inside an engine into a ``Failure``."""
    if isinstance(exc, StorageUnavailableError):
        kind = ErrorKind.STORAGE_UNAVAILABLE
    elif isinstance(exc, InvalidTransitionError):
        kind = ErrorKind.INVALID_STATE
    elif isinstance(exc, NotFoundError):
        kind = ErrorKind.NOT_FOUND
    elif isinstance(exc, (ValidationError, InvalidOperation)):
        kind = ErrorKind.VALIDATION
    elif isinstance(exc, ServiceError):
        kind = ErrorKind.SERVICE_ERROR
    else:
        kind = ErrorKind.STORAGE_ERROR
    return Failure(kind=kind, message=str(exc) or exc.__class__.__name__)


class BaseService:
    """Base class for services that operate on a caller-owned SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.gateway = StorageGateway(db)

    def commit(self) -> None:
        """Commit current transaction and rollback on failure."""
        self.gateway.commit()

    def rollback(self) -> None:
        self.gateway.rollback()

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()
