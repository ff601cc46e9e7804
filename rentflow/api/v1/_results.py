"""Translate engine results into HTTP responses."""

from __future__ import annotations

from typing import TypeVar

from fastapi import HTTPException, status

from rentflow.core.exceptions import NotFoundError, ValidationError
from rentflow.core.results import ErrorKind, Failure, Result

T = TypeVar("T")

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.DUPLICATE_PERIOD: status.HTTP_409_CONFLICT,
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.STORAGE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.STORAGE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.SERVICE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def unwrap(result: Result[T]) -> T:
    if isinstance(result, Failure):
        raise HTTPException(
            status_code=STATUS_BY_KIND[result.kind],
            detail={"error_code": result.kind.value, "detail": result.message},
        )
    return result.value


def map_service_error(exc: Exception) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="internal error")
