"""Tagged results returned by the billing engines' public entry points.

Storage faults never escape an engine as an exception. Callers branch on ``.ok``
(or pattern-match on the class) and read either ``value`` or ``kind``/``message``.
"""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    STORAGE_UNAVAILABLE = "storage_unavailable"
    STORAGE_ERROR = "storage_error"
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    DUPLICATE_PERIOD = "duplicate_period"
    VALIDATION = "validation"
    SERVICE_ERROR = "service_error"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Success[T], Failure]


def to_payload(result: Result[T]) -> dict[str, Any]:
    """Flatten a result into a JSON-safe dict for task returns."""
    if isinstance(result, Failure):
        return {"success": False, "error": result.message, "error_kind": result.kind.value}
    value = result.value
    body = asdict(value) if is_dataclass(value) else {"value": value}
    return {"success": True, **body}
