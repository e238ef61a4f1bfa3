"""Tagged results returned by repositories.

Store operations never raise on a persistence failure. They return either
``Ok`` wrapping the value or ``StoreFault`` describing what went wrong, and
callers branch on the tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar

T = TypeVar("T")


class StoreError(RuntimeError):
    """Raised when a ``StoreFault`` is unwrapped."""

    def __init__(self, fault: StoreFault) -> None:
        super().__init__(f"{fault.operation} failed: {fault.cause}")
        self.fault = fault


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful store operation."""

    value: T

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class StoreFault:
    """Failed store operation.

    ``cause`` is the most specific description of the underlying error.
    """

    operation: str
    cause: str

    def unwrap(self) -> NoReturn:
        raise StoreError(self)


StoreResult = Ok[T] | StoreFault


def most_specific_cause(exc: BaseException) -> str:
    """Describe the innermost cause of ``exc``.

    Follows the DB-API ``orig`` attribute that SQLAlchemy attaches and the
    explicit ``__cause__`` chain down to the root error.
    """
    current: BaseException = exc
    seen: set[int] = set()
    while id(current) not in seen:
        seen.add(id(current))
        nested = getattr(current, "orig", None) or current.__cause__
        if not isinstance(nested, BaseException):
            break
        current = nested

    message = str(current).strip()
    return message or type(current).__name__
