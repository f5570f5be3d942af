"""Result types for railway-oriented programming.

Engine operations that can fail for domain reasons return a Result instead of
raising. Callers branch on the variant with ``match`` or ``isinstance``.

Usage:
    def parse(value: str) -> Result[int, str]:
        if not value.isdigit():
            return Failure(error="not a number")
        return Success(value=int(value))

    match parse("42"):
        case Success(value=number):
            print(number)
        case Failure(error=error):
            print(error)
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar, Union

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


Result: TypeAlias = Union[Success[T], Failure[E]]
