"""Exceptions raised by the policy engine and the verification ledger."""

from __future__ import annotations


class BoardCheckError(Exception):
    """Base class for boardcheck errors."""


class InvalidAge(BoardCheckError, ValueError):
    """Raised when a passenger age falls outside the accepted range."""

    def __init__(self, age: int, maximum: int = 150):
        self.age = age
        self.maximum = maximum
        super().__init__(f"Invalid age {age}: expected a value between 0 and {maximum}")


class IndexOutOfBounds(BoardCheckError, IndexError):
    """Raised when a ledger read requests a record that does not exist."""

    def __init__(self, requester: str, index: int, count: int):
        self.requester = requester
        self.index = index
        self.count = count
        super().__init__(
            f"Record index {index} out of bounds for requester {requester!r} ({count} records)"
        )


__all__ = [
    "BoardCheckError",
    "InvalidAge",
    "IndexOutOfBounds",
]
