"""Typed failures raised by the lending core.

Every ``LendingError`` is recoverable: the ledger is left exactly as it was
before the failing command and the caller decides what to show the user.
"""

from __future__ import annotations

from typing import Optional


class LendingError(Exception):
    """Base class for all recoverable lending failures."""


class PolicyViolation(LendingError):
    """A borrow policy was broken (bad triad, subject conflict)."""

    INVALID_TRIAD = "invalid-triad"
    SUBJECT_CONFLICT = "subject-conflict"

    def __init__(self, rule: str, message: str):
        super().__init__(message)
        self.rule = rule


class OutOfStock(LendingError):
    """No copy of the book is currently available."""

    def __init__(self, book_id: str, title: Optional[str] = None):
        label = f"'{title}' ({book_id})" if title else book_id
        super().__init__(f"Book {label} is out of stock.")
        self.book_id = book_id


class NotFound(LendingError):
    """Unknown book, request, issue or notification id."""

    def __init__(self, kind: str, key: str):
        super().__init__(f"{kind.capitalize()} not found: {key}")
        self.kind = kind
        self.key = key


class NotAMember(LendingError):
    """Approval attempted by a student who is not a named teammate."""

    def __init__(self, request_id: str, student_id: int):
        super().__init__(f"Student {student_id} is not a member of request {request_id}.")
        self.request_id = request_id
        self.student_id = student_id


class InvalidState(LendingError):
    """Action attempted at the wrong lifecycle stage."""


class InvariantBreach(RuntimeError):
    """A ledger invariant would be broken. Indicates a bug in the caller, not a user error."""
