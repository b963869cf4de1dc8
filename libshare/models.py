"""
Entities held by the lending ledger.

Records are frozen; the components swap in updated copies with
``dataclasses.replace`` so a value handed to a caller is a snapshot that can
never be used to mutate ledger state behind the ledger's back.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    ISSUED = "issued"


class IssueStatus(str, Enum):
    ACTIVE = "active"
    RETURNED = "returned"


class NotificationType(str, Enum):
    REQUEST = "request"
    INFO = "info"


@dataclass(frozen=True)
class Book:
    """A catalog title and its copy counters."""
    id: str
    title: str
    subject: str
    author: str
    total_copies: int
    available_copies: int


@dataclass(frozen=True)
class BorrowRequest:
    """
    A group-borrow proposal for one book.

    The initiator's consent is implied by creating the request, so only the
    two named members ever appear in ``approvals``.
    """
    id: str
    book_id: str
    book_title: str
    initiator_id: int
    member_ids: Tuple[int, int]
    created_at: datetime.datetime
    approvals: FrozenSet[int] = field(default_factory=frozenset)
    status: RequestStatus = RequestStatus.PENDING

    @property
    def student_ids(self) -> Tuple[int, int, int]:
        return (self.initiator_id,) + tuple(self.member_ids)

    def involves(self, student_id: int) -> bool:
        return student_id in self.student_ids


@dataclass(frozen=True)
class Notification:
    id: str
    target_id: int
    message: str
    type: NotificationType
    created_at: datetime.datetime
    request_id: Optional[str] = None


@dataclass(frozen=True)
class Issue:
    """A physical loan held jointly by the three students of a request."""
    id: str
    book_id: str
    book_title: str
    subject: str
    student_ids: Tuple[int, int, int]
    issue_date: datetime.datetime
    due_date: datetime.datetime
    request_id: Optional[str] = None
    return_date: Optional[datetime.datetime] = None
    status: IssueStatus = IssueStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status is IssueStatus.ACTIVE
