"""
Request workflow: group-borrow requests from proposal to approval.

State machine::

    pending --(both members approve)--> approved --(librarian issues)--> issued

There is no way back to ``pending`` and ``issued`` is terminal.
"""

from __future__ import annotations

import dataclasses
import datetime
import logging
from typing import Callable, Dict, Iterable, List, Optional

from . import policy
from .errors import InvalidState, NotAMember, NotFound, PolicyViolation
from .ids import IdGenerator
from .models import Book, BorrowRequest, Issue, NotificationType, RequestStatus
from .notifications import NotificationLog

logger = logging.getLogger(__name__)


class RequestWorkflow:
    """
    Creates and transitions borrow requests.

    Args:
        notifications: log receiving the teammates' approval prompts.
        ids: shared id generator.
        clock: returns the current time as an aware datetime.
    """

    def __init__(self, notifications: NotificationLog, ids: IdGenerator,
                 clock: Callable[[], datetime.datetime]):
        self._notifications = notifications
        self._ids = ids
        self._clock = clock
        self._requests: Dict[str, BorrowRequest] = {}

    # ---------------- Commands ----------------
    def initiate_borrow(self, initiator_id: int, book: Book, member1: int, member2: int,
                        issues: Iterable[Issue] = (), initiator_name: Optional[str] = None) -> BorrowRequest:
        """
        Propose a group borrow of ``book`` by the initiator and two teammates.

        Raises PolicyViolation if the triad is malformed or any of its students
        already holds an active loan in the book's subject. Stock is not
        checked here; that happens at issuance.
        """
        if not policy.valid_triad(initiator_id, member1, member2):
            logger.warning("Rejected triad %r/%r/%r for %s", initiator_id, member1, member2, book.id)
            raise PolicyViolation(
                PolicyViolation.INVALID_TRIAD,
                "Please enter two unique teammate student IDs (positive numbers, not your own).")

        conflicts = policy.conflicting_students((initiator_id, member1, member2), book.subject, issues)
        if conflicts:
            logger.warning("Subject conflict on %s for students %s", book.subject, conflicts)
            raise PolicyViolation(
                PolicyViolation.SUBJECT_CONFLICT,
                f"Policy Violation: student(s) {', '.join(map(str, conflicts))} already have a book for {book.subject}.")

        now = self._clock()
        request = BorrowRequest(
            id=self._ids.next("req"),
            book_id=book.id,
            book_title=book.title,
            initiator_id=initiator_id,
            member_ids=(member1, member2),
            created_at=now,
        )
        self._requests[request.id] = request

        who = initiator_name or f"Student {initiator_id}"
        for member in request.member_ids:
            self._notifications.push(
                member, f'{who} added you to a group borrow for "{book.title}"',
                NotificationType.REQUEST, now, request_id=request.id)

        logger.info("Request %s: %s with %s for %s", request.id, initiator_id, request.member_ids, book.id)
        return request

    def approve(self, request_id: str, student_id: int) -> BorrowRequest:
        """
        Record ``student_id``'s consent.

        Approving twice is a no-op. Once both members have approved the
        request becomes ``approved`` and the initiator is told it is ready for
        pickup.
        """
        request = self.get(request_id)
        if student_id not in request.member_ids:
            raise NotAMember(request_id, student_id)
        if request.status is RequestStatus.ISSUED:
            raise InvalidState(f"Request {request_id} has already been issued.")

        approvals = request.approvals | {student_id}
        updated = dataclasses.replace(request, approvals=approvals)
        if policy.is_fully_approved(updated):
            updated = dataclasses.replace(updated, status=RequestStatus.APPROVED)
        self._requests[request_id] = updated
        self._notifications.remove_for(request_id, student_id)

        if request.status is RequestStatus.PENDING and updated.status is RequestStatus.APPROVED:
            self._notifications.push(
                request.initiator_id,
                f'Your group borrow for "{request.book_title}" is approved. Collect it at the counter.',
                NotificationType.INFO, self._clock(), request_id=request_id)
            logger.info("Request %s approved by all members", request_id)
        elif student_id not in request.approvals:
            logger.info("Request %s approved by %s", request_id, student_id)
        return updated

    def mark_issued(self, request_id: str) -> BorrowRequest:
        request = self.get(request_id)
        if request.status is not RequestStatus.APPROVED:
            raise InvalidState(f"Request {request_id} is {request.status.value}, not approved.")
        updated = dataclasses.replace(request, status=RequestStatus.ISSUED)
        self._requests[request_id] = updated
        return updated

    # ---------------- Queries ----------------
    def get(self, request_id: str) -> BorrowRequest:
        try:
            return self._requests[request_id]
        except KeyError:
            raise NotFound("request", request_id) from None

    def for_student(self, student_id: int) -> List[BorrowRequest]:
        """Requests the student started or was named in, oldest first."""
        return [r for r in self._requests.values() if r.involves(student_id)]

    def approved_queue(self) -> List[BorrowRequest]:
        """Approved requests waiting for the librarian, oldest first."""
        return [r for r in self._requests.values() if r.status is RequestStatus.APPROVED]

    def all(self) -> List[BorrowRequest]:
        return list(self._requests.values())
