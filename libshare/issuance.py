"""
Issuance ledger: physical loans created from approved requests.
"""

from __future__ import annotations

import dataclasses
import datetime
import logging
import math
from typing import Callable, Dict, List

from . import policy
from .catalog import Catalog
from .config import LendingConfig
from .errors import InvalidState, NotFound, PolicyViolation
from .ids import IdGenerator
from .models import Issue, IssueStatus, NotificationType, RequestStatus
from .notifications import NotificationLog
from .workflow import RequestWorkflow

logger = logging.getLogger(__name__)

ONE_DAY = datetime.timedelta(days=1)


def as_utc(moment: datetime.datetime) -> datetime.datetime:
    """Read a naive datetime as UTC; aware values pass through unchanged."""
    if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
        return moment.replace(tzinfo=datetime.timezone.utc)
    return moment


def calculate_fine(issue: Issue, now: datetime.datetime, fine_per_day: int) -> int:
    """
    Fine owed on ``issue`` as of ``now``.

    Returned issues and issues not yet past their due date owe nothing; every
    started day past the due date costs ``fine_per_day``. A naive ``now`` is
    read as UTC.
    """
    now = as_utc(now)
    if issue.status is IssueStatus.RETURNED or now <= issue.due_date:
        return 0
    return math.ceil((now - issue.due_date) / ONE_DAY) * fine_per_day


def fine_at_return(issue: Issue, fine_per_day: int) -> int:
    """Fine a returned issue had accrued at its return date (0 while still active)."""
    if issue.status is not IssueStatus.RETURNED or issue.return_date is None:
        return 0
    return calculate_fine(dataclasses.replace(issue, status=IssueStatus.ACTIVE), issue.return_date, fine_per_day)


class IssuanceLedger:
    """
    Active and returned loans, one per group-book transaction.

    Args:
        catalog: book counters to decrement on issue and increment on return.
        workflow: source of approved requests.
        notifications: receives the issued/returned info messages.
        config: loan period and fine rate.
        ids: shared id generator.
        clock: returns the current time as an aware datetime.
    """

    def __init__(self, catalog: Catalog, workflow: RequestWorkflow, notifications: NotificationLog,
                 config: LendingConfig, ids: IdGenerator, clock: Callable[[], datetime.datetime]):
        self._catalog = catalog
        self._workflow = workflow
        self._notifications = notifications
        self._config = config
        self._ids = ids
        self._clock = clock
        self._issues: Dict[str, Issue] = {}

    # ---------------- Commands ----------------
    def issue(self, request_id: str) -> Issue:
        """
        Turn an approved request into an active loan.

        Every check runs before the first mutation: the request must be
        approved, the book must exist, none of the three students may have
        picked up another active loan in the subject since the request was
        made, and a copy must be on the shelf.
        """
        request = self._workflow.get(request_id)
        if request.status is not RequestStatus.APPROVED:
            raise InvalidState(f"Request {request_id} is {request.status.value}; only approved requests can be issued.")
        book = self._catalog.get(request.book_id)

        conflicts = policy.conflicting_students(request.student_ids, book.subject, self._issues.values())
        if conflicts:
            logger.warning("Refusing to issue %s: subject conflict on %s for %s", request_id, book.subject, conflicts)
            raise PolicyViolation(
                PolicyViolation.SUBJECT_CONFLICT,
                f"Policy Violation: student(s) {', '.join(map(str, conflicts))} already have a book for {book.subject}.")

        self._catalog.decrement_availability(book.id)

        now = self._clock()
        issue = Issue(
            id=self._ids.next("iss"),
            book_id=book.id,
            book_title=book.title,
            subject=book.subject,
            student_ids=request.student_ids,
            issue_date=now,
            due_date=now + datetime.timedelta(days=self._config.borrow_days),
            request_id=request.id,
        )
        self._issues[issue.id] = issue
        self._workflow.mark_issued(request.id)

        for student in issue.student_ids:
            self._notifications.push(
                student, f'"{book.title}" issued to your group. Due on {issue.due_date.date().isoformat()}.',
                NotificationType.INFO, now, request_id=request.id)

        logger.info("Issued %s to %s until %s", book.id, list(issue.student_ids), issue.due_date.date().isoformat())
        return issue

    def return_book(self, issue_id: str) -> Issue:
        """
        Close an active loan and put the copy back on the shelf.

        The fine owed at this moment is logged; collecting it is up to the
        caller.
        """
        issue = self.get(issue_id)
        if issue.status is IssueStatus.RETURNED:
            raise InvalidState(f"Issue {issue_id} was already returned.")

        now = self._clock()
        fine = calculate_fine(issue, now, self._config.fine_per_day)
        self._catalog.increment_availability(issue.book_id)
        returned = dataclasses.replace(issue, status=IssueStatus.RETURNED, return_date=now)
        self._issues[issue_id] = returned

        if fine:
            logger.info("Book %s returned by %s with fine %d", issue.book_id, list(issue.student_ids), fine)
        else:
            logger.info("Book %s returned by %s", issue.book_id, list(issue.student_ids))
        return returned

    # ---------------- Queries ----------------
    def get(self, issue_id: str) -> Issue:
        try:
            return self._issues[issue_id]
        except KeyError:
            raise NotFound("issue", issue_id) from None

    def all(self) -> List[Issue]:
        return list(self._issues.values())

    def active(self) -> List[Issue]:
        return [i for i in self._issues.values() if i.is_active]

    def active_for_student(self, student_id: int) -> List[Issue]:
        return [i for i in self._issues.values() if i.is_active and student_id in i.student_ids]

    def overdue(self, now: datetime.datetime) -> List[Issue]:
        now = as_utc(now)
        return [i for i in self.active() if now > i.due_date]
