"""
The lending ledger: one process-wide context owning the catalog, requests,
notifications and issues.

All commands run under a single re-entrant lock, so the four collections
behave as one transactional unit. Every command checks all of its
preconditions before its first write; a raised ``LendingError`` therefore
leaves every collection untouched.
"""

from __future__ import annotations

import datetime
import functools
import logging
import threading
from typing import Callable, Dict, List, Optional

from .catalog import DEFAULT_BOOKS, Catalog
from .config import LendingConfig
from .ids import IdGenerator
from .issuance import IssuanceLedger, as_utc, calculate_fine, fine_at_return
from .models import Book, BorrowRequest, Issue, Notification
from .notifications import NotificationLog
from .workflow import RequestWorkflow

logger = logging.getLogger(__name__)


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _locked(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class LendingLedger:
    """
    Service facade over the lending components.

    Args:
        catalog: initial books; the ledger keeps its own copy, so later
            changes to this object do not reach the ledger. Defaults to the
            demo catalog.
        config: fine rate and loan period; defaults to ``LendingConfig()``.
        clock: time source; naive results are read as UTC. Injectable for tests.
    """

    def __init__(self, catalog: Optional[Catalog] = None, config: Optional[LendingConfig] = None,
                 clock: Callable[[], datetime.datetime] = utcnow):
        self.config = config or LendingConfig()
        self._clock = lambda: as_utc(clock())
        self._lock = threading.RLock()
        self._ids = IdGenerator()
        self._catalog = Catalog(catalog.list_books() if catalog is not None else DEFAULT_BOOKS)
        self._notifications = NotificationLog(self._ids)
        self._workflow = RequestWorkflow(self._notifications, self._ids, self._clock)
        self._issuance = IssuanceLedger(self._catalog, self._workflow, self._notifications,
                                        self.config, self._ids, self._clock)
        logger.info("Ledger ready: %d books, fine %d/day, loan %d days",
                    len(self._catalog), self.config.fine_per_day, self.config.borrow_days)

    def now(self) -> datetime.datetime:
        return self._clock()

    # ---------------- Commands ----------------
    @_locked
    def add_book(self, book_id: str, title: str, subject: str, author: str,
                 total_copies: int, available_copies: Optional[int] = None) -> Book:
        return self._catalog.add_book(book_id, title, subject, author, total_copies, available_copies)

    @_locked
    def initiate_borrow(self, initiator_id: int, book_id: str, member1: int, member2: int,
                        initiator_name: Optional[str] = None) -> BorrowRequest:
        book = self._catalog.get(book_id)
        return self._workflow.initiate_borrow(initiator_id, book, member1, member2,
                                              issues=self._issuance.active(), initiator_name=initiator_name)

    @_locked
    def approve(self, request_id: str, student_id: int) -> BorrowRequest:
        return self._workflow.approve(request_id, student_id)

    @_locked
    def issue(self, request_id: str) -> Issue:
        return self._issuance.issue(request_id)

    @_locked
    def return_book(self, issue_id: str) -> Issue:
        return self._issuance.return_book(issue_id)

    @_locked
    def dismiss_notification(self, notification_id: str, student_id: int) -> Notification:
        return self._notifications.dismiss(notification_id, student_id)

    # ---------------- Queries ----------------
    @_locked
    def list_books(self, query: Optional[str] = None) -> List[Book]:
        return self._catalog.list_books(query)

    @_locked
    def get_book(self, book_id: str) -> Book:
        return self._catalog.get(book_id)

    @_locked
    def get_request(self, request_id: str) -> BorrowRequest:
        return self._workflow.get(request_id)

    @_locked
    def get_issue(self, issue_id: str) -> Issue:
        return self._issuance.get(issue_id)

    @_locked
    def requests_for_student(self, student_id: int) -> List[BorrowRequest]:
        return self._workflow.for_student(student_id)

    @_locked
    def active_issues_for_student(self, student_id: int) -> List[Issue]:
        return self._issuance.active_for_student(student_id)

    @_locked
    def notifications_for(self, student_id: int) -> List[Notification]:
        return self._notifications.for_student(student_id)

    @_locked
    def approved_queue(self) -> List[BorrowRequest]:
        return self._workflow.approved_queue()

    @_locked
    def active_issues(self) -> List[Issue]:
        return self._issuance.active()

    @_locked
    def all_issues(self) -> List[Issue]:
        return self._issuance.all()

    @_locked
    def overdue_issues(self, now: Optional[datetime.datetime] = None) -> List[Issue]:
        return self._issuance.overdue(now or self._clock())

    def calculate_fine(self, issue: Issue, now: Optional[datetime.datetime] = None) -> int:
        return calculate_fine(issue, now or self._clock(), self.config.fine_per_day)

    def fine_at_return(self, issue: Issue) -> int:
        return fine_at_return(issue, self.config.fine_per_day)

    @_locked
    def dashboard(self, now: Optional[datetime.datetime] = None) -> Dict[str, int]:
        """Librarian counters: approved groups awaiting pickup, active loans, overdue loans."""
        now = now or self._clock()
        return {
            "pending_pickup": len(self._workflow.approved_queue()),
            "active_loans": len(self._issuance.active()),
            "overdue_loans": len(self._issuance.overdue(now)),
        }
