"""
Borrow policy predicates.

Pure functions with no side effects. The request workflow and the issuance
ledger consult them before mutating anything.
"""

from __future__ import annotations

from typing import Iterable, List

from .models import BorrowRequest, Issue


def is_student_id(value: object) -> bool:
    """True for a positive ``int`` (``bool`` is not accepted)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def valid_triad(initiator_id: int, member1: int, member2: int) -> bool:
    """True iff all three ids are well-formed and pairwise distinct."""
    if not all(is_student_id(x) for x in (initiator_id, member1, member2)):
        return False
    return member1 != member2 and member1 != initiator_id and member2 != initiator_id


def has_active_subject_conflict(student_id: int, subject: str, issues: Iterable[Issue]) -> bool:
    """True if ``student_id`` already shares an active loan in ``subject``."""
    return any(
        issue.is_active and issue.subject == subject and student_id in issue.student_ids
        for issue in issues
    )


def conflicting_students(student_ids: Iterable[int], subject: str, issues: Iterable[Issue]) -> List[int]:
    """Return the students among ``student_ids`` that hold an active loan in ``subject``."""
    issues = list(issues)
    return [s for s in student_ids if has_active_subject_conflict(s, subject, issues)]


def is_fully_approved(request: BorrowRequest) -> bool:
    return set(request.member_ids) <= set(request.approvals)
