import datetime

from libshare import policy
from libshare.models import BorrowRequest, Issue, IssueStatus

T0 = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)


def make_issue(subject="CS", students=(1, 2, 3), status=IssueStatus.ACTIVE):
    return Issue("iss-1", "b", "Book", subject, students, T0, T0 + datetime.timedelta(days=7), status=status)


def make_request(approvals=()):
    return BorrowRequest("req-1", "b", "Book", 1, (2, 3), T0, approvals=frozenset(approvals))


def test_valid_triad():
    assert policy.valid_triad(101, 102, 103)
    assert not policy.valid_triad(101, 102, 102)
    assert not policy.valid_triad(101, 101, 103)
    assert not policy.valid_triad(101, 102, 101)


def test_valid_triad_rejects_malformed_ids():
    assert not policy.valid_triad(101, 0, 103)
    assert not policy.valid_triad(101, -5, 103)
    assert not policy.valid_triad(101, None, 103)
    assert not policy.valid_triad(101, "102", 103)
    assert not policy.valid_triad(101, True, 103)


def test_subject_conflict_only_counts_active_issues():
    issues = [make_issue("CS", (1, 2, 3))]
    assert policy.has_active_subject_conflict(2, "CS", issues)
    assert not policy.has_active_subject_conflict(4, "CS", issues)
    assert not policy.has_active_subject_conflict(2, "ME", issues)
    returned = [make_issue("CS", (1, 2, 3), status=IssueStatus.RETURNED)]
    assert not policy.has_active_subject_conflict(2, "CS", returned)


def test_conflicting_students():
    issues = iter([make_issue("CS", (1, 2, 3))])
    assert policy.conflicting_students([3, 4, 1], "CS", issues) == [3, 1]


def test_is_fully_approved_ignores_order():
    assert not policy.is_fully_approved(make_request())
    assert not policy.is_fully_approved(make_request([2]))
    assert policy.is_fully_approved(make_request([3, 2]))
