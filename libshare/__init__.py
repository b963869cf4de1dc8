"""LibShare: group-borrow library lending core.

Books are lent to triads of students who all consent, with at most one
active loan per student per subject.
"""

from .catalog import DEFAULT_BOOKS, Catalog
from .config import LendingConfig
from .errors import (
    InvalidState,
    InvariantBreach,
    LendingError,
    NotAMember,
    NotFound,
    OutOfStock,
    PolicyViolation,
)
from .issuance import calculate_fine
from .ledger import LendingLedger
from .models import (
    Book,
    BorrowRequest,
    Issue,
    IssueStatus,
    Notification,
    NotificationType,
    RequestStatus,
)

__all__ = [
    "Book",
    "BorrowRequest",
    "Catalog",
    "DEFAULT_BOOKS",
    "InvalidState",
    "InvariantBreach",
    "Issue",
    "IssueStatus",
    "LendingConfig",
    "LendingError",
    "LendingLedger",
    "NotAMember",
    "NotFound",
    "Notification",
    "NotificationType",
    "OutOfStock",
    "PolicyViolation",
    "RequestStatus",
    "calculate_fine",
]
