"""
Tabular reports over the ledger, built with pandas for display or export.
"""

from __future__ import annotations

import datetime
from typing import Optional

import pandas as pd

from .ledger import LendingLedger

BOOK_COLUMNS = ["Book ID", "Title", "Subject", "Author", "Total Copies", "Available Copies"]
LOAN_COLUMNS = ["Issue ID", "Book ID", "Title", "Subject", "Students", "Issued", "Due",
                "Returned", "Status", "Fine"]


def books_report(ledger: LendingLedger, query: Optional[str] = None) -> pd.DataFrame:
    """Catalog inventory in catalog order."""
    rows = [
        {"Book ID": b.id, "Title": b.title, "Subject": b.subject, "Author": b.author,
         "Total Copies": b.total_copies, "Available Copies": b.available_copies}
        for b in ledger.list_books(query)
    ]
    return pd.DataFrame(rows, columns=BOOK_COLUMNS)


def loans_report(ledger: LendingLedger, now: Optional[datetime.datetime] = None,
                 active_only: bool = False) -> pd.DataFrame:
    """
    One row per issue with its fine.

    Active loans show the fine accrued as of ``now``; returned loans show the
    fine that was owed when they came back.
    """
    now = now or ledger.now()
    issues = ledger.active_issues() if active_only else ledger.all_issues()
    rows = []
    for i in issues:
        fine = ledger.calculate_fine(i, now) if i.is_active else ledger.fine_at_return(i)
        rows.append({
            "Issue ID": i.id,
            "Book ID": i.book_id,
            "Title": i.book_title,
            "Subject": i.subject,
            "Students": ",".join(str(s) for s in i.student_ids),
            "Issued": i.issue_date,
            "Due": i.due_date,
            "Returned": i.return_date,
            "Status": i.status.value,
            "Fine": fine,
        })
    return pd.DataFrame(rows, columns=LOAN_COLUMNS)


def dashboard_frame(ledger: LendingLedger, now: Optional[datetime.datetime] = None) -> pd.DataFrame:
    counts = ledger.dashboard(now)
    return pd.DataFrame([{"Metric": k, "Count": v} for k, v in counts.items()], columns=["Metric", "Count"])
