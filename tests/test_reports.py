import datetime

from libshare.reports import BOOK_COLUMNS, LOAN_COLUMNS, books_report, dashboard_frame, loans_report


def test_books_report(ledger):
    df = books_report(ledger)
    assert list(df.columns) == BOOK_COLUMNS
    assert list(df["Book ID"]) == ["cs1", "cs2", "me1", "ee1"]
    assert list(books_report(ledger, "thermo")["Book ID"]) == ["me1"]


def test_loans_report_shows_fines(ledger, clock, approved):
    issue = ledger.issue(approved.id)
    other = ledger.initiate_borrow(201, "me1", 202, 203)
    ledger.approve(other.id, 202)
    ledger.approve(other.id, 203)
    second = ledger.issue(other.id)
    clock.advance(days=9)
    ledger.return_book(second.id)
    clock.advance(days=1)

    df = loans_report(ledger)
    assert list(df.columns) == LOAN_COLUMNS
    rows = df.set_index("Issue ID")
    assert rows.loc[issue.id, "Fine"] == 15
    assert rows.loc[issue.id, "Students"] == "101,102,103"
    assert rows.loc[second.id, "Status"] == "returned"
    assert rows.loc[second.id, "Fine"] == 10

    active = loans_report(ledger, active_only=True)
    assert list(active["Issue ID"]) == [issue.id]


def test_empty_loans_report(ledger):
    df = loans_report(ledger, now=datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc))
    assert df.empty
    assert list(df.columns) == LOAN_COLUMNS


def test_dashboard_frame(ledger, approved):
    df = dashboard_frame(ledger)
    assert dict(zip(df["Metric"], df["Count"])) == {"pending_pickup": 1, "active_loans": 0, "overdue_loans": 0}
