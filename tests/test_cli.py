import builtins

import pytest

from libshare import RequestStatus
from libshare.cli import cli_loop, main


def feed(monkeypatch, answers):
    it = iter(answers)

    def fake_input(prompt=""):
        try:
            return next(it)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr(builtins, "input", fake_input)


def test_full_group_borrow_session(monkeypatch, capsys, ledger):
    feed(monkeypatch, [
        "3", "student", "Arjun", "101",
        "5", "cs1", "102", "103",
        "3", "student", "Sneha", "102",
        "6",
        "7", "req-1",
        "3", "student", "Rahul", "103",
        "7", "req-1",
        "3", "librarian", "Librarian",
        "11",
        "12", "req-1",
        "13",
        "15",
        "0",
    ])
    cli_loop(ledger)
    out = capsys.readouterr().out

    assert "Request req-1 sent!" in out
    assert "added you to a group borrow" in out
    assert "approved (2/2 approvals)" in out
    assert "Book Issued!" in out
    assert ledger.get_request("req-1").status is RequestStatus.ISSUED
    assert ledger.get_book("cs1").available_copies == 0


def test_errors_are_printed_not_raised(monkeypatch, capsys, ledger):
    feed(monkeypatch, [
        "3", "student", "Arjun", "101",
        "5", "cs1", "102", "102",
        "12",
        "0",
    ])
    cli_loop(ledger)
    out = capsys.readouterr().out
    assert "two unique teammate student IDs" in out
    assert "Log in as a librarian first." in out
    assert ledger.requests_for_student(101) == []


def test_return_with_fine(monkeypatch, capsys, ledger, clock, approved):
    issue = ledger.issue(approved.id)
    clock.advance(days=8)
    feed(monkeypatch, ["3", "librarian", "Librarian", "14", issue.id, "0"])
    cli_loop(ledger)
    out = capsys.readouterr().out
    assert "Collect fine of 5" in out
    assert "Book Returned Successfully." in out


def test_bad_login_message(monkeypatch, capsys, ledger):
    feed(monkeypatch, ["3", "student", "Arjun", "abc", "5"])
    cli_loop(ledger)
    out = capsys.readouterr().out
    assert "Valid Student ID (Number) is required" in out
    assert "Log in as a student first." in out


def test_main_with_csv_catalog(monkeypatch, capsys, tmp_path):
    monkeypatch.chdir(tmp_path)
    csv = tmp_path / "books.csv"
    csv.write_text("Book ID,Title,Subject,Author,Total Copies\nm1,Calculus,MA,Stewart,2\n")
    feed(monkeypatch, ["1"])
    assert main(["--catalog", str(csv), "--borrow-days", "14"]) == 0
    out = capsys.readouterr().out
    assert "m1: Calculus | Stewart | MA | 2/2 available" in out


def test_main_rejects_bad_config(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    feed(monkeypatch, [])
    with pytest.raises(ValueError):
        main(["--borrow-days", "0"])


def test_blank_choice_is_unknown_not_exit(monkeypatch, capsys, ledger):
    feed(monkeypatch, ["", "1", "0"])
    cli_loop(ledger)
    out = capsys.readouterr().out
    assert "Unknown choice. Try again." in out
    assert "cs1: Data Structures and Algorithms" in out
    assert out.rstrip().endswith("Goodbye.")


def test_end_of_input_ends_session(monkeypatch, capsys, ledger):
    feed(monkeypatch, ["3", "student", "Arjun"])
    cli_loop(ledger)
    out = capsys.readouterr().out
    assert out.rstrip().endswith("Goodbye.")
