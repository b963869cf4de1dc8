"""
Interactive text front end for the lending ledger.

Usage:
    libshare [--catalog books.csv] [--fine-per-day 5] [--borrow-days 7]
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .catalog import Catalog
from .config import LendingConfig
from .errors import LendingError
from .ledger import LendingLedger
from .models import NotificationType
from .reports import dashboard_frame, loans_report
from .session import LoginError, Role, User, login

logger = logging.getLogger(__name__)


def input_prompt(prompt: str) -> str:
    """Read one line from the operator, stripped.

    EOFError and KeyboardInterrupt propagate so ``cli_loop`` can end the session.
    """
    return input(prompt).strip()


def parse_id(raw: str) -> Optional[int]:
    return int(raw) if raw.isdigit() else None


def print_menu(user: Optional[User]):
    print("\n--- LibShare Group Lending (CLI) ---")
    if user is None:
        print("Not logged in")
    else:
        print(f"Logged in as {user.name} ({user.role.value}"
              + (f" #{user.student_id})" if user.student_id else ")"))
    print("1. List books")
    print("2. Search books by title/subject")
    print("3. Log in")
    print("4. Log out")
    print("-- students --")
    print("5. Request group borrow")
    print("6. My notifications")
    print("7. Approve request")
    print("8. Dismiss notification")
    print("9. My requests")
    print("10. My books")
    print("-- librarian --")
    print("11. Pickup queue")
    print("12. Issue approved request")
    print("13. Active loans")
    print("14. Finalize return")
    print("15. Dashboard")
    print("0. Exit")


def print_books(books):
    for b in books:
        print(f"{b.id}: {b.title} | {b.author} | {b.subject} | {b.available_copies}/{b.total_copies} available")


def _require(user: Optional[User], role: Role) -> bool:
    if user is None or user.role is not role:
        print(f"Log in as a {role.value} first.")
        return False
    return True


def cli_loop(ledger: LendingLedger):
    """
    Interactive command loop.

    Reads menu choices from stdin and invokes ``LendingLedger`` operations,
    printing the outcome or the failure message of any ``LendingError``.
    """
    user: Optional[User] = None
    while True:
        print_menu(user)
        try:
            choice = input_prompt("Choose (0-15): ")
            if choice == "0":
                print("Goodbye.")
                break
            elif choice == "1":
                print_books(ledger.list_books())
            elif choice == "2":
                q = input_prompt("Search query: ")
                res = ledger.list_books(q)
                print(f"Found {len(res)} result(s):")
                print_books(res)
            elif choice == "3":
                role = input_prompt("Role (student/librarian): ").lower()
                name = input_prompt("Name: ")
                sid = input_prompt("Student ID: ") if role == Role.STUDENT.value else None
                try:
                    user = login(role, name, sid)
                except LoginError as e:
                    print(e)
                else:
                    print(f"Welcome, {user.name}.")
            elif choice == "4":
                user = None
                print("Logged out.")
            elif choice == "5":
                if not _require(user, Role.STUDENT):
                    continue
                bid = input_prompt("Book ID: ")
                m1 = parse_id(input_prompt("Teammate 1 student ID: "))
                m2 = parse_id(input_prompt("Teammate 2 student ID: "))
                req = ledger.initiate_borrow(user.student_id, bid, m1, m2, initiator_name=user.name)
                print(f"Request {req.id} sent! Teammates must approve in their app.")
            elif choice == "6":
                if not _require(user, Role.STUDENT):
                    continue
                notes = ledger.notifications_for(user.student_id)
                print(f"{len(notes)} notification(s):")
                for n in notes:
                    action = f" [approve {n.request_id}]" if n.type is NotificationType.REQUEST else ""
                    print(f"{n.id}: {n.message}{action}")
            elif choice == "7":
                if not _require(user, Role.STUDENT):
                    continue
                rid = input_prompt("Request ID: ")
                req = ledger.approve(rid, user.student_id)
                print(f"Request {req.id} is {req.status.value} ({len(req.approvals)}/2 approvals).")
            elif choice == "8":
                if not _require(user, Role.STUDENT):
                    continue
                nid = input_prompt("Notification ID: ")
                ledger.dismiss_notification(nid, user.student_id)
                print("Dismissed.")
            elif choice == "9":
                if not _require(user, Role.STUDENT):
                    continue
                for r in ledger.requests_for_student(user.student_id):
                    marks = ", ".join(f"{m} {'(OK)' if m in r.approvals else '(Pending)'}" for m in r.member_ids)
                    print(f"{r.id}: {r.book_title} | {r.status.value} | by {r.initiator_id} | {marks}")
            elif choice == "10":
                if not _require(user, Role.STUDENT):
                    continue
                for i in ledger.active_issues_for_student(user.student_id):
                    fine = ledger.calculate_fine(i)
                    status = f"Overdue fine {fine}, pay at counter" if fine else "No fine"
                    print(f"{i.id}: {i.book_title} | due {i.due_date.date().isoformat()} | {status}")
            elif choice == "11":
                if not _require(user, Role.LIBRARIAN):
                    continue
                queue = ledger.approved_queue()
                print(f"Pending pickup: {len(queue)}")
                for r in queue:
                    print(f"{r.id}: {r.book_title} | group {', '.join(map(str, r.student_ids))}")
            elif choice == "12":
                if not _require(user, Role.LIBRARIAN):
                    continue
                rid = input_prompt("Request ID: ")
                issue = ledger.issue(rid)
                print(f"Book Issued! {issue.id} recorded for all 3 members, due {issue.due_date.date().isoformat()}.")
            elif choice == "13":
                if not _require(user, Role.LIBRARIAN):
                    continue
                print(loans_report(ledger, active_only=True).to_string(index=False))
            elif choice == "14":
                if not _require(user, Role.LIBRARIAN):
                    continue
                iid = input_prompt("Issue ID: ")
                fine = ledger.calculate_fine(ledger.get_issue(iid))
                if fine:
                    print(f"Collect fine of {fine} before releasing the group.")
                ledger.return_book(iid)
                print("Book Returned Successfully.")
            elif choice == "15":
                if not _require(user, Role.LIBRARIAN):
                    continue
                print(dashboard_frame(ledger).to_string(index=False))
            else:
                print("Unknown choice. Try again.")
        except LendingError as e:
            print(e)
        except (EOFError, KeyboardInterrupt):
            print()
            print("Goodbye.")
            break


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="libshare", description="Group-borrow library lending desk")
    parser.add_argument("--catalog", help="CSV file to seed the catalog from (default: demo catalog)")
    parser.add_argument("--fine-per-day", type=int, default=None, help="override LIBSHARE_FINE_PER_DAY")
    parser.add_argument("--borrow-days", type=int, default=None, help="override LIBSHARE_BORROW_DAYS")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s: %(message)s")

    config = LendingConfig.from_env()
    if args.fine_per_day is not None or args.borrow_days is not None:
        config = LendingConfig(
            fine_per_day=config.fine_per_day if args.fine_per_day is None else args.fine_per_day,
            borrow_days=config.borrow_days if args.borrow_days is None else args.borrow_days,
        )
    catalog = Catalog.from_csv(args.catalog) if args.catalog else None
    ledger = LendingLedger(catalog=catalog, config=config)
    print("Welcome to LibShare. Books are lent to groups of three.")
    cli_loop(ledger)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
