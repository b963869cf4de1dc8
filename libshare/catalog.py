"""
Catalog ledger: book records and their copy-availability counters.
"""

from __future__ import annotations

import dataclasses
import logging
import pathlib
from typing import Dict, Iterable, List, Optional, Union

import pandas as pd

from .errors import InvariantBreach, NotFound, OutOfStock
from .models import Book

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["Book ID", "Title", "Subject", "Author", "Total Copies", "Available Copies"]

# Demo catalog used when no CSV is supplied
DEFAULT_BOOKS = (
    Book("b1", "Data Structures and Algorithms", "CS", "N. Karumanchi", 5, 2),
    Book("b2", "Engineering Thermodynamics", "ME", "P.K. Nag", 3, 3),
    Book("b3", "Organic Chemistry", "CH", "Morrison Boyd", 2, 1),
    Book("b4", "Microelectronic Circuits", "EE", "Sedra & Smith", 4, 0),
)


class Catalog:
    """
    In-memory book catalog.

    Books keep the order in which they were added; listings never re-sort.
    Availability is only changed through ``decrement_availability`` and
    ``increment_availability``, which the issuance ledger calls.
    """

    def __init__(self, books: Iterable[Book] = ()):
        self._books: Dict[str, Book] = {}
        for book in books:
            self._insert(book)

    @classmethod
    def from_csv(cls, csv_path: Union[str, pathlib.Path]) -> "Catalog":
        """
        Load a catalog from a CSV file.

        Expected columns: Book ID, Title, Subject, Author, Total Copies and
        optionally Available Copies (defaults to Total Copies).
        """
        path = pathlib.Path(csv_path)
        if not path.exists():
            raise FileNotFoundError(f"Catalog CSV not found: {path}")
        df = pd.read_csv(path, dtype=str).fillna("")
        missing = [c for c in CSV_COLUMNS[:5] if c not in df.columns]
        if missing:
            raise ValueError(f"Catalog CSV {path} is missing columns: {', '.join(missing)}")
        df["Total Copies"] = pd.to_numeric(df["Total Copies"], errors="raise").astype(int)
        if "Available Copies" in df.columns:
            available = pd.to_numeric(df["Available Copies"], errors="coerce")
            df["Available Copies"] = available.fillna(df["Total Copies"]).astype(int)
        else:
            df["Available Copies"] = df["Total Copies"]

        catalog = cls()
        for row in df.to_dict(orient="records"):
            catalog.add_book(
                book_id=str(row["Book ID"]).strip(),
                title=str(row["Title"]).strip(),
                subject=str(row["Subject"]).strip(),
                author=str(row["Author"]).strip(),
                total_copies=int(row["Total Copies"]),
                available_copies=int(row["Available Copies"]),
            )
        logger.info("Loaded %d books from %s", len(catalog), path)
        return catalog

    def __len__(self) -> int:
        return len(self._books)

    def __contains__(self, book_id: object) -> bool:
        return book_id in self._books

    # ---------------- Mutation ----------------
    def add_book(self, book_id: str, title: str, subject: str, author: str,
                 total_copies: int, available_copies: Optional[int] = None) -> Book:
        """
        Register a new title.

        Raises ValueError for a duplicate id or inconsistent copy counts.
        """
        if available_copies is None:
            available_copies = total_copies
        book = Book(book_id, title, subject, author, int(total_copies), int(available_copies))
        self._insert(book)
        logger.info("Added book %s (%s), %d/%d available", book.id, book.subject,
                    book.available_copies, book.total_copies)
        return book

    def _insert(self, book: Book) -> None:
        if not book.id:
            raise ValueError("Book id must not be empty")
        if book.id in self._books:
            raise ValueError(f"Duplicate book id: {book.id}")
        if not 0 <= book.available_copies <= book.total_copies:
            raise ValueError(
                f"Book {book.id}: need 0 <= available ({book.available_copies}) <= total ({book.total_copies})")
        self._books[book.id] = book

    def decrement_availability(self, book_id: str) -> Book:
        book = self.get(book_id)
        if book.available_copies == 0:
            raise OutOfStock(book.id, book.title)
        updated = dataclasses.replace(book, available_copies=book.available_copies - 1)
        self._books[book_id] = updated
        logger.debug("Book %s availability %d -> %d", book_id, book.available_copies, updated.available_copies)
        return updated

    def increment_availability(self, book_id: str) -> Book:
        book = self.get(book_id)
        if book.available_copies >= book.total_copies:
            raise InvariantBreach(
                f"Book {book_id} already has all {book.total_copies} copies on the shelf")
        updated = dataclasses.replace(book, available_copies=book.available_copies + 1)
        self._books[book_id] = updated
        logger.debug("Book %s availability %d -> %d", book_id, book.available_copies, updated.available_copies)
        return updated

    # ---------------- Queries ----------------
    def get(self, book_id: str) -> Book:
        try:
            return self._books[book_id]
        except KeyError:
            raise NotFound("book", book_id) from None

    def list_books(self, query: Optional[str] = None) -> List[Book]:
        """
        Return books whose title or subject contains ``query`` (case-insensitive).

        A blank or missing query returns the whole catalog.
        """
        q = (query or "").strip().lower()
        if q == "":
            return list(self._books.values())
        return [b for b in self._books.values() if q in b.title.lower() or q in b.subject.lower()]
