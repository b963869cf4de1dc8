"""
Session identity for the calling layer.

Identity is claimed, not verified: a student gives a name and a numeric
student id, a librarian gives a name.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class Role(str, Enum):
    STUDENT = "student"
    LIBRARIAN = "librarian"


class LoginError(ValueError):
    """Login details were missing or malformed."""


@dataclass(frozen=True)
class User:
    name: str
    role: Role
    student_id: Optional[int] = None
    id: str = field(default_factory=lambda: f"u-{uuid.uuid4().hex}")

    @property
    def is_librarian(self) -> bool:
        return self.role is Role.LIBRARIAN


def login(role: Union[Role, str], name: str, student_id: Union[int, str, None] = None) -> User:
    """
    Start a session.

    Raises LoginError when the name is blank, or when a student does not
    supply a positive whole-number id. Librarians never carry a student id.
    """
    try:
        role = Role(role)
    except ValueError:
        raise LoginError(f"Unknown role: {role!r}") from None
    name = (name or "").strip()
    if not name:
        raise LoginError("Name is required")
    if role is Role.LIBRARIAN:
        return User(name=name, role=role)

    sid = _parse_student_id(student_id)
    if sid is None:
        raise LoginError("Valid Student ID (Number) is required")
    return User(name=name, role=role, student_id=sid)


def _parse_student_id(raw: Union[int, str, None]) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    text = (raw or "").strip()
    if not text.isdigit():
        return None
    value = int(text)
    return value if value > 0 else None
