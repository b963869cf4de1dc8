"""
Notification log: a per-student inbox of actionable events.

Entries are work-queue items, not an audit trail. A ``request`` entry is
removed when its target approves the request; an ``info`` entry is removed
when its target dismisses it.
"""

from __future__ import annotations

import datetime
import logging
from typing import Dict, List, Optional

from .errors import InvalidState, NotFound
from .ids import IdGenerator
from .models import Notification, NotificationType

logger = logging.getLogger(__name__)


class NotificationLog:

    def __init__(self, ids: IdGenerator):
        self._ids = ids
        self._items: Dict[str, Notification] = {}

    def __len__(self) -> int:
        return len(self._items)

    def push(self, target_id: int, message: str, type: NotificationType, created_at: datetime.datetime,
             request_id: Optional[str] = None) -> Notification:
        note = Notification(
            id=self._ids.next("n"),
            target_id=target_id,
            message=message,
            type=type,
            created_at=created_at,
            request_id=request_id,
        )
        self._items[note.id] = note
        logger.debug("Notification %s -> %s: %s", note.id, target_id, message)
        return note

    def for_student(self, student_id: int) -> List[Notification]:
        return [n for n in self._items.values() if n.target_id == student_id]

    def remove_for(self, request_id: str, student_id: int) -> int:
        """Drop every notification targeting ``student_id`` about ``request_id``. Returns the count removed."""
        doomed = [n.id for n in self._items.values()
                  if n.request_id == request_id and n.target_id == student_id]
        for nid in doomed:
            del self._items[nid]
        return len(doomed)

    def dismiss(self, notification_id: str, student_id: int) -> Notification:
        """
        Remove an ``info`` notification on behalf of its target.

        Another student's notification is reported as not found. ``request``
        notifications can only be cleared by approving the request.
        """
        note = self._items.get(notification_id)
        if note is None or note.target_id != student_id:
            raise NotFound("notification", notification_id)
        if note.type is NotificationType.REQUEST:
            raise InvalidState(f"Notification {notification_id} is a pending approval; approve the request instead.")
        del self._items[notification_id]
        logger.debug("Student %s dismissed %s", student_id, notification_id)
        return note
