"""Stable identifiers for tasks, derived from their content."""

import hashlib
from dataclasses import dataclass
from datetime import date, time

from .tasks import Task

# Remote event ids: [a-z0-9-] only, 5-1024 characters.
EVENT_ID_PREFIX = "syl-"
UID_DOMAIN = "syllabus-sync"


@dataclass(frozen=True)
class Identity:
    """Both encodings of a task's derived identity."""

    digest: str

    @property
    def event_id(self) -> str:
        """Identifier safe for the remote calendar service."""
        return f"{EVENT_ID_PREFIX}{self.digest}"

    @property
    def uid(self) -> str:
        """Identifier used as the interchange document UID."""
        return f"{self.digest}@{UID_DOMAIN}"


def canonical_key(title: str, task_date: date | str, task_time: time | str | None) -> str:
    """Join the normalized (title, date, time) triple with pipes."""
    if isinstance(task_date, date):
        task_date = task_date.isoformat()
    if isinstance(task_time, time):
        task_time = task_time.strftime("%H:%M")
    return f"{title.strip()}|{task_date}|{task_time or ''}"


def derive_identity(title: str, task_date: date | str, task_time: time | str | None = None) -> Identity:
    """
    Derive the identity for a (title, date, time) triple.

    Pure function. The same triple always yields the same identity, so it
    doubles as an idempotency token against the remote calendar.
    """
    key = canonical_key(title, task_date, task_time)
    return Identity(digest=hashlib.sha1(key.encode("utf-8")).hexdigest())


def task_identity(task: Task) -> Identity:
    """Derive the identity of a task."""
    return derive_identity(task.title, task.date, task.time)
