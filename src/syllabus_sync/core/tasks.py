"""Pure task domain logic - no I/O dependencies."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time

TASK_KINDS = ("assignment", "reading", "exam", "other")

_TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})(?::\d{2})?")
_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


class TaskValidationError(ValueError):
    """Raised when a task record does not match the expected schema."""

    pass


@dataclass(frozen=True)
class Task:
    """A calendar-worthy item extracted from a syllabus."""

    title: str
    date: date
    time: time | None = None
    description: str | None = None
    location: str | None = None
    link: str | None = None
    class_id: str = ""
    kind: str = "other"
    source_page: int | None = None

    @property
    def is_all_day(self) -> bool:
        return self.time is None

    @property
    def time_label(self) -> str:
        """HH:MM or empty string for all-day tasks."""
        return self.time.strftime("%H:%M") if self.time else ""

    @classmethod
    def from_dict(cls, data: dict, class_id: str = "") -> "Task":
        """
        Build a Task from an upstream JSON record.

        Accepts camelCase (classId, sourcePage) and snake_case keys.
        `notes` is read as the description when no description is given.
        """
        if not isinstance(data, dict):
            raise TaskValidationError(f"task must be an object, got {type(data).__name__}")

        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            raise TaskValidationError("title: must be a non-empty string")

        kind = data.get("type") or data.get("kind") or "other"
        if kind not in TASK_KINDS:
            raise TaskValidationError(f"type: must be one of {', '.join(TASK_KINDS)}, got {kind!r}")

        source_page = data.get("sourcePage", data.get("source_page"))
        if source_page is not None and (not isinstance(source_page, int) or source_page < 1):
            raise TaskValidationError(f"sourcePage: must be a positive integer, got {source_page!r}")

        return cls(
            title=title,
            date=parse_date(data.get("date")),
            time=parse_time(data.get("time")),
            description=_optional_text(data, "description") or _optional_text(data, "notes"),
            location=_optional_text(data, "location"),
            link=_optional_text(data, "link"),
            class_id=str(data.get("classId") or data.get("class_id") or class_id),
            kind=kind,
            source_page=source_page,
        )

    def to_dict(self) -> dict:
        """Serialize to the camelCase JSON shape used by the upstream producer."""
        data = {
            "title": self.title,
            "type": self.kind,
            "date": self.date.isoformat(),
            "time": self.time_label or None,
            "classId": self.class_id,
        }
        for key in ("description", "location", "link"):
            value = getattr(self, key)
            if value:
                data[key] = value
        if self.source_page is not None:
            data["sourcePage"] = self.source_page
        return data


def parse_date(value) -> date:
    """Parse a YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_PATTERN.fullmatch(value):
        raise TaskValidationError(f"date: expected YYYY-MM-DD, got {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise TaskValidationError(f"date: not a calendar date: {value!r}")


def parse_time(value) -> time | None:
    """Parse an HH:MM (24h) string. None or empty means all-day."""
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    if not isinstance(value, str):
        raise TaskValidationError(f"time: expected HH:MM, got {value!r}")

    match = _TIME_PATTERN.fullmatch(value.strip())
    if not match:
        raise TaskValidationError(f"time: expected HH:MM, got {value!r}")
    try:
        return time(int(match.group(1)), int(match.group(2)))
    except ValueError:
        raise TaskValidationError(f"time: not a 24-hour clock time: {value!r}")


def _optional_text(data: dict, key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise TaskValidationError(f"{key}: must be a string")
    return value


def dedupe_tasks(tasks: list[Task]) -> list[Task]:
    """
    Drop repeated tasks, keeping the first occurrence.

    Two tasks are duplicates when class, date and case-folded title match.
    """
    seen: set[tuple[str, date, str]] = set()
    unique = []
    for t in tasks:
        key = (t.class_id, t.date, t.title.lower())
        if key in seen:
            continue
        seen.add(key)
        unique.append(t)
    return unique
