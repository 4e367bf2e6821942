"""Map tasks onto calendar events - pure, no I/O."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .identity import Identity, task_identity
from .tasks import Task

# Tasks carry no end time, so timed events get a fixed duration.
DEFAULT_DURATION = timedelta(hours=1)
SOURCE_TITLE = "Resource"


@dataclass(frozen=True)
class MappedEvent:
    """
    A task as a calendar event.

    `start`/`end` are naive datetimes for timed events and dates for all-day
    events; `end` is exclusive for all-day events.
    """

    identity: Identity
    title: str
    start: date | datetime
    end: date | datetime
    all_day: bool
    description: str = ""
    location: str = ""
    link: str | None = None
    external_body: dict = field(default_factory=dict, compare=False)


def validate_timezone(timezone: str) -> str:
    """Check an IANA timezone name against the host database."""
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {timezone!r}")
    return timezone


def event_bounds(task: Task) -> tuple[date | datetime, date | datetime]:
    """Start and end of the event for a task."""
    if task.time is None:
        return task.date, task.date + timedelta(days=1)
    start = datetime.combine(task.date, task.time)
    return start, start + DEFAULT_DURATION


def build_external_body(
    task: Task,
    identity: Identity,
    start: date | datetime,
    end: date | datetime,
    timezone: str,
) -> dict:
    """Google Calendar event resource for a task."""
    if isinstance(start, datetime):
        start_field = {"dateTime": start.isoformat(timespec="seconds"), "timeZone": timezone}
        end_field = {"dateTime": end.isoformat(timespec="seconds"), "timeZone": timezone}
    else:
        start_field = {"date": start.isoformat()}
        end_field = {"date": end.isoformat()}

    body = {
        "id": identity.event_id,
        "summary": task.title,
        "description": task.description or "",
        "location": task.location or "",
        "start": start_field,
        "end": end_field,
        "reminders": {"useDefault": True},
    }
    if task.link:
        body["source"] = {"title": SOURCE_TITLE, "url": task.link}
    return body


def map_event(task: Task, timezone: str) -> MappedEvent:
    """Map a task to its event representation for both the API and ICS."""
    identity = task_identity(task)
    start, end = event_bounds(task)
    return MappedEvent(
        identity=identity,
        title=task.title,
        start=start,
        end=end,
        all_day=task.is_all_day,
        description=task.description or "",
        location=task.location or "",
        link=task.link or None,
        external_body=build_external_body(task, identity, start, end, timezone),
    )


def map_events(tasks: list[Task], timezone: str) -> list[MappedEvent]:
    """Map a batch of tasks. Any bad task fails the whole batch."""
    validate_timezone(timezone)
    return [map_event(t, timezone) for t in tasks]
