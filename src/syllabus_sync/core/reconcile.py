"""Idempotent upsert of tasks against a remote calendar.

Each task walks a three-tier fallback chain:

    UPDATE  -> overwrite the event stored at the derived id
    INSERT  -> create the event without a client-supplied id
    IMPORT  -> create the event through import, which accepts client ids
    DONE

Only "not found" / "invalid id" failures of UPDATE move on to INSERT; any
INSERT failure moves on to IMPORT; everything else ends the chain with an
error outcome. Per-task failures never abort the run.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote

from .mapping import MappedEvent, map_events
from .tasks import Task

logger = logging.getLogger(__name__)

PERMISSION_DENIED_MESSAGE = (
    "Google returned 403 (insufficient permissions). The saved authorization is "
    "stale or lacks calendar write access. Revoke access at myaccount.google.com "
    "> Security > Third-party access, then run 'syllabus-sync auth' again."
)
CALENDAR_WEB_URL = "https://calendar.google.com/calendar/u/0/r"


class CalendarServiceError(Exception):
    """Raised by a calendar service when a request fails."""

    def __init__(self, status: int | None, message: str = ""):
        self.status = status
        self.message = message
        super().__init__(f"Calendar API request failed ({status}): {message}")


class ErrorKind(Enum):
    NOT_FOUND = "not_found"
    INVALID_ID = "invalid_id"
    PERMISSION_DENIED = "permission_denied"
    OTHER = "other"


RECOVERABLE = {ErrorKind.NOT_FOUND, ErrorKind.INVALID_ID}


class Tier(Enum):
    UPDATE = "update"
    INSERT = "insert"
    IMPORT = "import"
    DONE = "done"


class OutcomeStatus(str, Enum):
    INSERTED = "inserted"
    UPDATED = "updated"
    ERROR = "error"


@dataclass(frozen=True)
class Outcome:
    """Result of reconciling one task."""

    identity: str
    status: OutcomeStatus
    external_link: str | None = None
    message: str | None = None
    title: str = ""

    def to_dict(self) -> dict:
        data = {"id": self.identity, "status": self.status.value}
        if self.external_link:
            data["htmlLink"] = self.external_link
        if self.message:
            data["message"] = self.message
        return data


def classify_error(error: CalendarServiceError) -> ErrorKind:
    """Best-effort classification from the remote status code and message."""
    message = (error.message or "").lower()
    if error.status == 404:
        return ErrorKind.NOT_FOUND
    if error.status == 400 and ("invalid resource id" in message or "invalid id" in message):
        return ErrorKind.INVALID_ID
    if error.status == 403:
        return ErrorKind.PERMISSION_DENIED
    return ErrorKind.OTHER


def next_tier(tier: Tier, error: CalendarServiceError) -> Tier:
    """Tier to try after `tier` failed with `error`."""
    if tier is Tier.UPDATE:
        return Tier.INSERT if classify_error(error) in RECOVERABLE else Tier.DONE
    if tier is Tier.INSERT:
        return Tier.IMPORT
    return Tier.DONE


def error_message(tier: Tier, error: CalendarServiceError) -> str:
    """User-facing message for a task whose chain ended at `tier`."""
    if classify_error(error) is ErrorKind.PERMISSION_DENIED:
        return PERMISSION_DENIED_MESSAGE
    if error.message:
        return error.message
    return "update failed" if tier is Tier.UPDATE else "insert/import failed"


def attempt(tier: Tier, service, calendar_id: str, event: MappedEvent) -> dict:
    """Run the request for one tier. Raises CalendarServiceError on failure."""
    body = event.external_body
    if tier is Tier.UPDATE:
        return service.update(calendar_id, event.identity.event_id, body)
    if tier is Tier.INSERT:
        return service.insert(calendar_id, {k: v for k, v in body.items() if k != "id"})
    if tier is Tier.IMPORT:
        return service.import_(calendar_id, {**body, "iCalUID": event.identity.uid})
    raise ValueError(f"No request for tier {tier}")


def reconcile_event(event: MappedEvent, service, calendar_id: str) -> Outcome:
    """Walk the fallback chain for one event."""
    tier = Tier.UPDATE
    while True:
        try:
            result = attempt(tier, service, calendar_id, event)
        except CalendarServiceError as e:
            following = next_tier(tier, e)
            logger.debug(f"{tier.value} failed for {event.identity.event_id} ({e.status}): {e.message}")
            if following is Tier.DONE:
                message = error_message(tier, e)
                logger.warning(f"Could not sync '{event.title}': {message}")
                return Outcome(
                    identity=event.identity.event_id,
                    status=OutcomeStatus.ERROR,
                    message=message,
                    title=event.title,
                )
            tier = following
            continue

        status = OutcomeStatus.UPDATED if tier is Tier.UPDATE else OutcomeStatus.INSERTED
        logger.debug(f"{tier.value} succeeded for {event.identity.event_id}")
        return Outcome(
            identity=event.identity.event_id,
            status=status,
            external_link=(result or {}).get("htmlLink") or None,
            title=event.title,
        )


def reconcile(
    tasks: list[Task],
    service,
    timezone: str,
    calendar_id: str = "primary",
) -> list[Outcome]:
    """
    Upsert each task into the remote calendar, one at a time.

    Args:
        tasks: Validated tasks.
        service: A CalendarService implementation.
        timezone: IANA zone attached to timed events.
        calendar_id: Target calendar.

    Returns:
        One Outcome per task, in input order.
    """
    events = map_events(tasks, timezone)
    return [reconcile_event(event, service, calendar_id) for event in events]


def calendar_url(calendar_id: str) -> str:
    """Web link to the target calendar."""
    if calendar_id == "primary":
        return CALENDAR_WEB_URL
    return f"{CALENDAR_WEB_URL}?cid={quote(calendar_id, safe='')}"
