"""Shared workflow layer behind the CLI.

Wires the functional core to the adapters: syllabus -> tasks, tasks -> .ics,
tasks -> Google Calendar.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .config import Config
from .core.ics import encode_calendar
from .core.mapping import map_events
from .core.prompt import ExtractionError, MAX_SOURCE_CHARS, build_syllabus_prompt, parse_tasks_payload
from .core.reconcile import Outcome, calendar_url, reconcile
from .core.summary import SyncSummary, summarize
from .core.tasks import Task, dedupe_tasks
from .ports import CalendarService, LLMService, TextExtractor

logger = logging.getLogger(__name__)

ICS_CONTENT_TYPE = "text/calendar; charset=utf-8"


@dataclass
class IcsExport:
    """A downloadable calendar document."""

    content: bytes
    filename: str
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class SyncReport:
    """Per-task outcomes of a sync plus their summary."""

    outcomes: list[Outcome]
    summary: SyncSummary
    calendar_url: str

    def to_dict(self) -> dict:
        return {
            "ok": True,
            "results": [o.to_dict() for o in self.outcomes],
            "summary": self.summary.to_dict(),
            "calendarUrl": self.calendar_url,
        }


def parse_syllabus(
    path: Path | str,
    config: Config,
    extractor: TextExtractor,
    llm: LLMService,
    class_id: str | None = None,
    timezone: str | None = None,
) -> list[Task]:
    """Extract text, run the extraction prompt, validate and de-duplicate tasks."""
    class_id = class_id or config.default_class_id
    timezone = timezone or config.timezone

    text = extractor.extract(path)
    if not text.strip():
        raise ExtractionError("No text found in PDF (encrypted or image-only?)")
    if len(text) > MAX_SOURCE_CHARS:
        logger.info(f"Truncating syllabus text from {len(text)} to {MAX_SOURCE_CHARS} characters")
        text = text[:MAX_SOURCE_CHARS]

    prompt = build_syllabus_prompt(text, class_id, timezone)
    raw = llm.generate(prompt)
    tasks = parse_tasks_payload(raw, class_id=class_id)

    unique = dedupe_tasks(tasks)
    if len(unique) != len(tasks):
        logger.info(f"Dropped {len(tasks) - len(unique)} duplicate tasks")
    return unique


def load_tasks(path: Path | str, class_id: str = "") -> list[Task]:
    """Read a tasks JSON file: {"tasks": [...]} or a bare list."""
    return parse_tasks_payload(json.loads(Path(path).read_text()), class_id=class_id)


def dump_tasks(tasks: list[Task]) -> str:
    return json.dumps({"tasks": [t.to_dict() for t in tasks]}, indent=2)


def ics_filename(class_id: str | None = None) -> str:
    return f"syllabus-{class_id}.ics" if class_id else "syllabus.ics"


def export_ics(
    tasks: list[Task],
    calendar_name: str | None = None,
    class_id: str | None = None,
    generated_at: datetime | None = None,
) -> IcsExport:
    """Render tasks as an .ics download. Any bad task fails the whole export."""
    # Floating local times ignore the zone; any valid name will do.
    events = map_events(tasks, "UTC")
    document = encode_calendar(events, generated_at=generated_at, calendar_name=calendar_name)
    filename = ics_filename(class_id)
    return IcsExport(
        content=document.encode("utf-8"),
        filename=filename,
        headers={
            "Content-Type": ICS_CONTENT_TYPE,
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-store",
        },
    )


def sync_tasks(
    tasks: list[Task],
    service: CalendarService,
    timezone: str,
    calendar_id: str = "primary",
) -> SyncReport:
    """Reconcile tasks against the remote calendar and summarize."""
    if not tasks:
        raise ValueError("No tasks")

    logger.info(f"Syncing {len(tasks)} tasks to calendar {calendar_id}")
    outcomes = reconcile(tasks, service, timezone=timezone, calendar_id=calendar_id)
    summary = summarize(outcomes)
    logger.info(summary.message)
    return SyncReport(outcomes=outcomes, summary=summary, calendar_url=calendar_url(calendar_id))
