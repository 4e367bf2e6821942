"""Functional core - pure business logic with no I/O."""

from .tasks import Task, TaskValidationError, dedupe_tasks
from .identity import Identity, derive_identity, task_identity
from .mapping import MappedEvent, map_event, map_events
from .ics import encode_calendar, escape_text, fold_line
from .reconcile import CalendarServiceError, Outcome, OutcomeStatus, classify_error, reconcile
from .summary import SyncSummary, summarize
from .prompt import ExtractionError, build_syllabus_prompt, parse_tasks_payload

__all__ = [
    # Tasks
    "Task",
    "TaskValidationError",
    "dedupe_tasks",
    # Identity
    "Identity",
    "derive_identity",
    "task_identity",
    # Mapping
    "MappedEvent",
    "map_event",
    "map_events",
    # ICS
    "encode_calendar",
    "escape_text",
    "fold_line",
    # Reconciliation
    "CalendarServiceError",
    "Outcome",
    "OutcomeStatus",
    "classify_error",
    "reconcile",
    "SyncSummary",
    "summarize",
    # Extraction
    "ExtractionError",
    "build_syllabus_prompt",
    "parse_tasks_payload",
]
