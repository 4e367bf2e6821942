"""Prompt compilation and LLM output parsing for syllabus extraction."""

import json
import re

from .tasks import Task, TaskValidationError

MAX_SOURCE_CHARS = 120_000

_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```$")


class ExtractionError(Exception):
    """Raised when a syllabus cannot be turned into tasks."""

    pass


def build_syllabus_prompt(text: str, class_id: str, timezone: str) -> str:
    """Compile the strict-JSON task extraction prompt."""
    return f"""You are a precise parser. Extract CALENDAR TASKS from the following syllabus text.
Return STRICT JSON matching this TypeScript type:

type TaskType = "assignment" | "reading" | "exam" | "other";
type Task = {{
  title: string;
  type: TaskType;
  date: string;         // ISO: YYYY-MM-DD
  time?: string|null;   // HH:mm 24h or null
  description?: string;
  location?: string;
  link?: string;
  sourcePage?: number;
  classId: string;      // exactly "{class_id}"
  tz?: string;          // default "{timezone}"
}};
{{ tasks: Task[] }}

Rules:
- Only include items that clearly map to a calendar date (e.g., "Jan 24", "10/14").
- Infer the YEAR from context (e.g., "Fall 2025"), otherwise use the closest mentioned year.
- Normalize titles (short but informative). Classify type as "reading", "assignment", "exam", or "other".
- If a date has no explicit time, set time to null.
- If uncertain, exclude the item.
- Output ONLY JSON. No commentary.

SYLLABUS (may be long; summarize content that isn't date-specific):
{text[:MAX_SOURCE_CHARS]}
"""


def strip_code_fences(raw: str) -> str:
    """Remove a markdown code fence wrapped around the model output."""
    text = raw.strip()
    text = _FENCE_START.sub("", text)
    text = _FENCE_END.sub("", text)
    return text.strip()


def parse_tasks_payload(raw: str | dict | list, class_id: str = "") -> list[Task]:
    """
    Parse `{"tasks": [...]}` (or a bare list) into validated tasks.

    Raises:
        ExtractionError: the payload is not JSON or a record fails validation.
    """
    data = raw
    if isinstance(raw, str):
        try:
            data = json.loads(strip_code_fences(raw))
        except json.JSONDecodeError as e:
            raise ExtractionError(f"LLM did not return valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("tasks")
    if not isinstance(data, list):
        raise ExtractionError("Expected a 'tasks' array")

    tasks = []
    for i, item in enumerate(data):
        try:
            tasks.append(Task.from_dict(item, class_id=class_id))
        except TaskValidationError as e:
            raise ExtractionError(f"Task {i}: {e}") from e
    return tasks
