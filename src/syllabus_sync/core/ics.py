"""iCalendar (RFC 5545) document encoding - pure, no I/O."""

from datetime import date, datetime, timezone

from .mapping import MappedEvent

CRLF = "\r\n"
MAX_LINE_OCTETS = 75
PRODUCT_ID = "-//syllabus-sync//ics export//EN"


def escape_text(value: str) -> str:
    """Escape a TEXT value: backslash, semicolon, comma and newlines."""
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\r", "\\n")
        .replace("\n", "\\n")
    )


def unescape_text(value: str) -> str:
    """Inverse of escape_text."""
    out = []
    chars = iter(value)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, "")
        out.append("\n" if nxt in ("n", "N") else nxt)
    return "".join(out)


def fold_line(line: str, limit: int = MAX_LINE_OCTETS) -> str:
    """
    Fold a logical content line into physical lines of at most `limit` octets.

    Continuation lines start with a single space, which counts toward the
    limit. Multi-byte characters are never split.
    """
    if len(line.encode("utf-8")) <= limit:
        return line

    segments = []
    current = ""
    size = 0
    budget = limit
    for ch in line:
        width = len(ch.encode("utf-8"))
        if size + width > budget:
            segments.append(current)
            current = ""
            size = 0
            budget = limit - 1
        current += ch
        size += width
    segments.append(current)
    return (CRLF + " ").join(segments)


def unfold_lines(text: str) -> list[str]:
    """Split a document into logical lines, joining folded continuations."""
    lines: list[str] = []
    for physical in text.split(CRLF):
        if physical.startswith((" ", "\t")) and lines:
            lines[-1] += physical[1:]
        elif physical:
            lines.append(physical)
    return lines


def uri_value(value: str) -> str:
    """URI values are not escaped; line breaks would end the content line."""
    return value.replace("\r", "").replace("\n", "")


def format_date(value: date) -> str:
    return value.strftime("%Y%m%d")


def format_floating(value: datetime) -> str:
    """Local date-time with no zone, interpreted by the importing app."""
    return value.strftime("%Y%m%dT%H%M%S")


def format_utc(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y%m%dT%H%M%SZ")


def render_event(event: MappedEvent, stamp: str) -> list[str]:
    """Unfolded content lines for one VEVENT."""
    lines = [
        "BEGIN:VEVENT",
        f"UID:{event.identity.uid}",
        f"DTSTAMP:{stamp}",
        f"SUMMARY:{escape_text(event.title)}",
    ]
    if event.all_day:
        lines.append(f"DTSTART;VALUE=DATE:{format_date(event.start)}")
        lines.append(f"DTEND;VALUE=DATE:{format_date(event.end)}")
    else:
        lines.append(f"DTSTART:{format_floating(event.start)}")
        lines.append(f"DTEND:{format_floating(event.end)}")

    if event.description:
        lines.append(f"DESCRIPTION:{escape_text(event.description)}")
    if event.location:
        lines.append(f"LOCATION:{escape_text(event.location)}")
    if event.link:
        lines.append(f"URL:{uri_value(event.link)}")
    lines.append("END:VEVENT")
    return lines


def encode_calendar(
    events: list[MappedEvent],
    generated_at: datetime | None = None,
    calendar_name: str | None = None,
) -> str:
    """
    Encode events as an iCalendar document.

    Deterministic for a fixed `generated_at`, which defaults to now (UTC).
    """
    stamp = format_utc(generated_at or datetime.now(timezone.utc))

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODUCT_ID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
    ]
    if calendar_name:
        lines.append(f"X-WR-CALNAME:{escape_text(calendar_name)}")
    for event in events:
        lines.extend(render_event(event, stamp))
    lines.append("END:VCALENDAR")

    rendered = CRLF.join(lines)
    return CRLF.join(fold_line(line) for line in rendered.split(CRLF)) + CRLF
