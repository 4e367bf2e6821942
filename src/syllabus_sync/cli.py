"""syllabus-sync CLI - syllabus to calendar."""

import json
import logging
import sys
from pathlib import Path

import click

from .adapters.google_calendar import AuthenticationError, GoogleCalendarAdapter
from .adapters.openai_chat import LLMError, OpenAIChatService
from .adapters.pdf_text import PdfTextExtractor
from .config import load_config
from .core.mapping import validate_timezone
from .core.prompt import ExtractionError
from .core.reconcile import OutcomeStatus
from .workflows import dump_tasks, export_ics, load_tasks, parse_syllabus, sync_tasks


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _read_tasks(path: str, class_id: str = ""):
    try:
        return load_tasks(path, class_id=class_id)
    except json.JSONDecodeError as e:
        _fail(f"{path} is not valid JSON: {e}")
    except ExtractionError as e:
        _fail(str(e))


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """syllabus-sync - turn a syllabus into calendar events."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
def auth():
    """Authenticate with Google Calendar."""
    config = load_config()

    if not config.google_client_secret_file:
        _fail("GOOGLE_CLIENT_SECRET_FILE not set in syllabus-sync.conf")

    adapter = GoogleCalendarAdapter(
        token_dir=config.google_token_dir,
        client_secret_file=config.google_client_secret_file,
    )
    if adapter.authenticate():
        click.echo(f"✓ Token saved to {adapter.token_path}")
    else:
        _fail("Authentication failed")


@main.command()
def calendars():
    """List calendars available for sync."""
    config = load_config()
    adapter = GoogleCalendarAdapter(token_dir=config.google_token_dir)
    try:
        entries = adapter.list_calendars()
    except AuthenticationError as e:
        _fail(str(e))
    except Exception as e:
        _fail(f"Failed to list calendars: {e}")

    if not entries:
        click.echo("No calendars found.")
        return
    for access, name, cal_id in entries:
        click.echo(f"{access:16} {name}  ({cal_id})")


@main.command()
@click.argument("pdf", type=click.Path(exists=True, dir_okay=False))
@click.option("--class-id", default=None, help="Class identifier stamped on every task")
@click.option("--tz", "timezone", default=None, help="IANA timezone (default from config)")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None,
              help="Write tasks JSON here instead of stdout")
def parse(pdf: str, class_id: str | None, timezone: str | None, output: str | None):
    """Extract calendar tasks from a syllabus PDF."""
    config = load_config()
    llm = OpenAIChatService(api_key=config.openai_api_key, model=config.openai_model)

    try:
        tasks = parse_syllabus(
            pdf,
            config,
            extractor=PdfTextExtractor(),
            llm=llm,
            class_id=class_id,
            timezone=timezone,
        )
    except (ExtractionError, LLMError) as e:
        _fail(str(e))

    payload = dump_tasks(tasks)
    if output:
        Path(output).write_text(payload + "\n")
        click.echo(f"✓ {len(tasks)} tasks written to {output}")
    else:
        click.echo(payload)


@main.command()
@click.argument("tasks_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None,
              help="Output .ics path (default: suggested filename)")
@click.option("--calendar-name", default=None, help="Calendar name shown by importing apps")
@click.option("--class-id", default=None, help="Class identifier for the filename")
def export(tasks_json: str, output: str | None, calendar_name: str | None, class_id: str | None):
    """Export tasks to an .ics file."""
    config = load_config()
    tasks = _read_tasks(tasks_json)

    try:
        result = export_ics(tasks, calendar_name=calendar_name or config.calendar_name, class_id=class_id)
    except ValueError as e:
        _fail(str(e))

    path = Path(output or result.filename)
    path.write_bytes(result.content)
    click.echo(f"✓ {len(tasks)} events written to {path}")


@main.command()
@click.argument("tasks_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--calendar-id", default=None, help="Target calendar (default from config)")
@click.option("--tz", "timezone", default=None, help="IANA timezone (default from config)")
@click.option("--json", "as_json", is_flag=True, help="Output per-task results as JSON")
def sync(tasks_json: str, calendar_id: str | None, timezone: str | None, as_json: bool):
    """Insert or update tasks in Google Calendar."""
    config = load_config()
    tasks = _read_tasks(tasks_json)
    calendar_id = calendar_id or config.calendar_id

    try:
        timezone = validate_timezone(timezone or config.timezone)
        report = sync_tasks(
            tasks,
            GoogleCalendarAdapter(token_dir=config.google_token_dir),
            timezone=timezone,
            calendar_id=calendar_id,
        )
    except AuthenticationError as e:
        _fail(str(e))
    except ValueError as e:
        _fail(str(e))

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    for outcome in report.outcomes:
        marker = "✗" if outcome.status is OutcomeStatus.ERROR else "✓"
        detail = outcome.message if outcome.status is OutcomeStatus.ERROR else outcome.status.value
        click.echo(f"  {marker} {outcome.title}: {detail}")

    click.echo(f"\n{report.summary.message}")
    click.echo(f"Open calendar: {report.calendar_url}")
    if report.summary.error_count:
        sys.exit(1)


if __name__ == "__main__":
    main()
