"""Calendar service interface."""

from typing import Protocol


class CalendarService(Protocol):
    """
    Interface for writing events to a remote calendar.

    Each method returns the stored event resource (including `htmlLink`) or
    raises CalendarServiceError with the remote status code and message.
    """

    def update(self, calendar_id: str, event_id: str, body: dict) -> dict:
        """Overwrite the event stored at `event_id`."""
        ...

    def insert(self, calendar_id: str, body: dict) -> dict:
        """Create a new event."""
        ...

    def import_(self, calendar_id: str, body: dict) -> dict:
        """Import an event, keeping its client-supplied identifiers."""
        ...
