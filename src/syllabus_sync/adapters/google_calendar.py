"""Google Calendar API adapter."""

import logging
from pathlib import Path

from syllabus_sync.core.reconcile import CalendarServiceError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar.events", "https://www.googleapis.com/auth/calendar.readonly"]


class AuthenticationError(Exception):
    """Raised when no usable Google credentials are available."""

    pass


def _error_message(error) -> str:
    """Readable message from a googleapiclient HttpError."""
    reason = getattr(error, "reason", "") or ""
    if not isinstance(reason, str) or not reason.strip():
        reason = str(error)
    return " ".join(reason.split())[:500]


class GoogleCalendarAdapter:
    """
    Writes events to Google Calendar via the API.

    Implements CalendarService protocol. Credentials are either handed in
    (already authorized) or loaded from token.json in `token_dir`.
    """

    def __init__(
        self,
        token_dir: str,
        client_secret_file: str = "",
        credentials=None,
    ):
        self.token_dir = token_dir
        self.client_secret_file = client_secret_file
        self._credentials = credentials
        self._token_path = Path(token_dir).expanduser() / "token.json"
        self._service = None

    @property
    def token_path(self) -> Path:
        return self._token_path

    def _get_credentials(self):
        """Load credentials from token.json, refreshing if needed."""
        from google.auth.exceptions import RefreshError
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials

        if self._credentials is not None:
            return self._credentials

        if not self._token_path.exists():
            raise AuthenticationError(f"No token at {self._token_path}. Run 'syllabus-sync auth' first.")

        creds = Credentials.from_authorized_user_file(str(self._token_path), SCOPES)

        if creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
            except RefreshError as e:
                raise AuthenticationError(f"Failed to refresh Google token: {e}") from e
            self._token_path.write_text(creds.to_json())
            self._token_path.chmod(0o600)

        self._credentials = creds
        return creds

    def _build_service(self):
        """Build a Google Calendar API service."""
        from googleapiclient.discovery import build

        if self._service is None:
            creds = self._get_credentials()
            self._service = build("calendar", "v3", credentials=creds, cache_discovery=False)
        return self._service

    def _execute(self, request) -> dict:
        """Execute an API request, translating failures to CalendarServiceError."""
        import httplib2
        from google.auth.exceptions import RefreshError, TransportError
        from googleapiclient.errors import HttpError

        try:
            return request.execute() or {}
        except HttpError as e:
            raise CalendarServiceError(e.resp.status, _error_message(e)) from e
        except RefreshError as e:
            raise CalendarServiceError(401, f"Google token refresh failed: {e}") from e
        except (OSError, TransportError, httplib2.HttpLib2Error) as e:
            logger.warning(f"Google Calendar transport error: {e}")
            raise CalendarServiceError(None, f"Network error: {e}") from e

    def authenticate(self) -> bool:
        """Run OAuth flow and save the token. Returns True on success."""
        from google_auth_oauthlib.flow import InstalledAppFlow

        if not self.client_secret_file:
            logger.error("No client secret file configured")
            return False

        secret_path = Path(self.client_secret_file).expanduser()
        if not secret_path.exists():
            logger.error(f"Client secret file not found: {secret_path}")
            return False

        flow = InstalledAppFlow.from_client_secrets_file(str(secret_path), SCOPES)
        creds = flow.run_local_server(port=0)

        self._token_path.parent.mkdir(parents=True, exist_ok=True)
        self._token_path.write_text(creds.to_json())
        self._token_path.chmod(0o600)
        self._credentials = creds
        self._service = None
        return True

    def update(self, calendar_id: str, event_id: str, body: dict) -> dict:
        service = self._build_service()
        return self._execute(service.events().update(calendarId=calendar_id, eventId=event_id, body=body))

    def insert(self, calendar_id: str, body: dict) -> dict:
        service = self._build_service()
        return self._execute(service.events().insert(calendarId=calendar_id, body=body))

    def import_(self, calendar_id: str, body: dict) -> dict:
        service = self._build_service()
        return self._execute(service.events().import_(calendarId=calendar_id, body=body))

    def list_calendars(self) -> list[tuple[str, str, str]]:
        """List calendars as (accessRole, summary, id) tuples."""
        service = self._build_service()
        result = self._execute(service.calendarList().list())
        return [
            (entry.get("accessRole", ""), entry.get("summary", ""), entry.get("id", ""))
            for entry in result.get("items", [])
        ]
