"""Tests for Google Calendar adapter."""

import json
from datetime import date
from unittest.mock import patch, MagicMock

import httplib2
import pytest
from google.auth.exceptions import TransportError
from googleapiclient.errors import HttpError

from syllabus_sync.adapters.google_calendar import AuthenticationError, GoogleCalendarAdapter
from syllabus_sync.core.reconcile import CalendarServiceError, ErrorKind, OutcomeStatus, classify_error, reconcile
from syllabus_sync.core.tasks import Task

BODY = {"id": "syl-abc", "summary": "Midterm", "start": {"date": "2025-03-10"}, "end": {"date": "2025-03-11"}}


def http_error(status: int, message: str) -> HttpError:
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(httplib2.Response({"status": status}), content)


class TestGoogleCalendarAdapter:
    """Tests for GoogleCalendarAdapter."""

    def test_token_path(self):
        adapter = GoogleCalendarAdapter(token_dir="/home/user/.config/google")
        assert adapter.token_path.name == "token.json"
        assert "google" in str(adapter.token_path)

    def test_missing_token_raises(self, tmp_path):
        adapter = GoogleCalendarAdapter(token_dir=str(tmp_path))
        with pytest.raises(AuthenticationError, match="auth"):
            adapter._get_credentials()

    def test_supplied_credentials_used_as_is(self, tmp_path):
        creds = object()
        adapter = GoogleCalendarAdapter(token_dir=str(tmp_path), credentials=creds)
        assert adapter._get_credentials() is creds

    @patch("syllabus_sync.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_update_passes_ids(self, mock_build):
        service = MagicMock()
        mock_build.return_value = service
        service.events().update().execute.return_value = {"htmlLink": "https://cal/1"}

        adapter = GoogleCalendarAdapter(token_dir="/tmp/test")
        result = adapter.update("primary", "syl-abc", BODY)

        assert result == {"htmlLink": "https://cal/1"}
        service.events().update.assert_called_with(calendarId="primary", eventId="syl-abc", body=BODY)

    @patch("syllabus_sync.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_insert(self, mock_build):
        service = MagicMock()
        mock_build.return_value = service
        service.events().insert().execute.return_value = {"htmlLink": "https://cal/2"}

        adapter = GoogleCalendarAdapter(token_dir="/tmp/test")
        assert adapter.insert("primary", BODY) == {"htmlLink": "https://cal/2"}
        service.events().insert.assert_called_with(calendarId="primary", body=BODY)

    @patch("syllabus_sync.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_import_uses_import_method(self, mock_build):
        service = MagicMock()
        mock_build.return_value = service
        service.events().import_().execute.return_value = {"htmlLink": "https://cal/3"}

        adapter = GoogleCalendarAdapter(token_dir="/tmp/test")
        assert adapter.import_("primary", BODY) == {"htmlLink": "https://cal/3"}
        service.events().import_.assert_called_with(calendarId="primary", body=BODY)

    @patch("syllabus_sync.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_http_error_becomes_calendar_service_error(self, mock_build):
        service = MagicMock()
        mock_build.return_value = service
        service.events().update().execute.side_effect = http_error(404, "Not Found")

        adapter = GoogleCalendarAdapter(token_dir="/tmp/test")
        with pytest.raises(CalendarServiceError) as exc_info:
            adapter.update("primary", "syl-abc", BODY)

        assert exc_info.value.status == 404
        assert "Not Found" in exc_info.value.message
        assert classify_error(exc_info.value) is ErrorKind.NOT_FOUND

    @patch("syllabus_sync.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_invalid_id_error_is_classified(self, mock_build):
        service = MagicMock()
        mock_build.return_value = service
        service.events().update().execute.side_effect = http_error(400, "Invalid resource id value.")

        adapter = GoogleCalendarAdapter(token_dir="/tmp/test")
        with pytest.raises(CalendarServiceError) as exc_info:
            adapter.update("primary", "syl-abc", BODY)
        assert classify_error(exc_info.value) is ErrorKind.INVALID_ID

    @patch("syllabus_sync.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_network_error_becomes_calendar_service_error(self, mock_build):
        service = MagicMock()
        mock_build.return_value = service
        service.events().insert().execute.side_effect = TimeoutError("timed out")

        adapter = GoogleCalendarAdapter(token_dir="/tmp/test")
        with pytest.raises(CalendarServiceError) as exc_info:
            adapter.insert("primary", BODY)
        assert exc_info.value.status is None
        assert "timed out" in exc_info.value.message

    @pytest.mark.parametrize(
        "error",
        [
            httplib2.ServerNotFoundError("Unable to find the server at www.googleapis.com"),
            httplib2.RedirectLimit("Redirected more times than redirection_limit allows.", None, ""),
            TransportError("Connection aborted."),
        ],
    )
    @patch("syllabus_sync.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_transport_errors_become_calendar_service_error(self, mock_build, error):
        service = MagicMock()
        mock_build.return_value = service
        service.events().update().execute.side_effect = error

        adapter = GoogleCalendarAdapter(token_dir="/tmp/test")
        with pytest.raises(CalendarServiceError) as exc_info:
            adapter.update("primary", "syl-abc", BODY)
        assert exc_info.value.status is None
        assert exc_info.value.message.startswith("Network error")

    @patch("syllabus_sync.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_unreachable_server_yields_one_error_per_task(self, mock_build):
        service = MagicMock()
        mock_build.return_value = service
        failure = httplib2.ServerNotFoundError("Unable to find the server at www.googleapis.com")
        service.events().update().execute.side_effect = failure
        service.events().insert().execute.side_effect = failure
        service.events().import_().execute.side_effect = failure

        tasks = [Task(title="A", date=date(2025, 3, 10)), Task(title="B", date=date(2025, 3, 11))]
        outcomes = reconcile(tasks, GoogleCalendarAdapter(token_dir="/tmp/test"), "UTC")

        assert [o.status for o in outcomes] == [OutcomeStatus.ERROR, OutcomeStatus.ERROR]
        assert [o.title for o in outcomes] == ["A", "B"]
        assert all("Unable to find the server" in o.message for o in outcomes)

    @patch("syllabus_sync.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_list_calendars(self, mock_build):
        service = MagicMock()
        mock_build.return_value = service
        service.calendarList().list().execute.return_value = {
            "items": [
                {"accessRole": "owner", "summary": "me@gmail.com", "id": "primary-id"},
                {"accessRole": "writer", "summary": "Law School", "id": "law@group.calendar.google.com"},
            ]
        }

        adapter = GoogleCalendarAdapter(token_dir="/tmp/test")
        assert adapter.list_calendars() == [
            ("owner", "me@gmail.com", "primary-id"),
            ("writer", "Law School", "law@group.calendar.google.com"),
        ]

    def test_authenticate_without_secret_file(self, tmp_path):
        adapter = GoogleCalendarAdapter(token_dir=str(tmp_path))
        assert adapter.authenticate() is False

    def test_authenticate_missing_secret_file(self, tmp_path):
        adapter = GoogleCalendarAdapter(token_dir=str(tmp_path), client_secret_file=str(tmp_path / "nope.json"))
        assert adapter.authenticate() is False

    @patch("google_auth_oauthlib.flow.InstalledAppFlow.from_client_secrets_file")
    def test_authenticate_saves_token(self, mock_flow, tmp_path):
        secret = tmp_path / "client_secret.json"
        secret.write_text("{}")
        creds = MagicMock()
        creds.to_json.return_value = '{"token": "abc"}'
        mock_flow.return_value.run_local_server.return_value = creds

        adapter = GoogleCalendarAdapter(token_dir=str(tmp_path / "google"), client_secret_file=str(secret))
        assert adapter.authenticate() is True
        assert adapter.token_path.read_text() == '{"token": "abc"}'
        assert adapter._get_credentials() is creds
