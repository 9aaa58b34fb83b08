import json
import logging
from datetime import datetime

from meetsync.config import load_settings
from meetsync.logging import JsonFormatter, _resolve_level
from meetsync.models.meeting import Meeting
from meetsync.services.display import (
    display_title,
    format_meeting_datetime,
    format_time,
    greeting,
    initials,
    today_label,
)


def test_title_falls_back_to_id():
    assert display_title(Meeting(id=12, event_id="e", meeting_title="")) == "Recording 12"
    assert display_title(Meeting(id=12, event_id="e", meeting_title="Retro")) == "Retro"


def test_datetime_and_time_labels():
    assert format_meeting_datetime("2024-07-04", "16:05:00") == "Jul 04, 2024 • 04:05 PM"
    assert format_meeting_datetime(None) == "Unknown date"
    assert format_meeting_datetime("yesterday", "10:00") == "Invalid date"
    assert format_time("07:15") == "07:15 AM"
    assert format_time("") == "Unknown time"
    assert format_time("25:99") == "Invalid time"


def test_greeting_and_header():
    assert greeting("sam", datetime(2024, 1, 1, 8)) == "Good morning, sam"
    assert greeting(None, datetime(2024, 1, 1, 13)) == "Good afternoon"
    assert today_label(datetime(2024, 1, 1, 8)) == "Monday, January 01, 2024"
    assert initials(None) == "US"


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("MEETSYNC_API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv("MEETSYNC_DEDUPE_MEETINGS", "true")
    monkeypatch.setenv("MEETSYNC_DB_PATH", str(tmp_path / "x.db"))
    s = load_settings()
    assert s.api_base_url == "https://api.example.com"
    assert s.dedupe_meetings is True
    assert s.db_path == tmp_path / "x.db"
    assert s.recent_limit == 10


def test_json_log_lines(monkeypatch):
    record = logging.LogRecord("app.sync", logging.WARNING, __file__, 1, "sync failed", None, None)
    data = json.loads(JsonFormatter().format(record))
    assert data["level"] == "WARNING"
    assert data["logger"] == "app.sync"
    assert data["message"] == "sync failed"

    monkeypatch.setenv("MEETSYNC_LOG_LEVEL", "debug")
    assert _resolve_level() == logging.DEBUG
    monkeypatch.setenv("MEETSYNC_LOG_LEVEL", "nonsense")
    assert _resolve_level() == logging.INFO


def test_json_log_lines_merge_structured_fields():
    record = logging.LogRecord("app.access", logging.INFO, __file__, 1, "GET /health 200", None, None)
    record.fields = {"request_id": "abc123", "status": 200, "duration_ms": 4}
    data = json.loads(JsonFormatter().format(record))
    assert data["message"] == "GET /health 200"
    assert data["request_id"] == "abc123"
    assert data["status"] == 200
    assert data["duration_ms"] == 4
