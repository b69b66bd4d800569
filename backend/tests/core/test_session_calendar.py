"""Session Calendar — verifies Congress/session arithmetic, fallback payloads and the warning window.

Tests:
    - 2025 is the 119th Congress, session 1; 2026 is session 2
    - Fallback sessions both end Jan 3 of the year after they start
    - Missing or malformed end dates fall back to the constitutional Jan 3
    - Warning period is half-open: [end - 1 month, end)
"""

from datetime import datetime, timedelta, timezone

from compliance_engine.core.session_calendar import (
    constitutional_session_end,
    current_congress,
    current_session,
    fallback_session_payload,
    format_long_date,
    has_session_ended,
    is_in_warning_period,
    minus_one_month,
    session_end_from_payload,
)


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def test_current_congress():
    assert current_congress(2025) == 119
    assert current_congress(2026) == 119
    assert current_congress(2027) == 120


def test_current_session():
    assert current_session(2025) == 1
    assert current_session(2026) == 2


def test_fallback_payload_shape():
    payload = fallback_session_payload(119)
    assert payload["congress"] == 119
    assert payload["startYear"] == 2025
    assert payload["endYear"] == 2026
    assert [s["endDate"] for s in payload["sessions"]] == ["2026-01-03", "2027-01-03"]


def test_session_end_read_from_payload():
    payload = {"sessions": [{"session": 2, "endDate": "2026-12-20"}]}
    assert session_end_from_payload(payload, 2, 2026) == _utc(2026, 12, 20)


def test_session_end_accepts_timestamps():
    payload = {"sessions": [{"session": 1, "endDate": "2025-12-19T17:00:00Z"}]}
    assert session_end_from_payload(payload, 1, 2025) == _utc(2025, 12, 19, 17)


def test_missing_session_uses_constitutional_default():
    payload = {"sessions": [{"session": 1, "endDate": "2026-01-03"}]}
    assert session_end_from_payload(payload, 2, 2026) == _utc(2027, 1, 3)
    assert session_end_from_payload({}, 2, 2026) == constitutional_session_end(2026)


def test_malformed_end_date_uses_constitutional_default():
    payload = {"sessions": [{"session": 2, "endDate": "soon"}]}
    assert session_end_from_payload(payload, 2, 2026) == _utc(2027, 1, 3)


def test_minus_one_month_clamps_day():
    assert minus_one_month(_utc(2027, 1, 3)) == _utc(2026, 12, 3)
    assert minus_one_month(_utc(2027, 3, 31)) == _utc(2027, 2, 28)


def test_warning_period_is_half_open():
    end = _utc(2027, 1, 3)
    start = _utc(2026, 12, 3)
    assert is_in_warning_period(start, end) is True
    assert is_in_warning_period(end - timedelta(seconds=1), end) is True
    assert is_in_warning_period(start - timedelta(seconds=1), end) is False
    assert is_in_warning_period(end, end) is False


def test_has_session_ended_strictly_after():
    end = _utc(2027, 1, 3)
    assert has_session_ended(end, end) is False
    assert has_session_ended(end + timedelta(seconds=1), end) is True


def test_format_long_date():
    assert format_long_date(_utc(2027, 1, 3)) == "Sunday, January 3, 2027"
