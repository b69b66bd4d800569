"""Session Boundary Service — verifies caching, constitutional fallback and derived session status.

Tests:
    - 2025 -> Congress 119; even year -> session 2
    - Cache hit skips the network unless force_refresh
    - Missing key / API failure / invalid base URL -> fallback payload, cached, logged once per congress
    - Session end read from the payload, Jan 3 default otherwise
    - SessionInfo aggregates end date, warning period and next general election
"""

import logging
from datetime import datetime, timezone

from compliance_engine.core.session_calendar import fallback_session_payload
from compliance_engine.infrastructure.congress_client import CongressApiClient
from compliance_engine.infrastructure.session_cache import SessionDataCache
from compliance_engine.services.session_boundary import SessionBoundaryService
from tests.services.fakes import FakeSessionClient, fixed_clock

LOGGER = "compliance_engine.services.session_boundary"


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def _service(client=None, now=(2026, 6, 15)):
    clock = fixed_clock(*now)
    return SessionBoundaryService(client, SessionDataCache(clock=clock), clock)


def _payload(session_two_end: str) -> dict:
    return {
        "congress": 119,
        "startYear": 2025,
        "endYear": 2026,
        "sessions": [
            {"session": 1, "startDate": "2025-01-03", "endDate": "2026-01-03"},
            {"session": 2, "startDate": "2026-01-03", "endDate": session_two_end},
        ],
    }


def test_congress_and_session_arithmetic():
    assert _service(now=(2025, 3, 1)).get_current_congress() == 119
    assert _service(now=(2025, 3, 1)).get_current_session() == 1
    assert _service(now=(2026, 3, 1)).get_current_session() == 2


async def test_missing_client_uses_fallback_and_logs_once(caplog):
    caplog.set_level(logging.WARNING, logger=LOGGER)
    service = _service()

    first = await service.fetch_session_data(119)
    await service.fetch_session_data(119, force_refresh=True)

    assert first == fallback_session_payload(119)
    warnings = [r for r in caplog.records if "not configured" in r.getMessage()]
    assert len(warnings) == 1


async def test_missing_key_logged_once_per_congress(caplog):
    caplog.set_level(logging.WARNING, logger=LOGGER)
    service = _service(FakeSessionClient(configured=False))

    await service.fetch_session_data(119)
    await service.fetch_session_data(119, force_refresh=True)
    await service.fetch_session_data(120)

    warnings = [r for r in caplog.records if "not configured" in r.getMessage()]
    assert [r.congress for r in warnings] == [119, 120]


async def test_invalid_base_url_falls_back():
    async with CongressApiClient(
        "key", base_url="https://api.congress.gov:8o8o/v3",
    ) as client:
        service = _service(client, now=(2026, 12, 10))

        payload = await service.fetch_session_data(119)
        end = await service.get_session_end_date()
        info = await service.get_session_info()

    assert payload == fallback_session_payload(119)
    assert end == _utc(2027, 1, 3)
    assert info.in_warning_period is True


async def test_unconfigured_client_is_never_called():
    client = FakeSessionClient(_payload("2026-12-20"), configured=False)
    await _service(client).fetch_session_data(119)
    assert client.calls == []


async def test_successful_fetch_is_cached():
    client = FakeSessionClient(_payload("2026-12-20"))
    service = _service(client)

    await service.fetch_session_data(119)
    await service.fetch_session_data(119)
    assert client.calls == [119]

    await service.fetch_session_data(119, force_refresh=True)
    assert client.calls == [119, 119]


async def test_failure_caches_fallback_and_logs_once_per_congress(caplog):
    caplog.set_level(logging.WARNING, logger=LOGGER)
    client = FakeSessionClient(fail=True)
    service = _service(client)

    payload = await service.fetch_session_data(119)
    await service.fetch_session_data(119)
    await service.fetch_session_data(119, force_refresh=True)
    await service.fetch_session_data(120)

    assert payload == fallback_session_payload(119)
    assert client.calls == [119, 119, 120]
    failures = [r for r in caplog.records if "Failed to fetch session data" in r.getMessage()]
    assert len(failures) == 2


async def test_session_end_from_api_payload():
    service = _service(FakeSessionClient(_payload("2026-12-20")))
    assert await service.get_session_end_date() == _utc(2026, 12, 20)


async def test_session_end_constitutional_default():
    assert await _service().get_session_end_date() == _utc(2027, 1, 3)


async def test_has_session_ended():
    service = _service(FakeSessionClient(_payload("2026-06-01")))
    assert await service.has_session_ended() is True
    assert await _service().has_session_ended() is False


async def test_warning_period_window():
    assert await _service(now=(2026, 12, 10)).is_in_warning_period() is True
    assert await _service(now=(2026, 11, 30)).is_in_warning_period() is False


def test_next_general_election_date():
    assert _service(now=(2025, 3, 1)).get_next_general_election_date() == _utc(2026, 11, 3)
    assert _service(now=(2026, 6, 15)).get_next_general_election_date() == _utc(2026, 11, 3)


async def test_session_info_aggregates_status():
    info = await _service(now=(2026, 12, 10)).get_session_info()

    assert info.congress == 119
    assert info.session == 2
    assert info.session_end_date == _utc(2027, 1, 3)
    assert info.has_ended is False
    assert info.in_warning_period is True
    assert info.formatted_session_end_date == "Sunday, January 3, 2027"
    assert info.formatted_next_election_date == "Tuesday, November 3, 2026"


async def test_log_session_status(caplog):
    caplog.set_level(logging.INFO, logger=LOGGER)
    info = await _service().log_session_status()
    assert info.congress == 119
    assert any("Congress 119 session 2" in r.getMessage() for r in caplog.records)
