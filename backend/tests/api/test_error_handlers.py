"""Error Handlers — verifies compliance errors become structured HTTP responses.

Tests:
    - ConfigurationError -> 400 with its code, logged at WARNING
    - DataUnavailableError -> 503 with state context, logged at ERROR
    - Non-compliance exceptions are not translated
"""

import logging

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from compliance_engine.api.error_handlers import register_error_handlers
from compliance_engine.core.errors import (
    DataUnavailableError, ErrorContext, UnknownComplianceTierError,
)

LOGGER = "compliance_engine.api.error_handlers"


def _handler_logs(caplog):
    return [r for r in caplog.records if r.name == LOGGER]


@pytest.fixture
async def client():
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/limits/{tier}")
    async def limits(tier: str):
        raise UnknownComplianceTierError(tier)

    @app.get("/dates")
    async def election_dates():
        raise DataUnavailableError("No election dates resolvable", ErrorContext(state="TX"))

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c


async def test_configuration_error_is_400(client, caplog):
    caplog.set_level(logging.WARNING, logger=LOGGER)
    res = await client.get("/limits/platinum")

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "UNKNOWN_COMPLIANCE_TIER"
    assert error["category"] == "configuration"
    assert error["message"] == "Invalid compliance tier: platinum"
    assert [r.levelno for r in _handler_logs(caplog)] == [logging.WARNING]


async def test_data_unavailable_is_503(client, caplog):
    caplog.set_level(logging.WARNING, logger=LOGGER)
    res = await client.get("/dates")

    assert res.status_code == 503
    assert res.json()["error"]["context"]["state"] == "TX"
    (record,) = _handler_logs(caplog)
    assert record.levelno == logging.ERROR
    assert record.state == "TX"


async def test_other_exceptions_left_to_the_app(client, caplog):
    caplog.set_level(logging.WARNING, logger=LOGGER)
    res = await client.get("/boom")

    assert res.status_code == 500
    assert "secret" not in res.text
    assert _handler_logs(caplog) == []
