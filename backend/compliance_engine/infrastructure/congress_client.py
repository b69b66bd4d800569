"""Congress.gov Client — single-attempt session lookup with plural/singular path fallback.

Invariants:
    - GET {base}/congresses/{n} first; a 404 there retries once as {base}/congress/{n}
    - Any non-2xx, timeout, transport error, invalid URL or malformed body raises CongressAPIError
    - No retries, no backoff: the session service replaces failures with defaults
    - api_key sent as a query parameter, never logged

Design Decisions:
    - httpx.AsyncClient owned by the client, closed via aclose()/async with (ADR: one pool per process)
    - transport injectable: tests use httpx.MockTransport instead of a network
"""

import logging

import httpx
from pydantic import ValidationError

from compliance_engine.core.errors import CongressAPIError, ErrorContext
from compliance_engine.schemas.congress import CongressSessionPayload

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.congress.gov/v3"


class CongressApiClient:
    """Fetches raw session payloads from Congress.gov."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=timeout_seconds,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def fetch_congress(self, congress: int) -> dict:
        """Return the validated payload for one Congress."""
        ctx = ErrorContext(congress=congress)
        if not self._api_key:
            raise CongressAPIError("API key not configured", context=ctx)

        params = {"api_key": self._api_key, "format": "json"}
        try:
            response = await self._client.get(
                f"{self._base_url}/congresses/{congress}", params=params,
            )
            if response.status_code == 404:
                logger.debug(
                    "Plural congress endpoint returned 404, trying singular",
                    extra={"congress": congress},
                )
                response = await self._client.get(
                    f"{self._base_url}/congress/{congress}", params=params,
                )
        except httpx.TimeoutException:
            raise CongressAPIError("request timed out", context=ctx)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise CongressAPIError(f"transport error: {e}", context=ctx)

        if not response.is_success:
            raise CongressAPIError(
                f"API returned status {response.status_code}: "
                f"{response.reason_phrase}",
                status_code=response.status_code, context=ctx,
            )

        try:
            return CongressSessionPayload.model_validate(
                response.json(),
            ).to_payload()
        except (ValueError, ValidationError) as e:
            raise CongressAPIError(f"malformed payload: {e}", context=ctx)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "CongressApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
