"""OpenFEC Client — paginated House election-date rows for one election year.

Invariants:
    - Query: office=H, election_year, per_page, page; api_key as query parameter
    - Pages fetched sequentially until pagination.pages is reached
    - Any failure raises FecAPIError; partial results are never returned

Design Decisions:
    - Same httpx.AsyncClient + MockTransport seam as CongressApiClient
    - Rows validated with FecElectionRow, handed out as plain dicts for the pure grouper
"""

import logging

import httpx
from pydantic import ValidationError

from compliance_engine.core.errors import FecAPIError
from compliance_engine.schemas.election_snapshot import FecElectionPage

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.open.fec.gov/v1"
ELECTION_DATES_ENDPOINT = "/election-dates/"


class OpenFecClient:
    """Reads election dates from the OpenFEC API."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        page_size: int = 100,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key
        self._url = (base_url or DEFAULT_BASE_URL).rstrip("/") + ELECTION_DATES_ENDPOINT
        self._page_size = page_size
        self._client = httpx.AsyncClient(timeout=timeout_seconds, transport=transport)

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def fetch_election_rows(self, election_year: int) -> list[dict]:
        if not self._api_key:
            raise FecAPIError("API key not configured")

        rows: list[dict] = []
        page, pages = 1, 1
        while page <= pages:
            parsed = await self._fetch_page(election_year, page)
            rows.extend(r.model_dump() for r in parsed.results)
            pages = parsed.pagination.pages
            page += 1

        logger.info(
            f"Fetched {len(rows)} election rows from OpenFEC",
            extra={"election_year": election_year},
        )
        return rows

    async def _fetch_page(self, election_year: int, page: int) -> FecElectionPage:
        params = {
            "api_key": self._api_key,
            "election_year": election_year,
            "office": "H",
            "per_page": self._page_size,
            "page": page,
        }
        try:
            response = await self._client.get(self._url, params=params)
        except httpx.TimeoutException:
            raise FecAPIError("request timed out")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FecAPIError(f"transport error: {e}")

        if not response.is_success:
            raise FecAPIError(
                f"API returned status {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return FecElectionPage.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise FecAPIError(f"malformed payload: {e}")

    async def aclose(self) -> None:
        await self._client.aclose()
