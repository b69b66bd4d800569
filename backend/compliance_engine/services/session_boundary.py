"""Session Boundary Service — current Congress/session and when it ends, for session-end warnings.

Invariants:
    - Congress/session numbers are pure arithmetic on the clock's year
    - A cache hit short-circuits the network unless force_refresh
    - Any API failure (missing key, timeout, non-2xx, 404 on both path forms) yields the
      constitutional-default payload, cached exactly like a real one
    - Failures are logged once per congress key, never once per call
    - Warning period is [end - 1 month, end); has_ended is now > end

Design Decisions:
    - Cache owned by the instance and injected (ADR: no module-level singleton)
    - Client optional: None behaves like a client without an API key
    - Independent of the limit calculator and notifier; shares only the fallback pattern
"""

import logging
from datetime import datetime

from compliance_engine.core.domain_types import (
    Clock, SessionInfo, utc_midnight, utc_now,
)
from compliance_engine.core.errors import CongressAPIError
from compliance_engine.core.repository_protocols import SessionDataClient
from compliance_engine.core.session_calendar import (
    current_congress,
    current_session,
    fallback_session_payload,
    format_long_date,
    has_session_ended,
    is_in_warning_period,
    session_end_from_payload,
)
from compliance_engine.core.statutory_dates import (
    next_even_year, statutory_general_election,
)
from compliance_engine.infrastructure.session_cache import SessionDataCache

logger = logging.getLogger(__name__)


class SessionBoundaryService:
    """Congressional session status backed by Congress.gov with constitutional defaults."""

    def __init__(
        self,
        client: SessionDataClient | None,
        cache: SessionDataCache | None = None,
        clock: Clock = utc_now,
    ):
        self._client = client
        self._cache = cache if cache is not None else SessionDataCache(clock=clock)
        self._clock = clock
        self._failure_logged: set[int] = set()

    # ─── Arithmetic ──────────────────────────────────────────────

    def get_current_congress(self) -> int:
        return current_congress(self._clock().year)

    def get_current_session(self) -> int:
        return current_session(self._clock().year)

    # ─── Payload ─────────────────────────────────────────────────

    async def fetch_session_data(
        self, congress: int, force_refresh: bool = False,
    ) -> dict:
        if not force_refresh:
            cached = self._cache.get(congress)
            if cached is not None:
                return cached

        if self._client is None or not self._client.configured:
            if congress not in self._failure_logged:
                logger.warning(
                    "Congress.gov API key not configured, using constitutional defaults",
                    extra={"congress": congress},
                )
                self._failure_logged.add(congress)
            return self._store_fallback(congress)

        try:
            payload = await self._client.fetch_congress(congress)
        except CongressAPIError as e:
            if congress not in self._failure_logged:
                logger.warning(
                    f"Failed to fetch session data for Congress {congress}: {e.message}, "
                    "using constitutional defaults",
                    extra={"congress": congress, "error_code": e.code},
                )
                self._failure_logged.add(congress)
            return self._store_fallback(congress)

        self._failure_logged.discard(congress)
        self._cache.set(congress, payload)
        logger.info(
            f"Fetched session data for Congress {congress}",
            extra={"congress": congress},
        )
        return payload

    def get_fallback_session_data(self, congress: int) -> dict:
        return fallback_session_payload(congress)

    def _store_fallback(self, congress: int) -> dict:
        payload = self.get_fallback_session_data(congress)
        self._cache.set(congress, payload)
        return payload

    # ─── Derived status ──────────────────────────────────────────

    async def get_session_end_date(self) -> datetime:
        year = self._clock().year
        payload = await self.fetch_session_data(current_congress(year))
        return session_end_from_payload(payload, current_session(year), year)

    async def has_session_ended(self) -> bool:
        return has_session_ended(self._clock(), await self.get_session_end_date())

    async def is_in_warning_period(self) -> bool:
        return is_in_warning_period(self._clock(), await self.get_session_end_date())

    def get_next_general_election_date(self) -> datetime:
        """Statutory general election of the next even year (this year if even)."""
        year = next_even_year(self._clock().year)
        return utc_midnight(statutory_general_election(year))

    async def get_session_info(self) -> SessionInfo:
        now = self._clock()
        end = await self.get_session_end_date()
        next_election = self.get_next_general_election_date()
        return SessionInfo(
            congress=current_congress(now.year),
            session=current_session(now.year),
            session_end_date=end,
            has_ended=has_session_ended(now, end),
            in_warning_period=is_in_warning_period(now, end),
            next_election_date=next_election,
            formatted_session_end_date=format_long_date(end),
            formatted_next_election_date=format_long_date(next_election),
        )

    async def log_session_status(self) -> SessionInfo:
        info = await self.get_session_info()
        logger.info(
            f"Congress {info.congress} session {info.session} ends "
            f"{info.formatted_session_end_date} "
            f"(ended: {info.has_ended}, warning period: {info.in_warning_period}); "
            f"next general election {info.formatted_next_election_date}",
            extra={"congress": info.congress},
        )
        return info
