"""Election Cycle Boundary — the one place the primary/general/next-cycle decision lives.

Invariants:
    - Before primary: boundary=primary, next=general
    - Between primary and general (or no primary): boundary=general, next=None
    - After general: the cycle two years on supplies the boundary (its primary, else its general)
    - is_in_current_cycle falls back to the statutory cutoff only when no boundary resolves

Design Decisions:
    - Pinned dates (`dates=`) bypass the resolver for the current cycle so callers can
      evaluate hypothetical calendars (old vs new dates on a change event)
    - Clock injected: "now" is never read from the wall inside decision logic
"""

import logging
from datetime import datetime

from compliance_engine.core.domain_types import (
    Clock, CycleBoundary, ElectionDates, as_utc, utc_midnight, utc_now,
)
from compliance_engine.core.election_calendar import current_election_year
from compliance_engine.core.errors import DataUnavailableError
from compliance_engine.core.limits import opening_cycle_boundary, select_cycle_boundary
from compliance_engine.core.statutory_dates import in_statutory_cycle
from compliance_engine.services.election_dates import ElectionDateResolver

logger = logging.getLogger(__name__)


class ElectionCycleBoundary:
    """Resolves which election date currently resets a state's per-election limit."""

    def __init__(self, resolver: ElectionDateResolver, clock: Clock = utc_now):
        self._resolver = resolver
        self._clock = clock

    def election_year(self) -> int:
        return current_election_year(self._clock().date())

    async def current(
        self, state: str, dates: ElectionDates | None = None,
    ) -> CycleBoundary:
        now = self._clock()
        year = self.election_year()
        if dates is None:
            dates = await self._resolver.resolve(state, year)

        boundary = select_cycle_boundary(now, dates)
        if boundary is not None:
            return boundary

        next_year = year + 2
        logger.info(
            f"General election for {state} has passed, moving to {next_year} cycle",
            extra={"state": state, "election_year": next_year},
        )
        next_dates = await self._resolver.resolve(state, next_year)
        return opening_cycle_boundary(next_dates)

    async def is_in_current_cycle(
        self,
        donation_date: datetime,
        state: str,
        election_type: str = "general",
    ) -> bool:
        """Was the donation made before the requested election, which is still ahead?"""
        now = self._clock()
        try:
            dates = await self._resolver.resolve(state, self.election_year())
        except DataUnavailableError as e:
            logger.error(
                f"Error checking election cycle for {state}: {e}",
                extra={"state": state},
            )
            return in_statutory_cycle(donation_date, now)

        target_day = dates.primary if election_type == "primary" else None
        target = utc_midnight(target_day or dates.general)
        return as_utc(donation_date) < target and as_utc(now) < target
