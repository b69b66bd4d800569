"""Election Date Resolver — walks ElectionDateSource strategies, weakest last.

Invariants:
    - Sources are consulted in order; the first non-None answer wins
    - A source that raises is logged and skipped like a miss
    - If every source misses, the statutory general date is returned with primary=None
    - Only the statutory step may raise (DataUnavailableError); everything else degrades
    - default_dates ends in the same statutory step as resolve

Design Decisions:
    - Strategy list injected (snapshot, then constants in production; in-memory fixtures in tests)
    - Statutory helper injected, not looked up lazily
"""

import logging
from collections.abc import Mapping, Sequence

from compliance_engine.core.domain_types import ElectionDates
from compliance_engine.core.election_calendar import (
    DEFAULT_ELECTION_DATES, StatutoryGeneral, default_election_dates,
)
from compliance_engine.core.errors import DataUnavailableError, ErrorContext
from compliance_engine.core.repository_protocols import ElectionDateSource
from compliance_engine.core.statutory_dates import statutory_general_election

logger = logging.getLogger(__name__)


class ElectionDateResolver:
    """Resolves a state's dates for a year through progressively weaker sources."""

    def __init__(
        self,
        sources: Sequence[ElectionDateSource],
        statutory_general: StatutoryGeneral = statutory_general_election,
        default_table: Mapping[str, Mapping[str, str]] = DEFAULT_ELECTION_DATES,
    ):
        self._sources = list(sources)
        self._statutory_general = statutory_general
        self._default_table = default_table

    async def resolve(self, state: str, year: int) -> ElectionDates:
        for source in self._sources:
            try:
                dates = await source.get_election_dates(state, year)
            except Exception as e:
                logger.warning(
                    f"{type(source).__name__} failed for {state} in {year}: {e}",
                    extra={"state": state, "election_year": year},
                )
                continue
            if dates is not None:
                return dates
        return self.statutory(state, year)

    def statutory(self, state: str, year: int) -> ElectionDates:
        """Last resort: statutory general only."""
        try:
            general = self._statutory_general(year)
        except Exception as e:
            raise DataUnavailableError(
                f"No election dates resolvable for {state} in {year}: {e}",
                ErrorContext(state=state),
            )
        logger.warning(
            f"Using statutory general election date for {state} in {year}",
            extra={"state": state, "election_year": year},
        )
        return ElectionDates(state=state, general=general, primary=None)

    def default_dates(self, state: str, year: int) -> ElectionDates:
        """Year-substituted table entry, else the statutory general date."""
        entry = self._default_table.get(state)
        if not entry or not entry.get("general"):
            return self.statutory(state, year)
        return default_election_dates(
            state, year, self._default_table, self._statutory_general,
        )
