"""Election Calendar — election-year arithmetic and the hard-coded per-state default table.

Invariants:
    - current_election_year is always even
    - default_election_dates never returns a None general date
    - States missing from the table get the statutory general date and primary=None
    - Table entries are year-agnostic: only month/day are used, the year is substituted

Design Decisions:
    - Table stored as ISO strings like the snapshot file, parsed at lookup (ADR: one date format on disk and in code)
    - Feb 29 in the table clamps to Feb 28 when substituted into a non-leap year
    - Statutory helper injected as a parameter: no deferred import of a global helper
"""

from collections.abc import Callable, Mapping
from datetime import date, datetime

from compliance_engine.core.domain_types import ElectionDates, as_utc
from compliance_engine.core.statutory_dates import (
    next_even_year, statutory_general_election,
)

StatutoryGeneral = Callable[[int], date]

# House primary dates; general is the federal statutory Tuesday.
DEFAULT_ELECTION_DATES: Mapping[str, Mapping[str, str]] = {
    "AZ": {"primary": "2026-07-21", "general": "2026-11-03"},
    "CA": {"primary": "2026-06-02", "general": "2026-11-03"},
    "CO": {"primary": "2026-06-30", "general": "2026-11-03"},
    "FL": {"primary": "2026-08-18", "general": "2026-11-03"},
    "GA": {"primary": "2026-05-19", "general": "2026-11-03"},
    "IL": {"primary": "2026-03-17", "general": "2026-11-03"},
    "IN": {"primary": "2026-05-05", "general": "2026-11-03"},
    "MA": {"primary": "2026-09-01", "general": "2026-11-03"},
    "MI": {"primary": "2026-08-04", "general": "2026-11-03"},
    "MN": {"primary": "2026-08-11", "general": "2026-11-03"},
    "MO": {"primary": "2026-08-04", "general": "2026-11-03"},
    "NC": {"primary": "2026-03-03", "general": "2026-11-03"},
    "NJ": {"primary": "2026-06-02", "general": "2026-11-03"},
    "NY": {"primary": "2026-06-23", "general": "2026-11-03"},
    "OH": {"primary": "2026-05-05", "general": "2026-11-03"},
    "PA": {"primary": "2026-05-19", "general": "2026-11-03"},
    "TX": {"primary": "2026-03-03", "general": "2026-11-03"},
    "VA": {"primary": "2026-06-16", "general": "2026-11-03"},
    "WA": {"primary": "2026-08-04", "general": "2026-11-03"},
    "WI": {"primary": "2026-08-11", "general": "2026-11-03"},
}


def current_election_year(today: date) -> int:
    """Election years are even; odd years look ahead to the next one."""
    return next_even_year(today.year)


def is_in_current_calendar_year(moment: datetime, now: datetime) -> bool:
    return as_utc(moment).year == as_utc(now).year


def substitute_year(iso_day: str, year: int) -> date:
    """Keep month/day from an ISO date string, replace the year."""
    template = date.fromisoformat(iso_day)
    if template.month == 2 and template.day == 29:
        try:
            return template.replace(year=year)
        except ValueError:
            return date(year, 2, 28)
    return template.replace(year=year)


def default_election_dates(
    state: str,
    year: int,
    table: Mapping[str, Mapping[str, str]] = DEFAULT_ELECTION_DATES,
    statutory_general: StatutoryGeneral = statutory_general_election,
) -> ElectionDates:
    """Year-substituted defaults, or statutory general only when the state is unknown."""
    entry = table.get(state)
    if not entry or not entry.get("general"):
        return ElectionDates(
            state=state, general=statutory_general(year), primary=None,
        )
    primary = entry.get("primary")
    return ElectionDates(
        state=state,
        general=substitute_year(entry["general"], year),
        primary=substitute_year(primary, year) if primary else None,
    )
