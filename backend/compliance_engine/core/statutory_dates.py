"""Statutory Dates — federal general-election arithmetic used as the last-resort boundary.

Invariants:
    - statutory_general_election(year) is always a Tuesday in November, between the 2nd and the 8th
    - next_even_year(y) == y for even y, y + 1 otherwise
    - in_statutory_cycle is the legacy cutoff check; it only needs a donation date and "now"

Design Decisions:
    - "First Tuesday after the first Monday" is computed as first Tuesday in November,
      bumped to the 8th when that Tuesday is the 1st (the Monday would come after it)
    - Pure date arithmetic, no timezone calibration: callers compare at UTC midnight
"""

from datetime import date, datetime

from compliance_engine.core.domain_types import as_utc, utc_midnight

_TUESDAY = 1  # date.weekday()


def statutory_general_election(year: int) -> date:
    """General election day for `year`: first Tuesday after the first Monday in November."""
    first = date(year, 11, 1)
    offset = (_TUESDAY - first.weekday()) % 7
    election = first.replace(day=1 + offset)
    if election.day == 1:
        election = election.replace(day=8)
    return election


def next_even_year(year: int) -> int:
    return year if year % 2 == 0 else year + 1


def in_statutory_cycle(donation_date: datetime, now: datetime) -> bool:
    """Legacy cutoff: does a donation count toward the cycle that is current at `now`?

    A donation made before its own year's statutory general counts. A donation made
    after it belongs to the following year's election, and counts toward the current
    cycle only once that election has also passed.
    """
    donated = as_utc(donation_date)
    election = utc_midnight(statutory_general_election(donated.year))
    if donated < election:
        return True
    following = utc_midnight(statutory_general_election(donated.year + 1))
    return not (donated < following and as_utc(now) <= following)
