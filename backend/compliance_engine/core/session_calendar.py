"""Session Calendar — pure Congress/session arithmetic and constitutional defaults.

Invariants:
    - current_congress(year) == (year - 1787) // 2   (2025 -> 119)
    - Even year -> session 2, odd year -> session 1
    - Fallback payload: both sessions end Jan 3 of the year after they start
    - Warning period is the half-open interval [end - 1 month, end)

Design Decisions:
    - Payload kept as the raw dict shape Congress.gov returns: the cache stores exactly
      what was fetched or synthesized (ADR: fallback indistinguishable from a real payload)
    - Month subtraction clamps the day (Mar 31 -> Feb 28/29) without a date library
"""

import calendar
from datetime import date, datetime

from compliance_engine.core.domain_types import as_utc, utc_midnight

FIRST_CONGRESS_BASE_YEAR = 1787
CONSTITUTIONAL_END_MONTH = 1
CONSTITUTIONAL_END_DAY = 3


def current_congress(year: int) -> int:
    return (year - FIRST_CONGRESS_BASE_YEAR) // 2


def current_session(year: int) -> int:
    return 2 if year % 2 == 0 else 1


def fallback_session_payload(congress: int) -> dict:
    """Constitutional-default payload for a Congress the API could not describe."""
    start_year = FIRST_CONGRESS_BASE_YEAR + congress * 2
    end_year = start_year + 1
    return {
        "congress": congress,
        "startYear": start_year,
        "endYear": end_year,
        "sessions": [
            {
                "session": 1,
                "startDate": f"{start_year}-01-03",
                "endDate": f"{end_year}-01-03",
            },
            {
                "session": 2,
                "startDate": f"{end_year}-01-03",
                "endDate": f"{end_year + 1}-01-03",
            },
        ],
    }


def constitutional_session_end(year: int) -> datetime:
    """Jan 3 of the following year."""
    return utc_midnight(
        date(year + 1, CONSTITUTIONAL_END_MONTH, CONSTITUTIONAL_END_DAY),
    )


def session_end_from_payload(
    payload: dict, session: int, year: int,
) -> datetime:
    """End date of `session` from a payload, or the constitutional default."""
    for entry in payload.get("sessions") or []:
        if not isinstance(entry, dict) or entry.get("session") != session:
            continue
        raw = entry.get("endDate")
        if not raw:
            break
        try:
            return _parse_end_date(raw)
        except ValueError:
            break
    return constitutional_session_end(year)


def _parse_end_date(raw: str) -> datetime:
    if len(raw) == 10:
        return utc_midnight(date.fromisoformat(raw))
    return as_utc(datetime.fromisoformat(raw.replace("Z", "+00:00")))


def minus_one_month(moment: datetime) -> datetime:
    year, month = (moment.year - 1, 12) if moment.month == 1 else (moment.year, moment.month - 1)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def has_session_ended(now: datetime, session_end: datetime) -> bool:
    return as_utc(now) > session_end


def is_in_warning_period(now: datetime, session_end: datetime) -> bool:
    now = as_utc(now)
    return minus_one_month(session_end) <= now < session_end


def format_long_date(moment: datetime) -> str:
    """'Sunday, January 3, 2027': the en-US long form used in email templates."""
    return f"{moment:%A, %B} {moment.day}, {moment.year}"
