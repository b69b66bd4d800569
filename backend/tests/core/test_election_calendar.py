"""Election Calendar — verifies election-year arithmetic and the default-table lookup.

Tests:
    - Odd years look ahead to the next even election year
    - Table entries keep month/day and take the requested year
    - Unknown states get primary=None and the statutory general date
    - Feb 29 clamps in non-leap years
"""

from datetime import date, datetime, timezone

from compliance_engine.core.election_calendar import (
    DEFAULT_ELECTION_DATES,
    current_election_year,
    default_election_dates,
    is_in_current_calendar_year,
    substitute_year,
)
from compliance_engine.core.statutory_dates import statutory_general_election


def test_current_election_year_is_even():
    assert current_election_year(date(2026, 5, 1)) == 2026
    assert current_election_year(date(2025, 5, 1)) == 2026


def test_default_dates_for_known_state():
    tx = default_election_dates("TX", 2026)
    assert tx.primary == date(2026, 3, 3)
    assert tx.general == date(2026, 11, 3)


def test_default_dates_substitute_year():
    ca = default_election_dates("CA", 2028)
    assert ca.primary == date(2028, 6, 2)
    assert ca.general == date(2028, 11, 3)


def test_unknown_state_gets_statutory_general_only():
    assert "WY" not in DEFAULT_ELECTION_DATES
    wy = default_election_dates("WY", 2028)
    assert wy.state == "WY"
    assert wy.primary is None
    assert wy.general == statutory_general_election(2028) == date(2028, 11, 7)


def test_statutory_helper_is_injectable():
    wy = default_election_dates("WY", 2026, statutory_general=lambda y: date(y, 11, 9))
    assert wy.general == date(2026, 11, 9)


def test_injected_table_without_primary():
    table = {"AK": {"primary": None, "general": "2026-11-03"}}
    ak = default_election_dates("AK", 2030, table)
    assert ak.primary is None
    assert ak.general == date(2030, 11, 3)


def test_every_state_resolves_a_general_date():
    for state in list(DEFAULT_ELECTION_DATES) + ["WY", "AK", "ZZ"]:
        for year in (2026, 2028, 2030):
            assert default_election_dates(state, year).general is not None


def test_substitute_year_clamps_leap_day():
    assert substitute_year("2024-02-29", 2027) == date(2027, 2, 28)
    assert substitute_year("2024-02-29", 2028) == date(2028, 2, 29)


def test_is_in_current_calendar_year():
    now = datetime(2026, 6, 1, tzinfo=timezone.utc)
    assert is_in_current_calendar_year(datetime(2026, 1, 1, tzinfo=timezone.utc), now)
    assert not is_in_current_calendar_year(datetime(2025, 12, 31, 23, tzinfo=timezone.utc), now)
