"""Impact Assessment — verifies when an election-date change counts as affecting a donor.

Tests:
    - Guests are never impacted
    - A remaining-limit change wins and says whether it rose or fell
    - Equal limits still count when primary/general moved, including None <-> date
    - The candidate with the largest swing is reported
    - OCD-ID matching requires the state and a district suffix
"""

from datetime import date

from compliance_engine.core.domain_types import (
    ComplianceTier, EffectiveLimits, ElectionDates, ResetType,
)
from compliance_engine.core.impact import (
    LIMIT_DECREASED,
    LIMIT_INCREASED,
    NOT_COMPLIANT,
    TIMELINE_CHANGED,
    assess_impact,
    dates_changed,
    matches_state_ocd_id,
    not_applicable,
)

OLD = ElectionDates(state="TX", primary=date(2026, 3, 3), general=date(2026, 11, 3))
MOVED = ElectionDates(state="TX", primary=date(2026, 5, 26), general=date(2026, 11, 3))


def _limits(remaining: float) -> EffectiveLimits:
    return EffectiveLimits(
        compliance_tier=ComplianceTier.COMPLIANT,
        reset_type=ResetType.ELECTION_CYCLE,
        reset_time="election_date",
        effective_limit=3500,
        remaining_limit=remaining,
    )


def test_guest_is_not_applicable():
    impact = not_applicable("guest")
    assert impact.has_impact is False
    assert impact.reason == NOT_COMPLIANT
    assert not_applicable("compliant") is None


def test_limit_increase():
    impact = assess_impact({"A": _limits(2500)}, {"A": _limits(3500)}, OLD, MOVED)
    assert impact.has_impact is True
    assert impact.limit_changed is True
    assert impact.old_limit == 2500
    assert impact.new_limit == 3500
    assert impact.impact_description == LIMIT_INCREASED


def test_limit_decrease():
    impact = assess_impact({"A": _limits(3500)}, {"A": _limits(2500)}, OLD, MOVED)
    assert impact.impact_description == LIMIT_DECREASED


def test_equal_limits_with_moved_dates_is_timeline_change():
    impact = assess_impact({None: _limits(3500)}, {None: _limits(3500)}, OLD, MOVED)
    assert impact.has_impact is True
    assert impact.limit_changed is False
    assert impact.impact_description == TIMELINE_CHANGED


def test_primary_appearing_counts_as_change():
    no_primary = ElectionDates(state="TX", general=date(2026, 11, 3))
    assert dates_changed(no_primary, OLD) is True
    impact = assess_impact({None: _limits(3500)}, {None: _limits(3500)}, no_primary, OLD)
    assert impact.has_impact is True


def test_no_change_no_impact():
    impact = assess_impact({"A": _limits(3000)}, {"A": _limits(3000)}, OLD, OLD)
    assert impact.has_impact is False
    assert impact.impact_description == ""


def test_largest_swing_candidate_reported():
    old = {"A": _limits(3400), "B": _limits(1000)}
    new = {"A": _limits(3500), "B": _limits(3500)}
    impact = assess_impact(old, new, OLD, MOVED)
    assert impact.pol_id == "B"
    assert impact.old_limit == 1000


def test_ocd_id_matching():
    assert matches_state_ocd_id("ocd-division/country:us/state:tx/cd:7", "TX")
    assert not matches_state_ocd_id("ocd-division/country:us/state:ca/cd:7", "TX")
    assert not matches_state_ocd_id("ocd-division/country:us/state:tx", "TX")
    assert not matches_state_ocd_id(None, "TX")
