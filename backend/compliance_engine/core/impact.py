"""Impact Assessment — pure comparison of before/after limits and election dates for one donor.

Invariants:
    - Only compliant donors can be impacted (guest has no election-cycle limits)
    - A limit change wins: its description says whether the limit rose or fell
    - With equal limits, any primary/general difference is still an impact,
      including None <-> date transitions
    - OCD-ID matching requires a congressional-district suffix (cd:<digits>)

Design Decisions:
    - Per-candidate evaluation: the candidate with the largest limit swing is reported,
      so per-candidate caps are never summed into one figure
    - Descriptions are plain sentences handed to the email template as-is
"""

import re
from collections.abc import Mapping

from compliance_engine.core.domain_types import (
    ComplianceTier, EffectiveLimits, ElectionDates, NotificationImpact,
)

LIMIT_INCREASED = (
    "Your donation limit has increased, giving you more flexibility "
    "to support causes you care about."
)
LIMIT_DECREASED = (
    "Your donation limit has decreased, which may affect your ability "
    "to make new Celebrations."
)
TIMELINE_CHANGED = (
    "The election timeline has changed, which affects when your donation "
    "limits reset and the timing of your political engagement."
)
NOT_COMPLIANT = "User is not Compliant tier (no election cycle limits)"


def dates_changed(old: ElectionDates, new: ElectionDates) -> bool:
    return old.primary != new.primary or old.general != new.general


def not_applicable(tier: str) -> NotificationImpact | None:
    """Short-circuit for donors whose tier has no election-cycle limits."""
    if tier != ComplianceTier.COMPLIANT.value:
        return NotificationImpact(has_impact=False, reason=NOT_COMPLIANT)
    return None


def assess_impact(
    old_limits: Mapping[str | None, EffectiveLimits],
    new_limits: Mapping[str | None, EffectiveLimits],
    old_dates: ElectionDates,
    new_dates: ElectionDates,
) -> NotificationImpact:
    """Compare per-candidate limits keyed by pol_id, then the dates themselves."""
    pol_id = _largest_swing(old_limits, new_limits)
    old_remaining = old_limits[pol_id].remaining_limit
    new_remaining = new_limits[pol_id].remaining_limit

    if old_remaining != new_remaining:
        return NotificationImpact(
            has_impact=True,
            old_limit=old_remaining,
            new_limit=new_remaining,
            limit_changed=True,
            pol_id=pol_id,
            impact_description=(
                LIMIT_INCREASED if new_remaining > old_remaining
                else LIMIT_DECREASED
            ),
        )

    timeline_moved = dates_changed(old_dates, new_dates)
    return NotificationImpact(
        has_impact=timeline_moved,
        old_limit=old_remaining,
        new_limit=new_remaining,
        limit_changed=False,
        pol_id=pol_id,
        impact_description=TIMELINE_CHANGED if timeline_moved else "",
    )


def _largest_swing(
    old_limits: Mapping[str | None, EffectiveLimits],
    new_limits: Mapping[str | None, EffectiveLimits],
) -> str | None:
    return max(
        old_limits,
        key=lambda pid: abs(
            new_limits[pid].remaining_limit - old_limits[pid].remaining_limit
        ),
    )


def ocd_state_pattern(state: str) -> re.Pattern:
    return re.compile(
        rf"ocd-division/country:us/state:{re.escape(state.lower())}/cd:\d+"
    )


def ocd_state_prefix(state: str) -> str:
    """Prefix usable in a SQL LIKE before the regex check."""
    return f"ocd-division/country:us/state:{state.lower()}/cd:"


def matches_state_ocd_id(ocd_id: str | None, state: str) -> bool:
    return bool(ocd_id) and ocd_state_pattern(state).search(ocd_id) is not None
