"""Limit Arithmetic — pure annual-reset detection, cycle-boundary selection and remaining-limit math.

Invariants:
    - remaining = max(0, effective - consumed); never negative
    - A donation counts only if not defunct, not paused and (by default) not resolved
    - Compliant consumption is scoped to exactly one pol_id; candidates are never aggregated
    - should_annual_reset uses a fixed -5h Eastern offset (DST deliberately ignored)
    - select_cycle_boundary returns None once the general election has passed

Design Decisions:
    - Pure functions over a stateful calculator: the service resolves dates (IO),
      these compute (ADR: impureim sandwich)
    - count_resolved flag keeps the resolved-donation discrepancy explicit instead of hard-coding it
"""

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from compliance_engine.core.domain_types import (
    ComplianceTier,
    CycleBoundary,
    Donation,
    EffectiveLimits,
    ElectionDates,
    as_utc,
    utc_midnight,
)
from compliance_engine.core.tier_policies import TierPolicy

EASTERN_OFFSET = timedelta(hours=-5)


def should_annual_reset(moment: datetime) -> bool:
    """True iff the Eastern-adjusted date is Dec 31 or Jan 1."""
    eastern = as_utc(moment) + EASTERN_OFFSET
    return (eastern.month, eastern.day) in ((12, 31), (1, 1))


def is_countable(donation: Donation, count_resolved: bool = False) -> bool:
    """Does this donation consume limit? Resolved ones are excluded unless count_resolved."""
    if donation.defunct or donation.paused:
        return False
    if donation.resolved and not count_resolved:
        return False
    return True


def _sum(donations: Iterable[Donation]) -> float:
    return sum(d.donation for d in donations)


def annual_limits(
    policy: TierPolicy,
    donations: Iterable[Donation],
    now: datetime,
    count_resolved: bool = False,
) -> EffectiveLimits:
    """Guest tier: calendar-year consumption against annual_cap."""
    now = as_utc(now)
    start_of_year = datetime(now.year, 1, 1, tzinfo=timezone.utc)
    next_year = datetime(now.year + 1, 1, 1, tzinfo=timezone.utc)
    cap = policy.annual_cap or 0

    if should_annual_reset(now):
        remaining = cap
    else:
        consumed = _sum(
            d for d in donations
            if is_countable(d, count_resolved)
            and as_utc(d.created_at).year == now.year
        )
        remaining = max(0, cap - consumed)

    return EffectiveLimits(
        compliance_tier=ComplianceTier.GUEST,
        reset_type=policy.reset_type,
        reset_time=policy.reset_time,
        effective_limit=cap,
        remaining_limit=remaining,
        reset_date=start_of_year,
        next_reset_date=next_year,
    )


def select_cycle_boundary(
    now: datetime, dates: ElectionDates,
) -> CycleBoundary | None:
    """Which election governs right now. None means this cycle is over."""
    now = as_utc(now)
    general = utc_midnight(dates.general)
    primary = utc_midnight(dates.primary) if dates.primary else None
    if primary and now < primary:
        return CycleBoundary(reset_date=primary, next_reset_date=general)
    if now < general:
        return CycleBoundary(reset_date=general, next_reset_date=None)
    return None


def opening_cycle_boundary(dates: ElectionDates) -> CycleBoundary:
    """First boundary of a cycle that has not started yet: its primary, else its general."""
    opening = dates.primary or dates.general
    return CycleBoundary(
        reset_date=utc_midnight(opening),
        next_reset_date=utc_midnight(dates.general),
    )


def cycle_limits(
    policy: TierPolicy,
    donations: Iterable[Donation],
    pol_id: str | None,
    boundary: CycleBoundary,
    count_resolved: bool = False,
) -> EffectiveLimits:
    """Compliant tier: one candidate's consumption before the boundary against per_election_limit."""
    limit = policy.per_election_limit or 0
    consumed = _sum(
        d for d in donations
        if is_countable(d, count_resolved)
        and d.pol_id == pol_id
        and as_utc(d.created_at) < boundary.reset_date
    )
    return EffectiveLimits(
        compliance_tier=ComplianceTier.COMPLIANT,
        reset_type=policy.reset_type,
        reset_time=policy.reset_time,
        effective_limit=limit,
        remaining_limit=max(0, limit - consumed),
        reset_date=boundary.reset_date,
        next_reset_date=boundary.next_reset_date,
    )
