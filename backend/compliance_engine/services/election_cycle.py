"""Election Cycle Service — remaining donation limits per compliance tier.

Invariants:
    - guest: annual cap, calendar-year consumption, full cap on Dec 31 / Jan 1 (Eastern, fixed -5h)
    - compliant: per-election limit, per-candidate consumption before the governing election date
    - Unknown tier or compliant-without-state raises ConfigurationError (never a business result)
    - get_election_dates never returns a null general date; it raises DataUnavailableError
      only when the injected statutory helper fails, exactly like get_effective_limits
    - validate_donation_limits never raises; the reason tag says why it refused

Design Decisions:
    - Tier table, date resolver, cycle boundary and clock injected via constructor
      (ADR: no deferred imports to dodge cycles)
    - Pure arithmetic delegated to core/limits.py; this class only orchestrates IO
    - `election_dates=` pins the calendar for what-if evaluation (used by the notifier)
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime

from compliance_engine.core.domain_types import (
    Clock,
    ComplianceTier,
    Donation,
    EffectiveLimits,
    ElectionDates,
    ResetType,
    ValidationFailure,
    ValidationResult,
    utc_now,
)
from compliance_engine.core.election_calendar import (
    current_election_year, is_in_current_calendar_year,
)
from compliance_engine.core.errors import (
    ConfigurationError,
    DataUnavailableError,
    MissingStateError,
    UnknownComplianceTierError,
)
from compliance_engine.core.limits import annual_limits, cycle_limits, should_annual_reset
from compliance_engine.core.tier_policies import TierPolicy
from compliance_engine.services.election_cycle_boundary import ElectionCycleBoundary
from compliance_engine.services.election_dates import ElectionDateResolver

logger = logging.getLogger(__name__)


class ElectionCycleService:
    """Computes effective/remaining limits and their reset dates."""

    def __init__(
        self,
        tiers: Mapping[ComplianceTier, TierPolicy],
        resolver: ElectionDateResolver,
        clock: Clock = utc_now,
        count_resolved: bool = False,
    ):
        self._tiers = tiers
        self._resolver = resolver
        self._clock = clock
        self._count_resolved = count_resolved
        self.boundary = ElectionCycleBoundary(resolver, clock)

    @property
    def count_resolved(self) -> bool:
        return self._count_resolved

    # ─── Calendar ────────────────────────────────────────────────

    def get_current_election_year(self) -> int:
        return current_election_year(self._clock().date())

    def is_in_current_calendar_year(self, moment: datetime) -> bool:
        return is_in_current_calendar_year(moment, self._clock())

    async def is_in_current_election_cycle(
        self, donation_date: datetime, state: str, election_type: str = "general",
    ) -> bool:
        return await self.boundary.is_in_current_cycle(
            donation_date, state, election_type,
        )

    async def get_election_dates(
        self, state: str, year: int | None = None,
    ) -> ElectionDates:
        """Snapshot, then defaults, then statutory general."""
        return await self._resolver.resolve(state, year or self.get_current_election_year())

    def get_default_election_dates(self, state: str, year: int) -> ElectionDates:
        return self._resolver.default_dates(state, year)

    @staticmethod
    def should_annual_reset(moment: datetime) -> bool:
        return should_annual_reset(moment)

    # ─── Limits ──────────────────────────────────────────────────

    def _policy(self, tier: ComplianceTier | str) -> tuple[ComplianceTier, TierPolicy]:
        try:
            resolved = ComplianceTier(tier)
        except ValueError:
            raise UnknownComplianceTierError(tier)
        policy = self._tiers.get(resolved)
        if policy is None:
            raise UnknownComplianceTierError(tier)
        return resolved, policy

    async def get_effective_limits(
        self,
        tier: ComplianceTier | str,
        donations: Iterable[Donation],
        pol_id: str | None = None,
        state: str | None = None,
        election_dates: ElectionDates | None = None,
    ) -> EffectiveLimits:
        resolved, policy = self._policy(tier)

        if policy.reset_type is ResetType.ANNUAL:
            return annual_limits(
                policy, donations, self._clock(), self._count_resolved,
            )

        if policy.reset_type is ResetType.ELECTION_CYCLE:
            if not state:
                raise MissingStateError(resolved.value)
            boundary = await self.boundary.current(state, election_dates)
            return cycle_limits(
                policy, donations, pol_id, boundary, self._count_resolved,
            )

        raise ConfigurationError(
            f"Unsupported reset type {policy.reset_type} for tier {resolved.value}",
        )

    async def validate_donation_limits(
        self,
        tier: ComplianceTier | str,
        donations: Iterable[Donation],
        attempted_amount: float,
        pol_id: str | None = None,
        state: str | None = None,
    ) -> ValidationResult:
        """Would `attempted_amount` fit in the remaining limit? Tagged, never raises."""
        try:
            limits = await self.get_effective_limits(tier, donations, pol_id, state)
        except ConfigurationError as e:
            logger.error(
                f"Error validating donation limits: {e.message}",
                extra={"error_code": e.code, "tier": str(tier), "state": state},
            )
            return ValidationResult.rejected(ValidationFailure.CONFIGURATION_ERROR)
        except DataUnavailableError as e:
            logger.error(
                f"Error validating donation limits: {e.message}",
                extra={"error_code": e.code, "tier": str(tier), "state": state},
            )
            return ValidationResult.rejected(ValidationFailure.DATA_UNAVAILABLE)
        except Exception as e:
            logger.error(
                f"Unexpected error validating donation limits: {e}",
                exc_info=True,
                extra={"tier": str(tier), "state": state},
            )
            return ValidationResult.rejected(ValidationFailure.DATA_UNAVAILABLE)

        if attempted_amount <= limits.remaining_limit:
            return ValidationResult.accepted(limits.remaining_limit)
        return ValidationResult.rejected(
            ValidationFailure.OVER_LIMIT, limits.remaining_limit,
        )
