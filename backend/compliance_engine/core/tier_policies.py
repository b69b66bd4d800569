"""Tier Policies — the per-tier limit table the calculator reads.

Invariants:
    - Exactly one TierPolicy per ComplianceTier
    - guest resets annually and carries annual_cap; compliant resets per election and carries per_election_limit
    - Policies are read-only input: frozen dataclasses, never mutated by the calculator

Design Decisions:
    - Built from settings values rather than module constants: limits come from env (ADR: FEC_* overrides)
    - Passed into the calculator constructor: no deferred lookups of a global table
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from compliance_engine.core.domain_types import ComplianceTier, ResetType


@dataclass(frozen=True)
class TierPolicy:
    """Limit rules for one compliance tier."""
    reset_type: ResetType
    reset_time: str
    per_donation_limit: float
    annual_cap: float | None = None
    per_election_limit: float | None = None
    scope: str = ""
    description: str = ""


def build_compliance_tiers(
    annual_cap: float = 200,
    per_donation: float = 50,
    per_campaign: float = 3500,
) -> Mapping[ComplianceTier, TierPolicy]:
    """Build the immutable tier table from the three FEC limit amounts."""
    return MappingProxyType({
        ComplianceTier.GUEST: TierPolicy(
            reset_type=ResetType.ANNUAL,
            reset_time="midnight_est",
            per_donation_limit=per_donation,
            annual_cap=annual_cap,
            scope=(
                f"per donation, ${annual_cap} total annual cap "
                "across all candidates"
            ),
            description="Anonymous users with basic account",
        ),
        ComplianceTier.COMPLIANT: TierPolicy(
            reset_type=ResetType.ELECTION_CYCLE,
            reset_time="election_date",
            per_donation_limit=per_campaign,
            per_election_limit=per_campaign,
            scope=(
                "per donation, per candidate per election "
                "(primary/general separate)"
            ),
            description="Users with name, address, occupation, employer",
        ),
    })


COMPLIANCE_TIERS = build_compliance_tiers()
