"""Domain Types — value objects and enums shared by the limit engine, session service and notifier.

Invariants:
    - ComplianceTier has exactly two members: guest and compliant
    - ElectionDates.general is never None; primary may be None
    - Donation is a read-only projection: the engine filters and sums, never mutates
    - EffectiveLimits.remaining_limit is never negative
    - All datetimes handed around are timezone-aware UTC

Design Decisions:
    - Frozen dataclasses for value objects: created fresh per call, no identity (ADR: value semantics)
    - str Enums: serialize straight into email payloads and JSON snapshots
    - Clock is a plain callable: services take one so tests pin "now" deterministically
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

StateCode = NewType("StateCode", str)   # two-letter USPS code, upper case
PolId = NewType("PolId", str)
DonorId = NewType("DonorId", str)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Normalize to aware UTC; naive datetimes are taken to already be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def utc_midnight(day: date) -> datetime:
    """Election dates are compared as UTC midnight of the calendar day."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


# ─── Enums ───────────────────────────────────────────────────────

class ComplianceTier(str, Enum):
    """Donor classification. Monotonic guest -> compliant (enforced upstream)."""
    GUEST = "guest"
    COMPLIANT = "compliant"


class ResetType(str, Enum):
    """How a tier's limit replenishes."""
    ANNUAL = "annual"
    ELECTION_CYCLE = "election_cycle"


class ValidationFailure(str, Enum):
    """Why a donation attempt was not accepted."""
    OVER_LIMIT = "over_limit"
    CONFIGURATION_ERROR = "configuration_error"
    DATA_UNAVAILABLE = "data_unavailable"


class EmailTopic(str, Enum):
    """Unsubscribe topics the notifier respects."""
    ELECTION_UPDATES = "election_updates"


# ─── Value Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class ElectionDates:
    """Primary/general dates for one state in one election year."""
    state: str
    general: date
    primary: date | None = None

    def to_dict(self) -> dict:
        return {
            "state": self.state,
            "primary": self.primary.isoformat() if self.primary else None,
            "general": self.general.isoformat(),
        }


@dataclass(frozen=True)
class Donation:
    """Caller-supplied projection of one celebration/donation record."""
    pol_id: str
    donation: float
    created_at: datetime
    resolved: bool = False
    defunct: bool = False
    paused: bool = False


@dataclass(frozen=True)
class EffectiveLimits:
    """Calculator output. Fresh on every call."""
    compliance_tier: ComplianceTier
    reset_type: ResetType
    reset_time: str
    effective_limit: float
    remaining_limit: float
    reset_date: datetime | None = None
    next_reset_date: datetime | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Tagged outcome of a donation-limit check."""
    ok: bool
    reason: ValidationFailure | None = None
    remaining_limit: float | None = None

    @classmethod
    def accepted(cls, remaining_limit: float) -> "ValidationResult":
        return cls(ok=True, remaining_limit=remaining_limit)

    @classmethod
    def rejected(
        cls, reason: ValidationFailure, remaining_limit: float | None = None,
    ) -> "ValidationResult":
        return cls(ok=False, reason=reason, remaining_limit=remaining_limit)


@dataclass(frozen=True)
class CycleBoundary:
    """The election date that currently governs a compliant donor's limit."""
    reset_date: datetime
    next_reset_date: datetime | None = None


@dataclass(frozen=True)
class SessionInfo:
    """Derived congressional-session status for callers and email templates."""
    congress: int
    session: int
    session_end_date: datetime
    has_ended: bool
    in_warning_period: bool
    next_election_date: datetime
    formatted_session_end_date: str
    formatted_next_election_date: str

    def to_dict(self) -> dict:
        return {
            "currentCongress": self.congress,
            "currentSession": self.session,
            "sessionEndDate": self.session_end_date.isoformat(),
            "hasEnded": self.has_ended,
            "inWarningPeriod": self.in_warning_period,
            "nextElectionDate": self.next_election_date.isoformat(),
            "formattedSessionEndDate": self.formatted_session_end_date,
            "formattedNextElectionDate": self.formatted_next_election_date,
        }


@dataclass(frozen=True)
class DonorRecord:
    """What the notifier needs to know about a donor."""
    id: str
    email: str
    first_name: str | None = None
    compliance: str = ComplianceTier.GUEST.value
    ocd_id: str | None = None


@dataclass(frozen=True)
class NotificationImpact:
    """Per-donor effect of an election-date change. Not persisted."""
    has_impact: bool
    impact_description: str = ""
    old_limit: float | None = None
    new_limit: float | None = None
    limit_changed: bool | None = None
    pol_id: str | None = None
    reason: str | None = None


@dataclass(frozen=True)
class NotificationSummary:
    """Aggregate result of one election-date change event."""
    state: str
    users_with_celebrations: int
    users_with_ocd_id_only: int
    celebration_emails_sent: int
    ocd_id_emails_sent: int
    total_emails_sent: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(
            self, "total_emails_sent",
            self.celebration_emails_sent + self.ocd_id_emails_sent,
        )

    def to_dict(self) -> dict:
        return {
            "totalEmailsSent": self.total_emails_sent,
            "usersWithCelebrations": self.users_with_celebrations,
            "usersWithOcdIdOnly": self.users_with_ocd_id_only,
            "celebrationEmailsSent": self.celebration_emails_sent,
            "ocdIdEmailsSent": self.ocd_id_emails_sent,
            "state": self.state,
        }
