"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance (ADR: ExMA anti-pattern)
    - Async in Protocol: boundary methods are async because implementations do IO,
      core pure functions that USE their results are never async themselves
"""

from typing import Protocol

from compliance_engine.core.domain_types import Donation, DonorRecord, ElectionDates


class ElectionDateSource(Protocol):
    """One strategy for resolving a state's election dates. None means 'miss, try the next'."""
    async def get_election_dates(
        self, state: str, year: int,
    ) -> ElectionDates | None: ...


class DonorRepository(Protocol):
    """Donor/celebration lookups the notifier needs, implemented by shell."""
    async def find_donors_with_active_celebrations(
        self, state: str,
    ) -> list[DonorRecord]: ...
    async def find_donors_with_ocd_id_in_state(
        self, state: str,
    ) -> list[DonorRecord]: ...
    async def find_active_donations(self, donor_id: str) -> list[Donation]: ...


class SubscriptionFilter(Protocol):
    """Drops donors unsubscribed from a topic, preserving order."""
    async def filter_unsubscribed(
        self, donors: list[DonorRecord], topic: str,
    ) -> list[DonorRecord]: ...


class EmailSender(Protocol):
    """Templated email dispatch. Raises NotificationDispatchError on failure."""
    async def send_email(
        self, address: str, payload: dict, template_name: str,
        first_name: str | None,
    ) -> None: ...


class SessionDataClient(Protocol):
    """Legislative-session API. Raises CongressAPIError on any failure."""
    @property
    def configured(self) -> bool: ...
    async def fetch_congress(self, congress: int) -> dict: ...


class ElectionDateFeed(Protocol):
    """Upstream election-date rows (OpenFEC shape). Raises FecAPIError on failure."""
    @property
    def configured(self) -> bool: ...
    async def fetch_election_rows(self, election_year: int) -> list[dict]: ...
