"""SQL Donor Repository — DonorRepository and SubscriptionFilter over the read models.

Invariants:
    - Active-celebration donors: pols in state with has_stakes -> celebrations not
      resolved/defunct/paused -> distinct donors with a non-empty email
    - OCD donors: ocd_id matches ocd-division/country:us/state:<st>/cd:<digits>, non-empty email
    - Active donations use the same active flags; returned as core Donation values
    - filter_unsubscribed preserves input order and fails open (logged) on DB errors

Design Decisions:
    - Session per call from an injected factory: the notifier loop may run long,
      no connection is held between awaits of different donors
    - OCD match narrowed with LIKE in SQL, then the regex in Python (portable across Postgres/SQLite)
"""

import logging
import uuid
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from compliance_engine.core.domain_types import Donation, DonorRecord
from compliance_engine.core.errors import DatabaseError
from compliance_engine.core.impact import matches_state_ocd_id, ocd_state_prefix
from compliance_engine.models.celebration import Celebration
from compliance_engine.models.donor import Donor
from compliance_engine.models.politician import Politician

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def _active_celebration():
    return and_(
        Celebration.resolved.is_(False),
        Celebration.defunct.is_(False),
        Celebration.paused.is_(False),
    )


def _has_email():
    return and_(Donor.email.is_not(None), Donor.email != "")


def _to_record(donor: Donor) -> DonorRecord:
    return DonorRecord(
        id=str(donor.id),
        email=donor.email,
        first_name=donor.first_name,
        compliance=donor.compliance,
        ocd_id=donor.ocd_id,
    )


class SqlDonorRepository:
    """Donor lookups and unsubscribe filtering backed by SQLAlchemy."""

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    async def find_donors_with_active_celebrations(self, state: str) -> list[DonorRecord]:
        donor_ids = (
            select(Celebration.donated_by)
            .join(Politician, Politician.id == Celebration.pol_id)
            .where(Politician.state == state)
            .where(Politician.has_stakes.is_(True))
            .where(_active_celebration())
        )
        query = (
            select(Donor)
            .where(Donor.id.in_(donor_ids))
            .where(_has_email())
            .order_by(Donor.created_at)
        )
        async with self._session_factory() as db:
            result = await db.execute(query)
            donors = [_to_record(d) for d in result.scalars().all()]
        logger.info(
            f"Found {len(donors)} donors with active Celebrations in {state}",
            extra={"state": state},
        )
        return donors

    async def find_donors_with_ocd_id_in_state(self, state: str) -> list[DonorRecord]:
        query = (
            select(Donor)
            .where(Donor.ocd_id.like(f"{ocd_state_prefix(state)}%"))
            .where(_has_email())
            .order_by(Donor.created_at)
        )
        async with self._session_factory() as db:
            result = await db.execute(query)
            donors = [
                _to_record(d) for d in result.scalars().all()
                if matches_state_ocd_id(d.ocd_id, state)
            ]
        logger.info(
            f"Found {len(donors)} donors with ocd_id in {state}",
            extra={"state": state},
        )
        return donors

    async def find_active_donations(self, donor_id: str) -> list[Donation]:
        query = (
            select(Celebration)
            .where(Celebration.donated_by == uuid.UUID(donor_id))
            .where(_active_celebration())
            .order_by(Celebration.created_at)
        )
        async with self._session_factory() as db:
            result = await db.execute(query)
            return [c.to_donation() for c in result.scalars().all()]

    async def filter_unsubscribed(
        self, donors: list[DonorRecord], topic: str,
    ) -> list[DonorRecord]:
        if not donors:
            return donors
        ids = [uuid.UUID(d.id) for d in donors]
        try:
            async with self._session_factory() as db:
                result = await db.execute(
                    select(Donor.id, Donor.unsubscribed_from).where(Donor.id.in_(ids)),
                )
                unsubscribed = {
                    str(donor_id) for donor_id, topics in result.all()
                    if topics and topic in topics
                }
        except (SQLAlchemyError, DatabaseError) as e:
            logger.error(f"Error filtering unsubscribed donors: {e}")
            return donors

        filtered = [d for d in donors if d.id not in unsubscribed]
        dropped = len(donors) - len(filtered)
        if dropped:
            logger.info(
                f"Filtered out {dropped} unsubscribed donor(s) from {topic} notifications",
            )
        return filtered
