"""Bootstrap — wires settings, logging, sources, clients and services into one container.

Invariants:
    - Nothing is constructed at import time; build_container() is the only entry point
    - Every owned resource (DB engine, HTTP clients) is released by container.aclose()
    - Without an EmailSender the notifier is not built and the updater only refreshes the snapshot

Design Decisions:
    - Explicit constructor wiring instead of module singletons (ADR: no deferred imports)
    - Email dispatch supplied by the embedding application; this package sends nothing itself
"""

import logging
from dataclasses import dataclass

from compliance_engine.config import Settings, get_settings
from compliance_engine.core.domain_types import Clock, utc_now
from compliance_engine.core.repository_protocols import EmailSender
from compliance_engine.core.tier_policies import build_compliance_tiers
from compliance_engine.infrastructure.congress_client import CongressApiClient
from compliance_engine.infrastructure.database import DatabaseSessionManager
from compliance_engine.infrastructure.donor_repository import SqlDonorRepository
from compliance_engine.infrastructure.election_date_sources import (
    ConstantsElectionDateSource, SnapshotElectionDateSource,
)
from compliance_engine.infrastructure.fec_client import OpenFecClient
from compliance_engine.infrastructure.observability import setup_logging
from compliance_engine.infrastructure.session_cache import SessionDataCache
from compliance_engine.services.election_cycle import ElectionCycleService
from compliance_engine.services.election_date_notifier import ElectionDateNotifier
from compliance_engine.services.election_dates import ElectionDateResolver
from compliance_engine.services.election_dates_updater import ElectionDatesUpdater
from compliance_engine.services.session_boundary import SessionBoundaryService

logger = logging.getLogger(__name__)


@dataclass
class ComplianceContainer:
    settings: Settings
    database: DatabaseSessionManager
    congress_client: CongressApiClient
    fec_client: OpenFecClient
    limits: ElectionCycleService
    sessions: SessionBoundaryService
    notifier: ElectionDateNotifier | None
    updater: ElectionDatesUpdater

    async def aclose(self) -> None:
        await self.congress_client.aclose()
        await self.fec_client.aclose()
        await self.database.dispose()
        logger.info("Compliance engine shut down")


def build_container(
    settings: Settings | None = None,
    email: EmailSender | None = None,
    clock: Clock = utc_now,
    configure_logging: bool = True,
) -> ComplianceContainer:
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings.log_level, settings.log_format)

    snapshot = SnapshotElectionDateSource(settings.election_dates_snapshot_path)
    resolver = ElectionDateResolver([snapshot, ConstantsElectionDateSource()])
    limits = ElectionCycleService(
        tiers=build_compliance_tiers(
            annual_cap=settings.fec_annual,
            per_donation=settings.fec_per_donation,
            per_campaign=settings.fec_per_campaign,
        ),
        resolver=resolver,
        clock=clock,
        count_resolved=settings.count_resolved_toward_limits,
    )

    congress_client = CongressApiClient(
        settings.congress_gov_api_key,
        base_url=settings.congress_api_base_url,
        timeout_seconds=settings.congress_api_timeout_seconds,
    )
    sessions = SessionBoundaryService(
        congress_client,
        SessionDataCache(settings.session_cache_ttl_seconds, clock),
        clock,
    )

    database = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    notifier = None
    if email is not None:
        donors = SqlDonorRepository(database.session)
        notifier = ElectionDateNotifier(donors, donors, email, limits)
    else:
        logger.warning("No email sender supplied, election date notifications disabled")

    fec_client = OpenFecClient(
        settings.fec_api_key,
        base_url=settings.fec_api_base_url,
        page_size=settings.fec_page_size,
    )
    updater = ElectionDatesUpdater(fec_client, snapshot, notifier, clock)

    logger.info("Compliance engine started")
    return ComplianceContainer(
        settings=settings,
        database=database,
        congress_client=congress_client,
        fec_client=fec_client,
        limits=limits,
        sessions=sessions,
        notifier=notifier,
        updater=updater,
    )
