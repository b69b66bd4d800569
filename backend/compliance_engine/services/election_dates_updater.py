"""Election Dates Updater — background job refreshing the snapshot from OpenFEC and fanning out notifications.

Invariants:
    - Missing FEC key: job skips with a warning, existing snapshot untouched
    - Any FecAPIError: job reports failure, existing snapshot untouched
    - general is always the statutory date for the election year
    - States the API did not return this run keep their previous entry
    - Only states whose primary or general changed trigger the notifier
    - A notifier failure for one state never prevents the others from being notified

Design Decisions:
    - Previous entries are only carried over from a snapshot of the same election year;
      a new cycle starts from the API data alone and notifies nobody
    - Snapshot written before notifying: readers see the new dates by the time emails go out
"""

import logging
from dataclasses import dataclass, field

from compliance_engine.core.domain_types import Clock, NotificationSummary, utc_now
from compliance_engine.core.election_calendar import (
    StatutoryGeneral, current_election_year,
)
from compliance_engine.core.election_snapshot import (
    build_snapshot, diff_dates, group_election_rows, merge_dates,
)
from compliance_engine.core.errors import FecAPIError
from compliance_engine.core.repository_protocols import ElectionDateFeed
from compliance_engine.core.statutory_dates import statutory_general_election
from compliance_engine.infrastructure.election_date_sources import (
    SnapshotElectionDateSource,
)
from compliance_engine.services.election_date_notifier import ElectionDateNotifier

logger = logging.getLogger(__name__)


@dataclass
class UpdateReport:
    """Outcome of one updater run."""
    election_year: int
    status: str  # "updated" | "skipped" | "failed"
    states: int = 0
    changes: list[str] = field(default_factory=list)
    notifications: dict[str, NotificationSummary] = field(default_factory=dict)
    failed_states: list[str] = field(default_factory=list)


class ElectionDatesUpdater:
    """Fetch -> group -> merge -> diff -> save -> notify."""

    def __init__(
        self,
        feed: ElectionDateFeed,
        snapshot: SnapshotElectionDateSource,
        notifier: ElectionDateNotifier | None = None,
        clock: Clock = utc_now,
        statutory_general: StatutoryGeneral = statutory_general_election,
    ):
        self._feed = feed
        self._snapshot = snapshot
        self._notifier = notifier
        self._clock = clock
        self._statutory_general = statutory_general

    async def run(self) -> UpdateReport:
        now = self._clock()
        year = current_election_year(now.date())
        logger.info(
            f"Starting election dates update for {year}",
            extra={"election_year": year},
        )

        if not self._feed.configured:
            logger.warning(
                "FEC API key not configured, keeping existing election dates snapshot",
                extra={"election_year": year},
            )
            return UpdateReport(election_year=year, status="skipped")

        try:
            rows = await self._feed.fetch_election_rows(year)
        except FecAPIError as e:
            logger.error(
                f"Election dates fetch failed: {e.message}, keeping existing snapshot",
                extra={"election_year": year, "error_code": e.code},
            )
            return UpdateReport(election_year=year, status="failed")

        statutory = self._statutory_general(year)
        fetched = group_election_rows(rows, statutory)
        previous = await self._previous_dates(year)
        merged = merge_dates(fetched, previous)
        diff = diff_dates(previous, merged)

        await self._snapshot.save(
            build_snapshot(year, merged, statutory, now.isoformat()),
        )
        report = UpdateReport(
            election_year=year,
            status="updated",
            states=len(merged),
            changes=diff.describe(),
        )
        for line in report.changes:
            logger.info(f"Election date change: {line}", extra={"election_year": year})

        if self._notifier is not None:
            await self._notify(diff.changed, report)

        logger.info(
            f"Election dates update completed for {year}: {report.states} state(s), "
            f"{len(diff.changed)} changed",
            extra={"election_year": year},
        )
        return report

    async def _previous_dates(self, year: int) -> dict[str, dict]:
        raw = await self._snapshot.load_raw()
        if not raw:
            logger.info("No existing snapshot found, creating new one")
            return {}
        if raw.get("electionYear") != year:
            logger.info(
                f"Existing snapshot is for {raw.get('electionYear')}, starting {year} fresh",
                extra={"election_year": year},
            )
            return {}
        dates = raw.get("dates")
        return dict(dates) if isinstance(dates, dict) else {}

    async def _notify(self, changed: dict, report: UpdateReport) -> None:
        for state, (old, new) in changed.items():
            try:
                report.notifications[state] = (
                    await self._notifier.handle_election_date_change(state, old, new)
                )
            except Exception as e:
                logger.error(
                    f"Failed to send election date notifications for {state}: {e}",
                    extra={"state": state, "election_year": report.election_year},
                )
                report.failed_states.append(state)
