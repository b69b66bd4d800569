"""Election Date Sources — snapshot-file and constants-table strategies behind ElectionDateSource.

Invariants:
    - SnapshotElectionDateSource never raises: missing file, bad JSON, schema mismatch,
      year mismatch, missing state or an entry with neither date all log a WARNING and return None
    - An entry with a primary but null general keeps its primary; general comes from the
      snapshot's statutoryGeneralElectionDate, else the statutory helper
    - ConstantsElectionDateSource always returns dates (statutory general for unknown states)
    - File IO runs in a worker thread (asyncio.to_thread): the event loop never blocks on disk
    - Snapshot writes are atomic: temp file in the same directory, then os.replace

Design Decisions:
    - One class owns both read and write of the snapshot file (ADR: single owner of the format)
    - Parsing on every read, no in-process cache: the updater job rewrites the file
      and readers see the new content on their next call
"""

import asyncio
import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path

from pydantic import ValidationError

from compliance_engine.core.domain_types import ElectionDates
from compliance_engine.core.election_calendar import (
    DEFAULT_ELECTION_DATES, StatutoryGeneral, default_election_dates,
)
from compliance_engine.core.statutory_dates import statutory_general_election
from compliance_engine.schemas.election_snapshot import ElectionSnapshot

logger = logging.getLogger(__name__)


class SnapshotElectionDateSource:
    """Reads (and atomically writes) electionDates.snapshot.json."""

    def __init__(
        self,
        path: Path,
        statutory_general: StatutoryGeneral = statutory_general_election,
    ):
        self.path = Path(path)
        self._statutory_general = statutory_general

    async def get_election_dates(self, state: str, year: int) -> ElectionDates | None:
        snapshot = await self.load()
        if snapshot is None:
            return None

        entry = snapshot.dates.get(state)
        if snapshot.election_year != year or entry is None:
            logger.warning(
                f"No snapshot data found for {state} in {year} "
                f"(snapshot year: {snapshot.election_year}), using fallback",
                extra={"state": state, "election_year": year},
            )
            return None
        if entry.general is None and entry.primary is None:
            logger.warning(
                f"Snapshot entry for {state} has no dates, using fallback",
                extra={"state": state, "election_year": year},
            )
            return None
        if entry.general is None:
            general = (
                snapshot.statutory_general_election_date
                or self._statutory_general(year)
            )
            logger.warning(
                f"Snapshot entry for {state} has no general date, using statutory {general}",
                extra={"state": state, "election_year": year},
            )
            return ElectionDates(state=state, general=general, primary=entry.primary)

        logger.info(
            f"Retrieved election dates for {state} in {year} from snapshot",
            extra={"state": state, "election_year": year},
        )
        return ElectionDates(state=state, general=entry.general, primary=entry.primary)

    async def load(self) -> ElectionSnapshot | None:
        """Parsed snapshot, or None (logged) when it cannot be read."""
        raw = await self.load_raw()
        if raw is None:
            return None
        try:
            return ElectionSnapshot.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                f"Election dates snapshot failed validation: {e.error_count()} error(s), using fallback",
            )
            return None

    async def load_raw(self) -> dict | None:
        try:
            text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
            data = json.loads(text)
        except (OSError, ValueError) as e:
            logger.warning(
                f"Failed to read election dates snapshot: {e}, using fallback",
            )
            return None
        if not isinstance(data, dict):
            logger.warning("Election dates snapshot is not a JSON object, using fallback")
            return None
        return data

    async def save(self, snapshot: dict) -> None:
        await asyncio.to_thread(_write_json_atomic, self.path, snapshot)
        logger.info(f"Election dates snapshot updated: {self.path}")


def _write_json_atomic(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, ensure_ascii=False)
            fh.write("\n")
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


class ConstantsElectionDateSource:
    """Hard-coded per-state defaults with the year substituted at lookup."""

    def __init__(
        self,
        table: Mapping[str, Mapping[str, str]] = DEFAULT_ELECTION_DATES,
        statutory_general: StatutoryGeneral = statutory_general_election,
    ):
        self._table = table
        self._statutory_general = statutory_general

    async def get_election_dates(self, state: str, year: int) -> ElectionDates:
        if state not in self._table:
            logger.warning(
                f"No default election dates found for state: {state}",
                extra={"state": state, "election_year": year},
            )
        dates = default_election_dates(
            state, year, self._table, self._statutory_general,
        )
        logger.info(
            f"Retrieved election dates for {state} in {year} from fallback",
            extra={"state": state, "election_year": year},
        )
        return dates
