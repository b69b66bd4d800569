"""Election Snapshot — pure grouping, merging and diffing of per-state election dates.

Invariants:
    - general is always the statutory date, never taken from the API rows
    - Runoff: GR overrides R regardless of order; special: SG overrides S regardless of order
    - States with no usable date are dropped from a grouped result
    - A state is "changed" only if it existed before and its primary or general differs
      (added/removed states are reported but never trigger notifications)

Design Decisions:
    - Works on plain dicts shaped like the snapshot file (ADR: the file format is the contract)
    - Merge keeps previous entries for states the API did not return this run
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date

from compliance_engine.core.domain_types import ElectionDates

PRIMARY = "P"
GENERAL = "G"
RUNOFF = "R"
GENERAL_RUNOFF = "GR"
SPECIAL = "S"
SPECIAL_GENERAL = "SG"

SNAPSHOT_VERSION = "1.0.0"


def _empty_entry() -> dict:
    return {"primary": None, "general": None, "runoff": None, "special": None}


def group_election_rows(
    rows: Iterable[Mapping], statutory_general: date,
) -> dict[str, dict]:
    """Group OpenFEC election rows per state into snapshot entries."""
    grouped: dict[str, dict] = {}
    for row in rows:
        state = row.get("election_state")
        kind = row.get("election_type_id")
        day = row.get("election_date")
        if not state or not day:
            continue
        entry = grouped.setdefault(state, _empty_entry())
        if kind == PRIMARY:
            entry["primary"] = day
        elif kind == GENERAL_RUNOFF:
            entry["runoff"] = day
        elif kind == RUNOFF and entry["runoff"] is None:
            entry["runoff"] = day
        elif kind == SPECIAL_GENERAL:
            entry["special"] = day
        elif kind == SPECIAL and entry["special"] is None:
            entry["special"] = day
        # GENERAL rows ignored: general is statutory

    general = statutory_general.isoformat()
    for entry in grouped.values():
        entry["general"] = general
    return {
        state: entry for state, entry in grouped.items()
        if any(entry.values())
    }


def merge_dates(
    fetched: Mapping[str, dict], existing: Mapping[str, dict] | None,
) -> dict[str, dict]:
    """API data wins per state; previous snapshot fills states the API skipped."""
    merged = dict(existing or {})
    merged.update(fetched)
    return merged


@dataclass
class SnapshotDiff:
    """Differences between two snapshot `dates` maps."""
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    changed: dict[str, tuple[ElectionDates, ElectionDates]] = field(default_factory=dict)

    def describe(self) -> list[str]:
        lines = [f"Added {s}" for s in self.added]
        lines += [f"Removed {s}" for s in self.removed]
        for state, (old, new) in self.changed.items():
            lines.append(
                f"Updated {state}: {old.primary}/{old.general} -> "
                f"{new.primary}/{new.general}"
            )
        return lines


def to_election_dates(state: str, entry: Mapping) -> ElectionDates | None:
    """Snapshot entry -> ElectionDates, or None when general is missing/invalid."""
    try:
        general = date.fromisoformat(entry["general"])
    except (KeyError, TypeError, ValueError):
        return None
    primary_raw = entry.get("primary")
    try:
        primary = date.fromisoformat(primary_raw) if primary_raw else None
    except (TypeError, ValueError):
        primary = None
    return ElectionDates(state=state, general=general, primary=primary)


def diff_dates(
    previous: Mapping[str, dict] | None, current: Mapping[str, dict],
) -> SnapshotDiff:
    diff = SnapshotDiff()
    previous = previous or {}
    for state, entry in current.items():
        old_entry = previous.get(state)
        if old_entry is None:
            diff.added.append(state)
            continue
        if (
            old_entry.get("primary") == entry.get("primary")
            and old_entry.get("general") == entry.get("general")
        ):
            continue
        old = to_election_dates(state, old_entry)
        new = to_election_dates(state, entry)
        if old and new:
            diff.changed[state] = (old, new)
    diff.removed = [s for s in previous if s not in current]
    return diff


def build_snapshot(
    election_year: int,
    dates: Mapping[str, dict],
    statutory_general: date,
    last_updated: str,
    source: str = "OpenFEC API",
) -> dict:
    return {
        "electionYear": election_year,
        "statutoryGeneralElectionDate": statutory_general.isoformat(),
        "dates": dict(dates),
        "lastUpdated": last_updated,
        "source": source,
        "metadata": {
            "generatedBy": "electionDatesUpdater",
            "version": SNAPSHOT_VERSION,
            "description": (
                "Election dates for House of Representatives primaries "
                "and general elections"
            ),
        },
    }
