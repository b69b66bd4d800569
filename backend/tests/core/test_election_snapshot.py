"""Election Snapshot — verifies grouping of OpenFEC rows, merging and change detection.

Tests:
    - general always the statutory date; G rows ignored
    - GR beats R and SG beats S regardless of row order
    - Merge keeps states the API skipped
    - Only primary/general differences on existing states count as changes
"""

from datetime import date

from compliance_engine.core.election_snapshot import (
    SNAPSHOT_VERSION,
    build_snapshot,
    diff_dates,
    group_election_rows,
    merge_dates,
    to_election_dates,
)

STATUTORY = date(2026, 11, 3)


def _row(state, kind, day):
    return {"election_state": state, "election_type_id": kind, "election_date": day}


def test_grouping_uses_statutory_general():
    grouped = group_election_rows(
        [_row("TX", "P", "2026-03-03"), _row("TX", "G", "2026-11-10")], STATUTORY,
    )
    assert grouped["TX"]["primary"] == "2026-03-03"
    assert grouped["TX"]["general"] == "2026-11-03"


def test_general_runoff_beats_runoff_in_any_order():
    rows = [_row("TX", "GR", "2026-12-08"), _row("TX", "R", "2026-05-26")]
    assert group_election_rows(rows, STATUTORY)["TX"]["runoff"] == "2026-12-08"
    assert group_election_rows(rows[::-1], STATUTORY)["TX"]["runoff"] == "2026-12-08"


def test_special_general_beats_special_in_any_order():
    rows = [_row("CA", "S", "2026-04-07"), _row("CA", "SG", "2026-06-02")]
    assert group_election_rows(rows, STATUTORY)["CA"]["special"] == "2026-06-02"
    assert group_election_rows(rows[::-1], STATUTORY)["CA"]["special"] == "2026-06-02"


def test_rows_without_state_or_date_skipped():
    grouped = group_election_rows(
        [_row("", "P", "2026-03-03"), _row("NY", "P", None)], STATUTORY,
    )
    assert grouped == {}


def test_merge_keeps_previous_states():
    merged = merge_dates({"TX": {"primary": "2026-03-10"}}, {"TX": {"primary": "2026-03-03"}, "CA": {}})
    assert merged["TX"]["primary"] == "2026-03-10"
    assert "CA" in merged


def test_diff_reports_added_removed_changed():
    previous = {
        "TX": {"primary": "2026-03-03", "general": "2026-11-03"},
        "CA": {"primary": "2026-06-02", "general": "2026-11-03"},
        "OH": {"primary": "2026-05-05", "general": "2026-11-03"},
    }
    current = {
        "TX": {"primary": "2026-03-10", "general": "2026-11-03"},
        "CA": {"primary": "2026-06-02", "general": "2026-11-03", "runoff": "2026-08-01"},
        "NY": {"primary": "2026-06-23", "general": "2026-11-03"},
    }
    diff = diff_dates(previous, current)
    assert diff.added == ["NY"]
    assert diff.removed == ["OH"]
    assert list(diff.changed) == ["TX"]
    old, new = diff.changed["TX"]
    assert old.primary == date(2026, 3, 3)
    assert new.primary == date(2026, 3, 10)
    assert "Updated TX: 2026-03-03/2026-11-03 -> 2026-03-10/2026-11-03" in diff.describe()


def test_diff_without_previous_only_adds():
    diff = diff_dates(None, {"TX": {"primary": None, "general": "2026-11-03"}})
    assert diff.added == ["TX"]
    assert diff.changed == {}


def test_to_election_dates_requires_general():
    assert to_election_dates("TX", {"primary": "2026-03-03", "general": None}) is None
    dates = to_election_dates("TX", {"primary": None, "general": "2026-11-03"})
    assert dates.primary is None


def test_build_snapshot_records_statutory_date_and_metadata():
    snapshot = build_snapshot(2026, {"TX": {}}, STATUTORY, "2026-10-18T00:00:00+00:00")
    assert snapshot["electionYear"] == 2026
    assert snapshot["statutoryGeneralElectionDate"] == "2026-11-03"
    assert snapshot["source"] == "OpenFEC API"
    assert snapshot["metadata"]["version"] == SNAPSHOT_VERSION
