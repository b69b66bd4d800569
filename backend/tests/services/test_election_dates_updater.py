"""Election Dates Updater — verifies snapshot refresh, change detection and notification fan-out.

Tests:
    - Missing FEC key or API failure keeps the existing snapshot untouched
    - First run writes a snapshot with the statutory general date and notifies nobody
    - Same-year changes notify per changed state with old/new ElectionDates
    - States the API skipped survive the merge
    - A snapshot from an earlier cycle is not diffed against
    - One state's notifier failure does not block the others
"""

import json
from datetime import date

import pytest

from compliance_engine.infrastructure.election_date_sources import SnapshotElectionDateSource
from compliance_engine.services.election_dates_updater import ElectionDatesUpdater
from tests.services.fakes import FakeElectionFeed, RecordingNotifier, fixed_clock


def _row(state, kind, day):
    return {"election_state": state, "election_type_id": kind, "election_date": day}


@pytest.fixture
def snapshot_path(tmp_path):
    return tmp_path / "snapshots" / "electionDates.snapshot.json"


def _write(path, year, dates):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"electionYear": year, "dates": dates}))


def _updater(feed, path, notifier=None):
    return ElectionDatesUpdater(
        feed, SnapshotElectionDateSource(path), notifier, fixed_clock(2026, 10, 18),
    )


async def test_missing_key_skips(snapshot_path):
    feed = FakeElectionFeed(configured=False)
    report = await _updater(feed, snapshot_path).run()
    assert report.status == "skipped"
    assert feed.years == []
    assert not snapshot_path.exists()


async def test_api_failure_keeps_existing_snapshot(snapshot_path):
    _write(snapshot_path, 2026, {"TX": {"primary": "2026-03-03", "general": "2026-11-03"}})
    before = snapshot_path.read_text()

    report = await _updater(FakeElectionFeed(fail=True), snapshot_path).run()

    assert report.status == "failed"
    assert snapshot_path.read_text() == before


async def test_first_run_writes_snapshot(snapshot_path):
    notifier = RecordingNotifier()
    feed = FakeElectionFeed([_row("TX", "P", "2026-03-03"), _row("TX", "G", "2026-11-04")])

    report = await _updater(feed, snapshot_path, notifier).run()

    assert report.status == "updated"
    assert report.election_year == 2026
    assert report.changes == ["Added TX"]
    assert notifier.events == []
    written = json.loads(snapshot_path.read_text())
    assert written["electionYear"] == 2026
    assert written["statutoryGeneralElectionDate"] == "2026-11-03"
    assert written["dates"]["TX"]["general"] == "2026-11-03"


async def test_changed_state_is_notified(snapshot_path):
    _write(snapshot_path, 2026, {
        "TX": {"primary": "2026-03-03", "general": "2026-11-03"},
        "CA": {"primary": "2026-06-02", "general": "2026-11-03"},
    })
    notifier = RecordingNotifier()
    feed = FakeElectionFeed([_row("TX", "P", "2026-03-10")])

    report = await _updater(feed, snapshot_path, notifier).run()

    assert report.states == 2
    assert [state for state, _, _ in notifier.events] == ["TX"]
    _, old, new = notifier.events[0]
    assert old.primary == date(2026, 3, 3)
    assert new.primary == date(2026, 3, 10)
    written = json.loads(snapshot_path.read_text())
    assert written["dates"]["CA"]["primary"] == "2026-06-02"


async def test_previous_cycle_snapshot_is_not_diffed(snapshot_path):
    _write(snapshot_path, 2024, {"TX": {"primary": "2024-03-05", "general": "2024-11-05"}})
    notifier = RecordingNotifier()
    feed = FakeElectionFeed([_row("TX", "P", "2026-03-03")])

    report = await _updater(feed, snapshot_path, notifier).run()

    assert notifier.events == []
    assert report.states == 1


async def test_notifier_failure_is_isolated_per_state(snapshot_path):
    _write(snapshot_path, 2026, {
        "TX": {"primary": "2026-03-03", "general": "2026-11-03"},
        "CA": {"primary": "2026-06-02", "general": "2026-11-03"},
    })
    notifier = RecordingNotifier(fail_for={"TX"})
    feed = FakeElectionFeed([_row("TX", "P", "2026-03-10"), _row("CA", "P", "2026-06-09")])

    report = await _updater(feed, snapshot_path, notifier).run()

    assert report.failed_states == ["TX"]
    assert [state for state, _, _ in notifier.events] == ["CA"]
