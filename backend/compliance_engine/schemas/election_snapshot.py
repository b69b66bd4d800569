"""Election Snapshot Schemas — validate the snapshot file and OpenFEC rows at the IO boundary.

Invariants:
    - electionYear is an int, dates is a mapping of state code -> entry
    - Entry dates are ISO strings or null; general may be null on disk (the snapshot source fills it)
    - Unknown keys (lastUpdated, metadata, runoff, special) pass through untouched

Design Decisions:
    - Aliases keep the on-disk camelCase while Python code reads snake_case
    - OpenFEC rows validated loosely: only the three fields the grouper reads are required
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class SnapshotStateDates(BaseModel):
    """One state's entry in the snapshot file."""
    model_config = ConfigDict(extra="allow")

    primary: date | None = None
    general: date | None = None


class ElectionSnapshot(BaseModel):
    """Top-level snapshot file."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    election_year: int = Field(alias="electionYear")
    statutory_general_election_date: date | None = Field(
        None, alias="statutoryGeneralElectionDate",
    )
    dates: dict[str, SnapshotStateDates] = Field(default_factory=dict)


class FecElectionRow(BaseModel):
    """One row of OpenFEC /election-dates/ results."""
    model_config = ConfigDict(extra="ignore")

    election_state: str
    election_type_id: str
    election_date: str


class FecPagination(BaseModel):
    model_config = ConfigDict(extra="ignore")

    page: int = 1
    pages: int = 1


class FecElectionPage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: list[FecElectionRow] = Field(default_factory=list)
    pagination: FecPagination = Field(default_factory=FecPagination)
