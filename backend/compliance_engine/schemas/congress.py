"""Congress Schemas — validate Congress.gov session payloads before they are cached.

Invariants:
    - A payload missing sessions is still valid (session end falls back to Jan 3)
    - Both the flat shape and the {"congress": {...}} envelope are accepted,
      as are "number" keys in place of "congress"/"session"
    - Validated payloads are dumped back to the camelCase dict shape the cache stores

Design Decisions:
    - Validation at the client boundary: the service only ever sees a well-formed dict
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class SessionEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    session: int = Field(validation_alias=AliasChoices("session", "number"))
    start_date: str | None = Field(
        None,
        validation_alias=AliasChoices("startDate", "start_date"),
        serialization_alias="startDate",
    )
    end_date: str | None = Field(
        None,
        validation_alias=AliasChoices("endDate", "end_date"),
        serialization_alias="endDate",
    )


class CongressSessionPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    congress: int = Field(validation_alias=AliasChoices("congress", "number"))
    start_year: int | None = Field(
        None,
        validation_alias=AliasChoices("startYear", "start_year"),
        serialization_alias="startYear",
    )
    end_year: int | None = Field(
        None,
        validation_alias=AliasChoices("endYear", "end_year"),
        serialization_alias="endYear",
    )
    sessions: list[SessionEntry] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def unwrap_envelope(cls, data):
        if isinstance(data, dict) and isinstance(data.get("congress"), dict):
            return data["congress"]
        return data

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)
