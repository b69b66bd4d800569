"""Politician ORM — a candidate/officeholder donors can celebrate.

Invariants:
    - id is the external bioguide-style identifier (string primary key)
    - state is the two-letter code of the role the politician holds or seeks
    - has_stakes marks politicians that currently accept celebrations
"""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from compliance_engine.db.base import Base


class Politician(Base):
    """Politician entity."""
    __tablename__ = "pols"

    id: Mapped[str] = mapped_column(String(20), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    state: Mapped[str] = mapped_column(String(2), nullable=False, index=True)
    has_stakes: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
