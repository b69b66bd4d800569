"""Celebration ORM — one donation pledged by a donor to a politician.

Invariants:
    - donated_by FK -> donors.id, pol_id FK -> pols.id
    - "active" means not resolved, not defunct and not paused
    - donation amount is in dollars

Design Decisions:
    - to_donation() projects onto the core Donation value object; the engine
      never sees ORM instances
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from compliance_engine.core.domain_types import Donation
from compliance_engine.db.base import Base


class Celebration(Base):
    """Celebration entity."""
    __tablename__ = "celebrations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    donated_by: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("donors.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    pol_id: Mapped[str] = mapped_column(
        String(20), ForeignKey("pols.id"), nullable=False, index=True,
    )
    donation: Mapped[float] = mapped_column(Float, nullable=False)
    resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    defunct: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    paused: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    donor: Mapped["Donor"] = relationship("Donor", back_populates="celebrations")

    def to_donation(self) -> Donation:
        return Donation(
            pol_id=self.pol_id,
            donation=self.donation,
            created_at=self.created_at,
            resolved=self.resolved,
            defunct=self.defunct,
            paused=self.paused,
        )
