"""Donor ORM — the user account a donation limit belongs to.

Invariants:
    - compliance is 'guest' or 'compliant' (transitions enforced by the account layer)
    - ocd_id encodes the residential congressional district, may be null
    - unsubscribed_from is a list of topic strings; empty/null means subscribed to all

Design Decisions:
    - JSON column for unsubscribed_from: topic list read whole, filtered in Python
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from compliance_engine.db.base import Base


class Donor(Base):
    """Donor account."""
    __tablename__ = "donors"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    compliance: Mapped[str] = mapped_column(
        String(20), nullable=False, default="guest",
    )
    ocd_id: Mapped[str | None] = mapped_column(String(200), nullable=True)
    unsubscribed_from: Mapped[list | None] = mapped_column(
        JSON, nullable=True, default=list,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    celebrations: Mapped[list["Celebration"]] = relationship(
        "Celebration", back_populates="donor",
    )
