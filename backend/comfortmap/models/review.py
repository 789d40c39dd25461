"""
ComfortMap Backend — Review SQLAlchemy Model
==============================================

What:  ORM model representing the `reviews` table.
Why:   Maps Python objects to rows for type-safe store operations.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by ReviewService for insert/list and by Alembic for schema management.

Table Design Rationale:
    - text: The canonical encoded review string (source of truth for display)
    - restaurant / location / scale / review / lat / lon: Stored redundantly
      next to `text` so map markers never need to decode anything
    - created_at: UTC, defaulted on insert, never updated

    Index on created_at DESC:
        The only read is "all reviews, newest first"
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Float, Index, Text, Uuid
from sqlalchemy import text as sa_text
from sqlalchemy.orm import Mapped, mapped_column

from comfortmap.database import Base


class Review(Base):
    """
    A submitted restaurant review.

    Lifecycle:
        Created once at submission time, immutable afterwards. There is no
        update or delete path in the application.
    """

    __tablename__ = "reviews"

    # Generic Uuid type: native UUID on PostgreSQL, CHAR(32) on SQLite
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    text: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Canonical encoded review string",
    )

    restaurant: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Not range-validated; whatever the caller sent, cast to a number
    scale: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    review: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    lon: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # sa_text, not text: the `text` column above shadows the name in the class body
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=sa_text("CURRENT_TIMESTAMP"),
        comment="When this review was created (UTC)",
    )

    __table_args__ = (
        Index("idx_reviews_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Review(id={self.id}, restaurant='{self.restaurant}', "
            f"created_at='{self.created_at}')>"
        )
