"""Create reviews table

Revision ID: 001
Revises: None
Create Date: 2025-11-02 00:00:00.000000+00:00

What:  Creates the `reviews` table holding every submitted review.
How:   Generic Uuid primary key (native UUID on PostgreSQL), UTC timestamps.

Rollback: downgrade() drops the table entirely (destructive — all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the reviews table and its created_at DESC index."""
    op.create_table(
        "reviews",
        sa.Column("id", sa.Uuid(), nullable=False),

        # Canonical encoded review string (required)
        sa.Column(
            "text",
            sa.Text(),
            nullable=False,
            comment="Canonical encoded review string",
        ),

        # Plain fields stored redundantly next to text
        sa.Column("restaurant", sa.Text(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("scale", sa.Float(), nullable=True),
        sa.Column("review", sa.Text(), nullable=True),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("lon", sa.Float(), nullable=True),

        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this review was created (UTC)",
        ),

        sa.PrimaryKeyConstraint("id"),
    )

    # The only read is "all reviews, newest first"
    op.create_index(
        "idx_reviews_created_at",
        "reviews",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    """Drop the reviews table. Destructive: all reviews are lost."""
    op.drop_index("idx_reviews_created_at", table_name="reviews")
    op.drop_table("reviews")
