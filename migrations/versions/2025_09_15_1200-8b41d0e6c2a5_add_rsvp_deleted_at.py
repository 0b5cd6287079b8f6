"""add_rsvp_deleted_at

Revision ID: 8b41d0e6c2a5
Revises: 3f2a9c1d7e10
Create Date: 2025-09-15 12:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "8b41d0e6c2a5"
down_revision = "3f2a9c1d7e10"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("rsvps", sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True))
    op.create_index("ix_rsvps_deleted_at", "rsvps", ["deleted_at"])


def downgrade() -> None:
    op.drop_index("ix_rsvps_deleted_at", table_name="rsvps")
    op.drop_column("rsvps", "deleted_at")
