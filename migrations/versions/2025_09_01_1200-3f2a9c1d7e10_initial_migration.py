"""initial_migration

Revision ID: 3f2a9c1d7e10
Revises:
Create Date: 2025-09-01 12:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f2a9c1d7e10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "rsvps",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=False),
        sa.Column("guest_count", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "completed", "failed", "refunded", name="rsvp_status_enum"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("payment_ref", sa.String(length=255), nullable=True),
        sa.Column("refund_ref", sa.String(length=255), nullable=True),
        sa.Column("refund_amount", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.CheckConstraint("guest_count >= 1", name="ck_rsvps_guest_count_positive"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_rsvps_email", "rsvps", ["email"])
    op.create_index("ix_rsvps_status", "rsvps", ["status"])
    op.create_index("ix_rsvps_payment_ref", "rsvps", ["payment_ref"], unique=True)
    op.create_index("ix_rsvps_created_at", "rsvps", ["created_at"])

    op.create_table(
        "notification_logs",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("rsvp_id", sa.UUID(), nullable=True),
        sa.Column("channel", sa.Enum("email", "sms", name="notification_channel_enum"), nullable=False),
        sa.Column("recipient", sa.String(length=255), nullable=False),
        sa.Column("from_address", sa.String(length=255), nullable=False),
        sa.Column("subject", sa.String(length=500), nullable=False),
        sa.Column("html_body", sa.Text(), nullable=True),
        sa.Column("text_body", sa.Text(), nullable=True),
        sa.Column("provider_message_id", sa.String(length=255), nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                "pending",
                "sent",
                "delivered",
                "bounced",
                "failed",
                "complained",
                name="notification_status_enum",
            ),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("last_webhook_event", sa.String(length=100), nullable=True),
        sa.Column("last_webhook_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.ForeignKeyConstraint(["rsvp_id"], ["rsvps.uuid"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index(
        "ix_notification_logs_provider_message_id",
        "notification_logs",
        ["provider_message_id"],
        unique=True,
    )
    op.create_index("ix_notification_logs_rsvp_id", "notification_logs", ["rsvp_id"])
    op.create_index("ix_notification_logs_channel", "notification_logs", ["channel"])
    op.create_index("ix_notification_logs_recipient", "notification_logs", ["recipient"])
    op.create_index("ix_notification_logs_status", "notification_logs", ["status"])
    op.create_index("ix_notification_logs_created_at", "notification_logs", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_notification_logs_created_at", table_name="notification_logs")
    op.drop_index("ix_notification_logs_status", table_name="notification_logs")
    op.drop_index("ix_notification_logs_recipient", table_name="notification_logs")
    op.drop_index("ix_notification_logs_channel", table_name="notification_logs")
    op.drop_index("ix_notification_logs_rsvp_id", table_name="notification_logs")
    op.drop_index("ix_notification_logs_provider_message_id", table_name="notification_logs")
    op.drop_table("notification_logs")
    op.execute("DROP TYPE notification_status_enum")
    op.execute("DROP TYPE notification_channel_enum")

    op.drop_index("ix_rsvps_created_at", table_name="rsvps")
    op.drop_index("ix_rsvps_payment_ref", table_name="rsvps")
    op.drop_index("ix_rsvps_status", table_name="rsvps")
    op.drop_index("ix_rsvps_email", table_name="rsvps")
    op.drop_table("rsvps")
    op.execute("DROP TYPE rsvp_status_enum")
