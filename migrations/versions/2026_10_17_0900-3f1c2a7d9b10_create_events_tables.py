"""create_events_tables

Revision ID: 3f1c2a7d9b10
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1c2a7d9b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "events",
        sa.Column("uuid", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("owner_id", sa.String(length=128), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("date", sa.String(length=10), nullable=False),
        sa.Column("time", sa.String(length=5), nullable=False),
        sa.Column("location", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("map_link", sa.String(length=2048), nullable=True),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("template", sa.String(length=64), nullable=False, server_default="default"),
        sa.Column("custom_styles", sa.JSON(), nullable=False),
        sa.Column("collect_fields", sa.JSON(), nullable=False),
        sa.Column("allow_sharing", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_premium", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("going_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("maybe_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("not_going_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("uuid"),
        sa.CheckConstraint("views >= 0", name="ck_events_views_non_negative"),
    )
    op.create_index(op.f("ix_events_owner_id"), "events", ["owner_id"], unique=False)

    op.create_table(
        "event_responses",
        sa.Column("uuid", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("event_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column(
            "category",
            sa.Enum("going", "maybe", "not_going", name="response_category_enum"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["event_id"], ["events.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index(
        op.f("ix_event_responses_event_id"), "event_responses", ["event_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_event_responses_event_id"), table_name="event_responses")
    op.drop_table("event_responses")
    sa.Enum(name="response_category_enum").drop(op.get_bind(), checkfirst=True)
    op.drop_index(op.f("ix_events_owner_id"), table_name="events")
    op.drop_table("events")
