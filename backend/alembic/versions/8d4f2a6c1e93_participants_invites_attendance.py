"""participants, event invites, attendance

Revision ID: 8d4f2a6c1e93
Revises: 3a9e1c7b5d20
Create Date: 2026-09-03

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "8d4f2a6c1e93"
down_revision: Union[str, Sequence[str], None] = "3a9e1c7b5d20"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "participants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("host_user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("full_name", sa.String(length=128), nullable=False),  # child name
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_participants_host_user_id", "participants", ["host_user_id"])

    op.create_table(
        "event_invites",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invite_token", sa.String(length=64), nullable=False),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "participant_id", sa.Integer(), sa.ForeignKey("participants.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("parent_name", sa.String(length=128), nullable=True),
        sa.Column("phone_e164", sa.String(length=32), nullable=True),

        sa.Column("invite_method", sa.String(length=16), nullable=False, server_default="whatsapp"),  # whatsapp/manual
        sa.Column("invite_status", sa.String(length=16), nullable=False, server_default="not_sent"),

        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_event_invites_invite_token", "event_invites", ["invite_token"], unique=True)
    op.create_index("ix_event_invites_event_id", "event_invites", ["event_id"])
    op.create_index("ix_event_invites_participant_id", "event_invites", ["participant_id"])
    op.create_unique_constraint(
        "uq_event_invites_event_participant",
        "event_invites",
        ["event_id", "participant_id"],
    )

    op.create_table(
        "attendance",
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
        sa.Column(
            "participant_id", sa.Integer(), sa.ForeignKey("participants.id", ondelete="CASCADE"), primary_key=True
        ),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade():
    op.drop_table("attendance")
    op.drop_constraint("uq_event_invites_event_participant", "event_invites", type_="unique")
    op.drop_index("ix_event_invites_participant_id", table_name="event_invites")
    op.drop_index("ix_event_invites_event_id", table_name="event_invites")
    op.drop_index("ix_event_invites_invite_token", table_name="event_invites")
    op.drop_table("event_invites")
    op.drop_index("ix_participants_host_user_id", table_name="participants")
    op.drop_table("participants")
