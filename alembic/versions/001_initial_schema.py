"""Initial schema — auto-assignment tables.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Policy (one row per policy id, normally just "default")
    op.create_table(
        "auto_assignment_policies",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("enabled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("max_assigned_tickets", sa.Integer, nullable=False, server_default="5"),
        sa.Column("refill_threshold", sa.Integer, nullable=False, server_default="2"),
        sa.Column(
            "priority_order", sa.String(20), nullable=False, server_default="priority_first"
        ),
        sa.Column("channels", ARRAY(sa.String(50)), nullable=False, server_default="{}"),
        sa.Column("business_hours_only", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )

    # Agents
    op.create_table(
        "agents",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="agent"),
        sa.Column("availability_status", sa.String(20), nullable=False, server_default="offline"),
        sa.Column("auto_assign_enabled", sa.Boolean, nullable=True),
        sa.Column("auto_assign_max", sa.Integer, nullable=True),
        sa.Column("auto_assign_channels", ARRAY(sa.String(50)), nullable=True),
    )

    # Work items
    op.create_table(
        "work_items",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("human_number", sa.String(50), unique=True, nullable=False),
        sa.Column("channel", sa.String(50), nullable=False),
        sa.Column("priority", sa.String(20), nullable=False, server_default="normal"),
        sa.Column("status", sa.String(20), nullable=False, server_default="open"),
        sa.Column(
            "assigned_agent_id", sa.String(64), sa.ForeignKey("agents.id"), nullable=True
        ),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "idx_work_items_queue", "work_items", ["status", "assigned_agent_id", "channel"]
    )
    op.create_index("idx_work_items_agent", "work_items", ["assigned_agent_id"])

    # Assignment audit log
    op.create_table(
        "assignment_records",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "work_item_id", sa.String(64), sa.ForeignKey("work_items.id"), nullable=False
        ),
        sa.Column("work_item_number", sa.String(50), nullable=False),
        sa.Column(
            "assigned_agent_id", sa.String(64), sa.ForeignKey("agents.id"), nullable=False
        ),
        sa.Column("reason", sa.String(30), nullable=False),
        sa.Column("agent_load_after_assignment", sa.Integer, nullable=False),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "idx_assignment_records_assigned_at", "assignment_records", ["assigned_at"]
    )
    op.create_index(
        "idx_assignment_records_agent", "assignment_records", ["assigned_agent_id"]
    )

    # Business hours (0 = Monday)
    op.create_table(
        "business_hours",
        sa.Column("day_of_week", sa.Integer, primary_key=True),
        sa.Column("is_open", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("open_time", sa.Time, nullable=False),
        sa.Column("close_time", sa.Time, nullable=False),
    )


def downgrade() -> None:
    op.drop_table("business_hours")
    op.drop_index("idx_assignment_records_agent", table_name="assignment_records")
    op.drop_index("idx_assignment_records_assigned_at", table_name="assignment_records")
    op.drop_table("assignment_records")
    op.drop_index("idx_work_items_agent", table_name="work_items")
    op.drop_index("idx_work_items_queue", table_name="work_items")
    op.drop_table("work_items")
    op.drop_table("agents")
    op.drop_table("auto_assignment_policies")
