"""Initial schema: agents, levels, duty roster, cases, level configs.

Revision ID: 001
Revises: None
Create Date: 2025-09-01
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Agents
    op.create_table(
        "agents",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("auth_user_id", sa.Integer, unique=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # Agent levels (append-only history, one active row per agent/scope)
    op.create_table(
        "agent_levels",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("agent_id", sa.Integer, sa.ForeignKey("agents.id"), nullable=False),
        sa.Column("scope_id", sa.Integer, nullable=False),
        sa.Column("level", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_by", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_by", sa.Integer, nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "uq_agent_levels_active", "agent_levels", ["agent_id", "scope_id"],
        unique=True, postgresql_where=sa.text("is_active"),
    )

    # Duty roster
    op.create_table(
        "duty_rosters",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("agent_id", sa.Integer, sa.ForeignKey("agents.id"), nullable=False),
        sa.Column("work_date", sa.Date, nullable=False),
        sa.Column("scope_id", sa.Integer, nullable=False),
        sa.Column("is_working", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_locked", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_by", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("agent_id", "work_date", "scope_id", name="uq_duty_rosters_agent_date_scope"),
    )
    op.create_index("idx_duty_rosters_date_scope", "duty_rosters", ["work_date", "scope_id"])

    # Collection cases
    op.create_table(
        "collection_cases",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("scope_id", sa.Integer, nullable=False),
        sa.Column("contract_no", sa.String(50), nullable=False),
        sa.Column("dpd", sa.Integer, nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("assigned_to", sa.Integer, nullable=True),
        sa.Column("assigned_by", sa.Integer, nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "idx_collection_cases_scope_unassigned", "collection_cases", ["scope_id", "assigned_to", "dpd"]
    )
    op.create_index("idx_collection_cases_created", "collection_cases", ["created_at"])

    # Level configs
    op.create_table(
        "level_configs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("scope_id", sa.Integer, nullable=False),
        sa.Column("target_date", sa.Date, nullable=False),
        sa.Column("team_leader_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("senior_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("mid_level_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("junior_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_agents", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_cases", sa.Integer, nullable=False, server_default="0"),
        sa.Column("team_leader_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("senior_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("mid_level_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("junior_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("config_type", sa.String(20), nullable=False, server_default="suggested"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_assigned", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("remarks", sa.Text, nullable=True),
        sa.Column("based_on_config_id", sa.Integer, sa.ForeignKey("level_configs.id"), nullable=True),
        sa.Column("created_by", sa.Integer, nullable=True),
        sa.Column("approved_by", sa.Integer, nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("assigned_by", sa.Integer, nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("assignments_by_agent", JSONB, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "uq_level_configs_active", "level_configs", ["scope_id", "target_date", "config_type"],
        unique=True, postgresql_where=sa.text("is_active"),
    )
    op.create_index("idx_level_configs_scope_date", "level_configs", ["scope_id", "target_date"])


def downgrade() -> None:
    op.drop_table("level_configs")
    op.drop_table("collection_cases")
    op.drop_table("duty_rosters")
    op.drop_table("agent_levels")
    op.drop_table("agents")
