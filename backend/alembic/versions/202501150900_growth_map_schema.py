"""Growth map schema: goals, skill trees, sprints and progress logs."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "202501150900"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "goals",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("horizon_months", sa.Float(), nullable=False),
        sa.Column("daily_minutes", sa.Float(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default=sa.text("'draft'")),
        sa.Column("priority", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("target_date", sa.Date(), nullable=True),
        sa.Column(
            "tags",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_goals_user_id", "goals", ["user_id"], unique=False)

    op.create_table(
        "skill_trees",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("goal_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "tree_json",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("generated_by", sa.Text(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["goal_id"], ["goals.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_skill_trees_goal_id", "skill_trees", ["goal_id"], unique=False)

    op.create_table(
        "skill_tree_nodes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("skill_tree_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("node_path", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("focus_hours", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "payload",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["skill_tree_id"], ["skill_trees.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("skill_tree_id", "node_path", name="uq_skill_tree_nodes_path"),
    )
    op.create_index("ix_skill_tree_nodes_skill_tree_id", "skill_tree_nodes", ["skill_tree_id"], unique=False)

    op.create_table(
        "sprints",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("goal_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("sprint_number", sa.Integer(), nullable=False),
        sa.Column("from_date", sa.Date(), nullable=False),
        sa.Column("to_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default=sa.text("'planned'")),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column(
            "metrics",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["goal_id"], ["goals.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_sprints_goal_id_sprint_number", "sprints", ["goal_id", "sprint_number"], unique=False)

    op.create_table(
        "sprint_tasks",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("sprint_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("skill_node_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("difficulty", sa.String(length=10), nullable=False, server_default=sa.text("'medium'")),
        sa.Column("status", sa.String(length=10), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("estimated_minutes", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["sprint_id"], ["sprints.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["skill_node_id"], ["skill_tree_nodes.id"], ondelete="SET NULL"),
        sa.CheckConstraint("status IN ('pending', 'done', 'skipped')", name="ck_sprint_tasks_status"),
        sa.CheckConstraint("difficulty IN ('low', 'medium', 'high')", name="ck_sprint_tasks_difficulty"),
    )
    op.create_index("ix_sprint_tasks_sprint_id", "sprint_tasks", ["sprint_id"], unique=False)
    op.create_index("ix_sprint_tasks_status", "sprint_tasks", ["status"], unique=False)

    op.create_table(
        "progress_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("goal_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("sprint_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "payload",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["goal_id"], ["goals.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["sprint_id"], ["sprints.id"], ondelete="SET NULL"),
    )
    op.create_index(
        "ix_progress_logs_goal_id_recorded_at",
        "progress_logs",
        ["goal_id", "recorded_at"],
        unique=False,
    )
    op.create_index("ix_progress_logs_user_id", "progress_logs", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_progress_logs_user_id", table_name="progress_logs")
    op.drop_index("ix_progress_logs_goal_id_recorded_at", table_name="progress_logs")
    op.drop_table("progress_logs")

    op.drop_index("ix_sprint_tasks_status", table_name="sprint_tasks")
    op.drop_index("ix_sprint_tasks_sprint_id", table_name="sprint_tasks")
    op.drop_table("sprint_tasks")

    op.drop_index("ix_sprints_goal_id_sprint_number", table_name="sprints")
    op.drop_table("sprints")

    op.drop_index("ix_skill_tree_nodes_skill_tree_id", table_name="skill_tree_nodes")
    op.drop_table("skill_tree_nodes")

    op.drop_index("ix_skill_trees_goal_id", table_name="skill_trees")
    op.drop_table("skill_trees")

    op.drop_index("ix_goals_user_id", table_name="goals")
    op.drop_table("goals")
