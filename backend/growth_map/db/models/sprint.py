"""Sprint and sprint task ORM models."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, String, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from growth_map.db.base import Base
from growth_map.db.types import JSONBCompat

SPRINT_STATUSES = ("planned", "active", "completed")
TASK_STATUSES = ("pending", "done", "skipped")
TASK_DIFFICULTIES = ("low", "medium", "high")


class Sprint(Base):
    __tablename__ = "sprints"
    __table_args__ = (Index("ix_sprints_goal_id_sprint_number", "goal_id", "sprint_number"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    goal_id = Column(UUID(as_uuid=True), ForeignKey("goals.id", ondelete="CASCADE"), nullable=False)
    sprint_number = Column(Integer, nullable=False)
    from_date = Column(Date, nullable=False)
    to_date = Column(Date, nullable=False)
    status = Column(String(length=20), nullable=False, server_default=sa_text("'planned'"))
    summary = Column(Text, nullable=True)
    metrics = Column(JSONBCompat, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class SprintTask(Base):
    __tablename__ = "sprint_tasks"
    __table_args__ = (
        Index("ix_sprint_tasks_sprint_id", "sprint_id"),
        Index("ix_sprint_tasks_status", "status"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    sprint_id = Column(UUID(as_uuid=True), ForeignKey("sprints.id", ondelete="CASCADE"), nullable=False)
    skill_node_id = Column(
        UUID(as_uuid=True),
        ForeignKey("skill_tree_nodes.id", ondelete="SET NULL"),
        nullable=True,
    )
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, server_default=sa_text("''"))
    difficulty = Column(String(length=10), nullable=False, server_default=sa_text("'medium'"))
    status = Column(String(length=10), nullable=False, server_default=sa_text("'pending'"))
    due_date = Column(Date, nullable=True)
    estimated_minutes = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
