"""Skill tree and skill tree node ORM models."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, Text, UniqueConstraint, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from growth_map.db.base import Base
from growth_map.db.types import JSONBCompat


class SkillTree(Base):
    __tablename__ = "skill_trees"
    __table_args__ = (Index("ix_skill_trees_goal_id", "goal_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    goal_id = Column(UUID(as_uuid=True), ForeignKey("goals.id", ondelete="CASCADE"), nullable=False)
    tree_json = Column(JSONBCompat, nullable=False, default=dict)
    generated_by = Column(Text, nullable=False)
    version = Column(Integer, nullable=False, server_default=sa_text("1"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class SkillTreeNode(Base):
    __tablename__ = "skill_tree_nodes"
    __table_args__ = (
        UniqueConstraint("skill_tree_id", "node_path", name="uq_skill_tree_nodes_path"),
        Index("ix_skill_tree_nodes_skill_tree_id", "skill_tree_id"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    skill_tree_id = Column(UUID(as_uuid=True), ForeignKey("skill_trees.id", ondelete="CASCADE"), nullable=False)
    node_path = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    level = Column(Integer, nullable=False)
    focus_hours = Column(Float, nullable=False, server_default=sa_text("0"))
    payload = Column(JSONBCompat, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
