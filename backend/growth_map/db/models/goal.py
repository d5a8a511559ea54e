"""Goal ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, Float, Index, Integer, String, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from growth_map.db.base import Base
from growth_map.db.types import JSONBCompat

GOAL_STATUSES = ("draft", "active", "paused", "completed")


class Goal(Base):
    __tablename__ = "goals"
    __table_args__ = (Index("ix_goals_user_id", "user_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    # Owner id issued by the identity provider; there is no local users table.
    user_id = Column(UUID(as_uuid=True), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    horizon_months = Column(Float, nullable=False)
    daily_minutes = Column(Float, nullable=False)
    status = Column(String(length=20), nullable=False, server_default=sa_text("'draft'"))
    priority = Column(Integer, nullable=False, server_default=sa_text("0"))
    target_date = Column(Date, nullable=True)
    tags = Column(JSONBCompat, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
