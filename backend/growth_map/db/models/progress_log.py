"""Progress log ORM model."""
from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, func
from sqlalchemy.dialects.postgresql import UUID

from growth_map.db.base import Base
from growth_map.db.types import JSONBCompat


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProgressLog(Base):
    __tablename__ = "progress_logs"
    __table_args__ = (
        Index("ix_progress_logs_goal_id_recorded_at", "goal_id", "recorded_at"),
        Index("ix_progress_logs_user_id", "user_id"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), nullable=False)
    goal_id = Column(UUID(as_uuid=True), ForeignKey("goals.id", ondelete="CASCADE"), nullable=False)
    # The sprint being concluded, not the one planned from this log.
    sprint_id = Column(UUID(as_uuid=True), ForeignKey("sprints.id", ondelete="SET NULL"), nullable=True)
    payload = Column(JSONBCompat, nullable=False, default=dict)
    recorded_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
