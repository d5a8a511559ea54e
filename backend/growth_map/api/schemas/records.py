"""Serialized store records returned by the planning endpoints."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, JsonValue


class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class GoalRecord(_Record):
    id: UUID
    user_id: UUID
    title: str
    description: str
    horizon_months: float
    daily_minutes: float
    status: str
    priority: int
    target_date: Optional[date] = None
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SkillTreeNodeRecord(_Record):
    id: UUID
    skill_tree_id: UUID
    node_path: str
    title: str
    level: int
    focus_hours: float
    payload: Dict[str, JsonValue] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SkillTreeRecord(_Record):
    id: UUID
    goal_id: UUID
    tree_json: Dict[str, JsonValue] = Field(default_factory=dict)
    generated_by: str
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    nodes: List[SkillTreeNodeRecord] = Field(default_factory=list)

    @classmethod
    def from_records(cls, tree: Any, nodes: Sequence[Any]) -> "SkillTreeRecord":
        record = cls.model_validate(tree)
        record.nodes = [SkillTreeNodeRecord.model_validate(node) for node in nodes]
        return record


class SprintTaskRecord(_Record):
    id: UUID
    sprint_id: UUID
    skill_node_id: Optional[UUID] = None
    title: str
    description: str
    difficulty: str
    status: str
    due_date: Optional[date] = None
    estimated_minutes: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SprintRecord(_Record):
    id: UUID
    goal_id: UUID
    sprint_number: int
    from_date: date
    to_date: date
    status: str
    summary: Optional[str] = None
    metrics: Dict[str, JsonValue] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SprintWithTasks(SprintRecord):
    tasks: List[SprintTaskRecord] = Field(default_factory=list)

    @classmethod
    def from_records(cls, sprint: Any, tasks: Sequence[Any]) -> "SprintWithTasks":
        record = cls.model_validate(sprint)
        record.tasks = [SprintTaskRecord.model_validate(task) for task in tasks]
        return record


class ProgressLogRecord(_Record):
    id: UUID
    user_id: UUID
    goal_id: UUID
    sprint_id: Optional[UUID] = None
    payload: Dict[str, JsonValue] = Field(default_factory=dict)
    recorded_at: datetime
    created_at: Optional[datetime] = None
