"""Schemas for goal creation and goal detail endpoints."""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from growth_map.api.schemas.records import GoalRecord, SkillTreeRecord, SprintWithTasks


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateGrowthMapRequest(_CamelModel):
    title: str
    description: str
    horizon_months: float
    daily_minutes: float
    tags: List[str] = Field(default_factory=list)
    target_date: Optional[date] = None


class GrowthMapResponse(_CamelModel):
    goal: GoalRecord
    skill_tree: SkillTreeRecord
    sprint: SprintWithTasks
    request_id: str = ""


class GoalDetailResponse(_CamelModel):
    goal: GoalRecord
    skill_tree: Optional[SkillTreeRecord] = None
    latest_sprint: Optional[SprintWithTasks] = None
    request_id: str = ""
