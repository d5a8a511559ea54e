"""In-memory planning values exchanged between the generator and the pipelines."""
from __future__ import annotations

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, JsonValue
from pydantic.alias_generators import to_camel

from growth_map.db.models.goal import Goal

Difficulty = Literal["low", "medium", "high"]


class _Draft(BaseModel):
    # Drafts come back from the model in camelCase; callers use snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GoalInput(_Draft):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    title: str
    description: str
    horizon_months: float
    daily_minutes: float
    tags: tuple[str, ...] = ()

    @classmethod
    def from_record(cls, goal: Goal) -> "GoalInput":
        return cls(
            title=goal.title,
            description=goal.description,
            horizon_months=goal.horizon_months,
            daily_minutes=goal.daily_minutes,
            tags=tuple(goal.tags or ()),
        )


class SkillTreeNodeDraft(_Draft):
    node_path: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    level: int = Field(..., ge=1)
    focus_hours: float = Field(..., ge=0, allow_inf_nan=False)
    payload: Dict[str, JsonValue] = Field(default_factory=dict)


class SkillTreeDraft(_Draft):
    tree_json: Dict[str, JsonValue]
    nodes: List[SkillTreeNodeDraft] = Field(..., min_length=1)


class SprintTaskDraft(_Draft):
    title: str
    description: str
    difficulty: Difficulty
    due_date: Optional[date] = None
    estimated_minutes: Optional[int] = None
    node_path: Optional[str] = None


class SprintPlan(_Draft):
    sprint_number: int = Field(..., ge=1)
    from_date: date
    to_date: date
    summary: str
    tasks: List[SprintTaskDraft]


class SprintContext(_Draft):
    """Completion statistics and feedback from the sprint being concluded."""

    completed: int = 0
    pending: int = 0
    skipped: int = 0
    feedback: Optional[str] = None
    feeling_tags: List[str] = Field(default_factory=list)


class GrowthInsights(_Draft):
    narrative: str
    recommendations: List[str]
