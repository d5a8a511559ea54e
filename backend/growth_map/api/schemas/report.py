"""Schemas for the growth report endpoint."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from growth_map.api.schemas.records import GoalRecord, ProgressLogRecord, SprintRecord


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GrowthReportRequest(_CamelModel):
    goal_id: str = ""
    # Free-form so unparsable values can fall back to the default window.
    since: Optional[str] = None
    until: Optional[str] = None
    include_sprints: Optional[int] = None


class SprintSummary(_CamelModel):
    sprint: SprintRecord
    completed: int
    pending: int
    skipped: int
    total: int


class GrowthInsightsPayload(_CamelModel):
    narrative: str
    recommendations: List[str] = Field(default_factory=list)


class GrowthReportResponse(_CamelModel):
    goal: GoalRecord
    sprint_summaries: List[SprintSummary]
    insights: GrowthInsightsPayload
    progress_logs: List[ProgressLogRecord]
    request_id: str = ""
