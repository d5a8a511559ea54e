"""Schemas for sprint regeneration."""
from __future__ import annotations

from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from growth_map.api.schemas.records import ProgressLogRecord, SprintWithTasks

TaskStatus = Literal["pending", "done", "skipped"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskStatusUpdate(_CamelModel):
    task_id: UUID
    status: TaskStatus
    notes: Optional[str] = None


class RegenerateSprintRequest(_CamelModel):
    sprint_id: str = ""
    status_updates: List[TaskStatusUpdate] = Field(default_factory=list)
    feedback: Optional[str] = None
    feeling_tags: List[str] = Field(default_factory=list)


class RegenerateSprintResponse(_CamelModel):
    sprint: SprintWithTasks
    progress_log: ProgressLogRecord
    request_id: str = ""
