"""Growth report aggregation over recent sprints and progress logs."""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from uuid import UUID

from growth_map.api.schemas.report import GrowthReportRequest
from growth_map.core.errors import ValidationError
from growth_map.db.models.goal import Goal
from growth_map.db.models.progress_log import ProgressLog
from growth_map.db.models.sprint import Sprint, SprintTask
from growth_map.db.store import Between, RecordStore
from growth_map.services.content_generator import ContentGenerator
from growth_map.services.drafts import GoalInput, GrowthInsights
from growth_map.services.planning_records import load_owned_goal, parse_record_id
from growth_map.services.sprint_stats import TaskStatusCounts, summarize_task_statuses

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30
DEFAULT_INCLUDE_SPRINTS = 3
MAX_INCLUDE_SPRINTS = 6
MAX_REPORT_LOGS = 30


@dataclass
class SprintStatusSummary:
    sprint: Sprint
    stats: TaskStatusCounts

    @property
    def completed(self) -> int:
        return self.stats.completed

    @property
    def pending(self) -> int:
        return self.stats.pending

    @property
    def skipped(self) -> int:
        return self.stats.skipped

    @property
    def total(self) -> int:
        return self.stats.total


@dataclass
class GrowthReport:
    goal: Goal
    summaries: List[SprintStatusSummary]
    insights: GrowthInsights
    logs: List[ProgressLog]


def clamp_include_sprints(value: Optional[int]) -> int:
    if value is None:
        return DEFAULT_INCLUDE_SPRINTS
    return max(1, min(MAX_INCLUDE_SPRINTS, value))


def parse_timestamp(value: Optional[str], default: datetime) -> datetime:
    """Parse an ISO-8601 timestamp; blank or unparsable input yields ``default``."""
    if not value or not value.strip():
        return default
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Ignoring unparsable timestamp %r", value)
        return default
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def build_growth_report(
    store: RecordStore,
    generator: ContentGenerator,
    payload: GrowthReportRequest,
    user_id: UUID,
    *,
    now: Optional[datetime] = None,
) -> GrowthReport:
    goal_id = parse_record_id(payload.goal_id, "goalId")
    goal = load_owned_goal(store, goal_id, user_id)

    current = now or datetime.now(timezone.utc)
    since = parse_timestamp(payload.since, current - timedelta(days=DEFAULT_WINDOW_DAYS))
    until = parse_timestamp(payload.until, current)
    if since > until:
        raise ValidationError("since must be before until")

    include = clamp_include_sprints(payload.include_sprints)
    sprints = store.select_records(
        Sprint,
        {"goal_id": goal.id},
        order_by="sprint_number",
        descending=True,
        limit=include,
    )

    tasks_by_sprint: Dict[UUID, List[SprintTask]] = defaultdict(list)
    if sprints:
        for task in store.select_records(SprintTask, {"sprint_id": [sprint.id for sprint in sprints]}):
            tasks_by_sprint[task.sprint_id].append(task)

    summaries = [
        SprintStatusSummary(sprint=sprint, stats=summarize_task_statuses(tasks_by_sprint[sprint.id]))
        for sprint in sprints
    ]

    logs = store.select_records(
        ProgressLog,
        {"goal_id": goal.id, "recorded_at": Between(since, until)},
        order_by="recorded_at",
        descending=True,
        limit=MAX_REPORT_LOGS,
    )

    insights = generator.generate_growth_report(GoalInput.from_record(goal), summaries, logs)
    logger.info("Built growth report goal=%s sprints=%d logs=%d", goal.id, len(summaries), len(logs))
    return GrowthReport(goal=goal, summaries=summaries, insights=insights, logs=logs)
