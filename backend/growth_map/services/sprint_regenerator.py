"""Regenerate pipeline: close the current sprint and plan the next one."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Tuple
from uuid import UUID

from growth_map.api.schemas.sprint import RegenerateSprintRequest
from growth_map.core.errors import NotFoundError, UpstreamFailure, ValidationError
from growth_map.db.models.progress_log import ProgressLog
from growth_map.db.models.sprint import Sprint, SprintTask
from growth_map.db.store import RecordStore
from growth_map.services.content_generator import ContentGenerator
from growth_map.services.drafts import GoalInput, SprintContext
from growth_map.services.planning_records import (
    build_task_rows,
    load_current_skill_tree,
    load_owned_goal,
    node_record_to_draft,
    parse_record_id,
)
from growth_map.services.sprint_stats import build_progress_payload, summarize_task_statuses

logger = logging.getLogger(__name__)

MIN_SPRINT_LENGTH_DAYS = 6


@dataclass
class RegeneratedSprint:
    sprint: Sprint
    tasks: List[SprintTask]
    progress_log: ProgressLog


def next_sprint_window(from_date: date, to_date: date) -> Tuple[date, date]:
    """The window following ``from_date..to_date``, never shorter than six days."""
    length = max(MIN_SPRINT_LENGTH_DAYS, (to_date - from_date).days)
    next_from = to_date + timedelta(days=1)
    return next_from, next_from + timedelta(days=length)


def regenerate_sprint(
    store: RecordStore,
    generator: ContentGenerator,
    payload: RegenerateSprintRequest,
    user_id: UUID,
) -> RegeneratedSprint:
    """Apply status feedback to a sprint and plan the sprint after it.

    The progress log is attached to the concluded sprint, not the new one.
    """
    sprint_id = parse_record_id(payload.sprint_id, "sprintId")

    sprint = store.select_single_record(Sprint, {"id": sprint_id})
    if sprint is None:
        raise NotFoundError("Sprint not found")
    goal = load_owned_goal(store, sprint.goal_id, user_id)

    current_tasks = store.select_records(SprintTask, {"sprint_id": sprint.id})
    valid_task_ids = {task.id for task in current_tasks}
    for update in payload.status_updates:
        if update.task_id not in valid_task_ids:
            raise ValidationError("Status update refers to a task that does not belong to the sprint")

    with store.atomic():
        for update in payload.status_updates:
            store.update_records(
                SprintTask,
                {"status": update.status},
                {"id": update.task_id, "sprint_id": sprint.id},
            )

        stats = summarize_task_statuses(store.select_records(SprintTask, {"sprint_id": sprint.id}))

        latest = store.select_single_record(Sprint, {"goal_id": goal.id}, order_by="sprint_number", descending=True)
        next_number = (latest.sprint_number if latest else 0) + 1
        from_date, to_date = next_sprint_window(sprint.from_date, sprint.to_date)

        goal_input = GoalInput.from_record(goal)
        _, node_records = load_current_skill_tree(store, goal.id)
        if node_records:
            node_drafts = [node_record_to_draft(node) for node in node_records]
        else:
            logger.info("Goal %s has no skill tree nodes; generating substitutes", goal.id)
            node_drafts = generator.generate_skill_tree_draft(goal_input).nodes

        plan = generator.plan_adaptive_sprint(
            goal_input,
            node_drafts,
            next_number,
            from_date,
            to_date,
            SprintContext(
                completed=stats.completed,
                pending=stats.pending,
                skipped=stats.skipped,
                feedback=payload.feedback,
                feeling_tags=payload.feeling_tags,
            ),
        )

        new_sprints = store.insert_records(
            Sprint,
            [
                {
                    "goal_id": goal.id,
                    "sprint_number": plan.sprint_number,
                    "from_date": plan.from_date,
                    "to_date": plan.to_date,
                    "status": "planned",
                    "summary": plan.summary,
                    "metrics": {
                        "completed": stats.completed,
                        "pending": stats.pending,
                        "skipped": stats.skipped,
                        "feedback": payload.feedback,
                        "feelingTags": list(payload.feeling_tags),
                    },
                }
            ],
        )
        if not new_sprints:
            raise UpstreamFailure("Failed to persist regenerated sprint")
        next_sprint = new_sprints[0]

        node_ids = {node.node_path: node.id for node in node_records}
        tasks = store.insert_records(SprintTask, build_task_rows(plan.tasks, next_sprint.id, node_ids))
        if not tasks:
            raise UpstreamFailure("Failed to persist regenerated sprint tasks")

        logs = store.insert_records(
            ProgressLog,
            [
                {
                    "user_id": user_id,
                    "goal_id": goal.id,
                    "sprint_id": sprint.id,
                    "payload": build_progress_payload(
                        stats,
                        payload.status_updates,
                        payload.feedback,
                        payload.feeling_tags,
                    ),
                }
            ],
        )
        if not logs:
            raise UpstreamFailure("Failed to persist progress log")

    logger.info(
        "Regenerated sprint %s -> #%d (%d done, %d pending, %d skipped)",
        sprint.id,
        next_number,
        stats.completed,
        stats.pending,
        stats.skipped,
    )
    return RegeneratedSprint(sprint=next_sprint, tasks=tasks, progress_log=logs[0])
