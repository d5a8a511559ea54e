"""Create pipeline: goal -> skill tree -> first sprint -> tasks."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import List, Optional
from uuid import UUID

from growth_map.api.schemas.growth_map import CreateGrowthMapRequest
from growth_map.core.errors import UpstreamFailure, ValidationError
from growth_map.db.models.goal import Goal
from growth_map.db.models.skill_tree import SkillTree, SkillTreeNode
from growth_map.db.models.sprint import Sprint, SprintTask
from growth_map.db.store import RecordStore
from growth_map.services.content_generator import ContentGenerator
from growth_map.services.drafts import GoalInput
from growth_map.services.planning_records import build_task_rows

logger = logging.getLogger(__name__)

GENERATED_BY = "create-growth-map"


@dataclass
class GrowthMapResult:
    goal: Goal
    skill_tree: SkillTree
    nodes: List[SkillTreeNode]
    sprint: Sprint
    tasks: List[SprintTask]


def validate_goal_input(payload: CreateGrowthMapRequest) -> GoalInput:
    if not payload.title.strip() or not payload.description.strip():
        raise ValidationError("Goal title and description are required")
    if not math.isfinite(payload.horizon_months) or payload.horizon_months <= 0:
        raise ValidationError("horizonMonths must be a positive number")
    if not math.isfinite(payload.daily_minutes) or payload.daily_minutes <= 0:
        raise ValidationError("dailyMinutes must be a positive number")
    return GoalInput(
        title=payload.title,
        description=payload.description,
        horizon_months=payload.horizon_months,
        daily_minutes=payload.daily_minutes,
        tags=tuple(payload.tags),
    )


def create_growth_map(
    store: RecordStore,
    generator: ContentGenerator,
    payload: CreateGrowthMapRequest,
    user_id: UUID,
    *,
    start_date: Optional[date] = None,
) -> GrowthMapResult:
    """Persist a new goal with its skill tree and first sprint.

    Not idempotent: every call creates a new goal. All writes share one
    transaction, so a failure leaves no partial growth map behind.
    """
    goal_input = validate_goal_input(payload)

    with store.atomic():
        goal = _first(
            store.insert_records(
                Goal,
                [
                    {
                        "user_id": user_id,
                        "title": payload.title,
                        "description": payload.description,
                        "horizon_months": payload.horizon_months,
                        "daily_minutes": payload.daily_minutes,
                        "status": "active",
                        "priority": 0,
                        "target_date": payload.target_date,
                        "tags": list(payload.tags),
                    }
                ],
            ),
            "Failed to insert goal",
        )

        draft = generator.generate_skill_tree_draft(goal_input)
        tree = _first(
            store.insert_records(
                SkillTree,
                [{"goal_id": goal.id, "tree_json": draft.tree_json, "generated_by": GENERATED_BY, "version": 1}],
            ),
            "Failed to persist skill tree",
        )
        nodes = store.insert_records(
            SkillTreeNode,
            [
                {
                    "skill_tree_id": tree.id,
                    "node_path": node.node_path,
                    "title": node.title,
                    "level": node.level,
                    "focus_hours": node.focus_hours,
                    "payload": node.payload,
                }
                for node in draft.nodes
            ],
        )
        if not nodes:
            raise UpstreamFailure("Failed to persist skill tree nodes")

        plan = generator.plan_initial_sprint(goal_input, draft.nodes, start_date)
        sprint = _first(
            store.insert_records(
                Sprint,
                [
                    {
                        "goal_id": goal.id,
                        "sprint_number": plan.sprint_number,
                        "from_date": plan.from_date,
                        "to_date": plan.to_date,
                        "status": "planned",
                        "summary": plan.summary,
                        "metrics": {"horizonMonths": payload.horizon_months},
                    }
                ],
            ),
            "Failed to persist sprint",
        )

        node_ids = {node.node_path: node.id for node in nodes}
        tasks = store.insert_records(SprintTask, build_task_rows(plan.tasks, sprint.id, node_ids))
        if not tasks:
            raise UpstreamFailure("Failed to persist sprint tasks")

    logger.info("Created growth map goal=%s nodes=%d tasks=%d", goal.id, len(nodes), len(tasks))
    return GrowthMapResult(goal=goal, skill_tree=tree, nodes=nodes, sprint=sprint, tasks=tasks)


def _first(rows: list, message: str):
    if not rows:
        raise UpstreamFailure(message)
    return rows[0]
