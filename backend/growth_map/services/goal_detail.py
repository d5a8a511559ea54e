"""Read model for a single goal."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from growth_map.db.models.goal import Goal
from growth_map.db.models.skill_tree import SkillTree, SkillTreeNode
from growth_map.db.models.sprint import Sprint, SprintTask
from growth_map.db.store import RecordStore
from growth_map.services.planning_records import load_current_skill_tree, load_owned_goal


@dataclass
class GoalDetail:
    goal: Goal
    skill_tree: Optional[SkillTree] = None
    nodes: List[SkillTreeNode] = field(default_factory=list)
    latest_sprint: Optional[Sprint] = None
    tasks: List[SprintTask] = field(default_factory=list)


def get_goal_detail(store: RecordStore, goal_id: UUID, user_id: UUID) -> GoalDetail:
    goal = load_owned_goal(store, goal_id, user_id)
    tree, nodes = load_current_skill_tree(store, goal.id)

    latest = store.select_single_record(Sprint, {"goal_id": goal.id}, order_by="sprint_number", descending=True)
    tasks = store.select_records(SprintTask, {"sprint_id": latest.id}, order_by="due_date") if latest else []

    return GoalDetail(goal=goal, skill_tree=tree, nodes=nodes, latest_sprint=latest, tasks=tasks)
