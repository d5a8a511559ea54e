"""Lookups and row builders shared by the planning pipelines."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from uuid import UUID

from growth_map.core.errors import AuthorizationError, NotFoundError, ValidationError
from growth_map.db.models.goal import Goal
from growth_map.db.models.skill_tree import SkillTree, SkillTreeNode
from growth_map.db.store import RecordStore
from growth_map.services.drafts import SkillTreeNodeDraft, SprintTaskDraft


def parse_record_id(value: Any, field: str) -> UUID:
    """Parse a required id from a request body, rejecting blanks and malformed ids."""
    if isinstance(value, UUID):
        return value
    text = str(value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required")
    try:
        return UUID(text)
    except ValueError as exc:
        raise ValidationError(f"{field} is not a valid id") from exc


def load_owned_goal(store: RecordStore, goal_id: UUID, user_id: UUID) -> Goal:
    goal = store.select_single_record(Goal, {"id": goal_id})
    if goal is None:
        raise NotFoundError("Goal not found")
    if goal.user_id != user_id:
        raise AuthorizationError("Forbidden")
    return goal


def load_current_skill_tree(
    store: RecordStore, goal_id: UUID
) -> Tuple[Optional[SkillTree], List[SkillTreeNode]]:
    """Return the highest-version tree of a goal and its nodes."""
    tree = store.select_single_record(SkillTree, {"goal_id": goal_id}, order_by="version", descending=True)
    if tree is None:
        return None, []
    nodes = store.select_records(SkillTreeNode, {"skill_tree_id": tree.id}, order_by="node_path")
    return tree, nodes


def node_record_to_draft(node: SkillTreeNode) -> SkillTreeNodeDraft:
    return SkillTreeNodeDraft(
        node_path=node.node_path,
        title=node.title,
        level=node.level,
        focus_hours=node.focus_hours,
        payload=node.payload or {},
    )


def build_task_rows(
    tasks: Sequence[SprintTaskDraft],
    sprint_id: UUID,
    node_ids: Mapping[str, UUID],
) -> List[Dict[str, Any]]:
    """Rows for ``sprint_tasks``; unknown node paths leave the task unlinked."""
    return [
        {
            "sprint_id": sprint_id,
            "skill_node_id": node_ids.get(task.node_path) if task.node_path else None,
            "title": task.title,
            "description": task.description,
            "difficulty": task.difficulty,
            "status": "pending",
            "due_date": task.due_date,
            "estimated_minutes": task.estimated_minutes,
        }
        for task in tasks
    ]
