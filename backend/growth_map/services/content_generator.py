"""Skill tree, sprint plan and growth report generation.

Every public method has a deterministic heuristic result. When a completion
client is configured the model is asked first; its reply goes through a single
validator that returns :class:`Accepted` or :class:`Rejected`, and
:meth:`ContentGenerator._choose` falls back to the heuristic on rejection.
None of the public methods raise because of the completion service.
"""
from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, TypeVar, Union

import pydantic

from growth_map.observability.metrics import log_metric
from growth_map.observability.tracing import trace
from growth_map.services.drafts import (
    Difficulty,
    GoalInput,
    GrowthInsights,
    SkillTreeDraft,
    SkillTreeNodeDraft,
    SprintContext,
    SprintPlan,
    SprintTaskDraft,
)
from growth_map.services.llm_client import CompletionClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

INITIAL_SPRINT_TASKS = 4
PROMPT_CANDIDATE_NODES = 5
MAX_GENERATED_TASKS = 5
DEFAULT_TASK_MINUTES = 30
REPORT_PROMPT_LOGS = 5
VALID_DIFFICULTIES = {"low", "medium", "high"}

FALLBACK_RECOMMENDATIONS = [
    "Review the most skipped nodes and adjust your focus.",
    "Keep annotating progress logs so adaptation stays grounded in data.",
]


@dataclass(frozen=True)
class Accepted(Generic[T]):
    content: T


@dataclass(frozen=True)
class Rejected:
    reason: str


GenerationOutcome = Union[Accepted[T], Rejected]


class ContentGenerator:
    def __init__(self, completion_client: Optional[CompletionClient] = None) -> None:
        self.completion_client = completion_client

    # ------------------------------------------------------------------
    # Skill tree
    # ------------------------------------------------------------------

    def generate_skill_tree_draft(self, goal: GoalInput) -> SkillTreeDraft:
        """Return a skill tree with at least one node and unique node paths."""
        fallback_nodes = _fallback_nodes(goal)
        fallback = SkillTreeDraft(tree_json=_tree_json(goal, fallback_nodes), nodes=fallback_nodes)

        outcome = self._request(
            "skill_tree",
            _skill_tree_prompt(goal),
            lambda data: _validate_skill_tree(data, goal),
        )
        return self._choose("skill_tree", outcome, fallback)

    # ------------------------------------------------------------------
    # Sprints
    # ------------------------------------------------------------------

    def plan_initial_sprint(
        self,
        goal: GoalInput,
        nodes: Sequence[SkillTreeNodeDraft],
        start_date: Optional[date] = None,
        length_days: int = 6,
    ) -> SprintPlan:
        """Deterministic first sprint: one task per leading node."""
        start = start_date or date.today()
        return SprintPlan(
            sprint_number=1,
            from_date=start,
            to_date=start + timedelta(days=length_days),
            summary=f'Sprint 1 for "{goal.title}" focuses on clarifying intent and kickstarting practice.',
            tasks=_tasks_from_nodes(nodes, start),
        )

    def plan_adaptive_sprint(
        self,
        goal: GoalInput,
        nodes: Sequence[SkillTreeNodeDraft],
        sprint_number: int,
        from_date: date,
        to_date: date,
        context: SprintContext,
    ) -> SprintPlan:
        """Plan the next sprint from the previous sprint's completion context."""
        length_days = max(1, (to_date - from_date).days)
        heuristic = self.plan_initial_sprint(goal, nodes, from_date, length_days)
        summary = context.feedback or (
            f'Sprint {sprint_number} for "{goal.title}" builds on '
            f"{context.completed} completed and {context.pending} pending tasks."
        )
        fallback = heuristic.model_copy(
            update={
                "sprint_number": sprint_number,
                "from_date": from_date,
                "to_date": to_date,
                "summary": summary,
            }
        )

        outcome = self._request(
            "adaptive_sprint",
            _adaptive_sprint_prompt(goal, nodes, sprint_number, from_date, to_date, context),
            lambda data: _validate_sprint_plan(data, fallback),
        )
        return self._choose("adaptive_sprint", outcome, fallback)

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def generate_growth_report(
        self,
        goal: GoalInput,
        summaries: Sequence[Any],
        logs: Sequence[Any],
    ) -> GrowthInsights:
        """Narrative and recommendations for a set of sprint summaries."""
        total_completed = sum(summary.completed for summary in summaries)
        total_pending = sum(summary.pending for summary in summaries)
        fallback = GrowthInsights(
            narrative=(
                f"Across {len(summaries)} sprints you completed {total_completed} tasks and have "
                f"{total_pending} pending items. Continue tracking streaks and reflections."
            ),
            recommendations=list(FALLBACK_RECOMMENDATIONS),
        )

        outcome = self._request(
            "growth_report",
            _growth_report_prompt(goal, summaries, logs),
            _validate_growth_report,
        )
        return self._choose("growth_report", outcome, fallback)

    # ------------------------------------------------------------------
    # Completion plumbing
    # ------------------------------------------------------------------

    def _request(
        self,
        kind: str,
        prompt: str,
        validator: Callable[[Any], GenerationOutcome[T]],
    ) -> GenerationOutcome[T]:
        if self.completion_client is None:
            return Rejected("text completion is not configured")

        try:
            with trace(f"generation.{kind}", metadata={"prompt_chars": len(prompt)}):
                raw = self.completion_client.complete(prompt)
        except Exception as exc:  # completion failures always degrade to the heuristic
            return Rejected(f"completion failed: {exc}")

        try:
            data = json.loads(raw, parse_constant=_reject_constant)
        except (TypeError, ValueError) as exc:
            return Rejected(f"completion was not valid JSON: {exc}")
        if not isinstance(data, dict):
            return Rejected("completion was not a JSON object")
        try:
            return validator(data)
        except Exception as exc:  # unusable replies always degrade to the heuristic
            return Rejected(f"completion could not be validated: {exc}")

    def _choose(self, kind: str, outcome: GenerationOutcome[T], fallback: T) -> T:
        if isinstance(outcome, Accepted):
            log_metric("generation.model.used", 1, {"kind": kind})
            return outcome.content

        if self.completion_client is not None:
            logger.warning("Using heuristic %s because %s", kind, outcome.reason)
        log_metric("generation.fallback.used", 1, {"kind": kind, "reason": outcome.reason[:200]})
        return fallback


# ---------------------------------------------------------------------------
# Heuristics
# ---------------------------------------------------------------------------


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name}")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "goal"


def _fallback_nodes(goal: GoalInput) -> List[SkillTreeNodeDraft]:
    base = slugify(goal.title)
    focus = max(3, _round_half_up(goal.horizon_months * 4))
    return [
        SkillTreeNodeDraft(
            node_path=f"{base}.clarify",
            title=f"Clarify the vision for {goal.title}",
            level=1,
            focus_hours=focus,
            payload={"example": "define success criteria"},
        ),
        SkillTreeNodeDraft(
            node_path=f"{base}.practices",
            title="Build foundational practice habits",
            level=1,
            focus_hours=max(2, _round_half_up(focus * 0.8)),
            payload={"example": "daily review, spaced repetition"},
        ),
        SkillTreeNodeDraft(
            node_path=f"{base}.feedback",
            title="Capture signals and feedback",
            level=2,
            focus_hours=max(1, _round_half_up(focus * 0.6)),
            payload={"example": "weekly reflection"},
        ),
    ]


def _tree_json(goal: GoalInput, nodes: Sequence[SkillTreeNodeDraft]) -> Dict[str, Any]:
    return {
        "title": goal.title,
        "description": goal.description,
        "horizonMonths": goal.horizon_months,
        "createdBy": "system",
        "nodes": [
            {
                "path": node.node_path,
                "title": node.title,
                "level": node.level,
                "focusHours": node.focus_hours,
                "payload": node.payload,
            }
            for node in nodes
        ],
    }


def difficulty_for_focus(focus_hours: float) -> Difficulty:
    # Boundaries are strict: exactly 10 or 20 hours stay in the lower tier.
    if focus_hours > 20:
        return "high"
    if focus_hours > 10:
        return "medium"
    return "low"


def _default_due_date(start: date, index: int) -> date:
    return start + timedelta(days=index * 2 + 3)


def _tasks_from_nodes(nodes: Sequence[SkillTreeNodeDraft], start: date) -> List[SprintTaskDraft]:
    tasks: List[SprintTaskDraft] = []
    for index, node in enumerate(nodes[:INITIAL_SPRINT_TASKS]):
        minutes = max(15, _round_half_up(node.focus_hours))
        tasks.append(
            SprintTaskDraft(
                title=node.title,
                description=f"Work on {node.title} by allocating {minutes} focused minutes this sprint.",
                difficulty=difficulty_for_focus(node.focus_hours),
                due_date=_default_due_date(start, index),
                estimated_minutes=minutes,
                node_path=node.node_path,
            )
        )
    return tasks


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


def _skill_tree_prompt(goal: GoalInput) -> str:
    tags = f"Tags: {', '.join(goal.tags)}\n" if goal.tags else ""
    return (
        f'Create 3 skill-tree nodes for the goal titled "{goal.title}".\n'
        f"Description: {goal.description}\n"
        f"Horizon: {goal.horizon_months} months, {goal.daily_minutes} minutes per day.\n"
        f"{tags}"
        "Node paths are dot-separated and must be unique; level starts at 1.\n"
        'Output valid JSON like {"nodes": [{"nodePath":"...","title":"...","level":1,"focusHours":10,"payload":{}}]}.'
    )


def _adaptive_sprint_prompt(
    goal: GoalInput,
    nodes: Sequence[SkillTreeNodeDraft],
    sprint_number: int,
    from_date: date,
    to_date: date,
    context: SprintContext,
) -> str:
    node_lines = "\n".join(f"* {node.node_path}: {node.title}" for node in nodes[:PROMPT_CANDIDATE_NODES])
    feedback = f" Based on feedback: {context.feedback}" if context.feedback else ""
    feelings = f" Feelings: {', '.join(context.feeling_tags)}" if context.feeling_tags else ""
    return (
        f"Goal: {goal.title}\n"
        f"Description: {goal.description}\n"
        f"Sprint #: {sprint_number}, window {from_date.isoformat()} -> {to_date.isoformat()}\n"
        f"Context: completed {context.completed}, pending {context.pending}, skipped {context.skipped}."
        f"{feedback}{feelings}\n"
        f"Candidate nodes:\n{node_lines}\n"
        'Output JSON: {"summary": "...", "tasks": [{"title":"...","description":"...",'
        '"difficulty":"low|medium|high","nodePath":"...","estimatedMinutes": 15,"dueDate": "YYYY-MM-DD"}]}\n'
        f"Use at most {MAX_GENERATED_TASKS} tasks."
    )


def _growth_report_prompt(goal: GoalInput, summaries: Sequence[Any], logs: Sequence[Any]) -> str:
    sprint_lines = "\n".join(
        f"Sprint {summary.sprint.sprint_number}: {summary.completed} done, {summary.pending} pending, "
        f"{summary.skipped} skipped, summary {summary.sprint.summary or ''}"
        for summary in summaries
    )
    log_lines = "\n".join(
        f"Log {log.recorded_at.isoformat()}: {json.dumps(log.payload, default=str)}"
        for log in logs[:REPORT_PROMPT_LOGS]
    )
    return (
        f"You are a growth analyst. Goal: {goal.title}.\n"
        f"Sprints:\n{sprint_lines}\n"
        f"Logs:\n{log_lines}\n"
        'Output JSON {"narrative":"...","recommendations":["...","..."]}'
    )


# ---------------------------------------------------------------------------
# Reply validation
# ---------------------------------------------------------------------------


def _validate_skill_tree(data: Dict[str, Any], goal: GoalInput) -> GenerationOutcome[SkillTreeDraft]:
    raw_nodes = data.get("nodes")
    if not isinstance(raw_nodes, list) or not raw_nodes:
        return Rejected("reply had no nodes")
    try:
        nodes = [SkillTreeNodeDraft.model_validate(item) for item in raw_nodes]
    except pydantic.ValidationError as exc:
        return Rejected(f"invalid node: {exc.errors()[0].get('msg', 'schema mismatch')}")

    paths = [node.node_path for node in nodes]
    if len(set(paths)) != len(paths):
        return Rejected("node paths were not unique")
    return Accepted(SkillTreeDraft(tree_json=_tree_json(goal, nodes), nodes=nodes))


def _validate_sprint_plan(data: Dict[str, Any], fallback: SprintPlan) -> GenerationOutcome[SprintPlan]:
    raw_tasks = data.get("tasks")
    if not isinstance(raw_tasks, list) or not raw_tasks:
        return Rejected("reply had no tasks")

    tasks = [
        _normalize_task(item, fallback.from_date, index)
        for index, item in enumerate(raw_tasks[:MAX_GENERATED_TASKS])
        if isinstance(item, dict)
    ]
    if not tasks:
        return Rejected("reply tasks were not objects")

    summary = data.get("summary")
    return Accepted(
        fallback.model_copy(
            update={
                "summary": summary if isinstance(summary, str) and summary.strip() else fallback.summary,
                "tasks": tasks,
            }
        )
    )


def _normalize_task(raw: Dict[str, Any], from_date: date, index: int) -> SprintTaskDraft:
    difficulty = raw.get("difficulty")
    minutes = raw.get("estimatedMinutes")
    node_path = raw.get("nodePath")
    title = raw.get("title")
    description = raw.get("description")
    return SprintTaskDraft(
        title=title if isinstance(title, str) and title.strip() else "Task",
        description=description if isinstance(description, str) else "Allocate focused time to this node.",
        difficulty=difficulty if difficulty in VALID_DIFFICULTIES else "medium",
        due_date=_parse_due_date(raw.get("dueDate")) or _default_due_date(from_date, index),
        estimated_minutes=(
            _round_half_up(minutes)
            if _is_positive_number(minutes)
            else DEFAULT_TASK_MINUTES
        ),
        node_path=node_path if isinstance(node_path, str) and node_path else None,
    )


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def _parse_due_date(value: Any) -> Optional[date]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _validate_growth_report(data: Dict[str, Any]) -> GenerationOutcome[GrowthInsights]:
    narrative = data.get("narrative")
    recommendations = data.get("recommendations")
    if not isinstance(narrative, str) or not isinstance(recommendations, list):
        return Rejected("reply was not {narrative, recommendations}")
    return Accepted(
        GrowthInsights(
            narrative=narrative,
            recommendations=[item for item in recommendations if isinstance(item, str)],
        )
    )
