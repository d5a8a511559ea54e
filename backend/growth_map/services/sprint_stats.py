"""Task status tallies and progress-log payloads."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from growth_map.api.schemas.sprint import TaskStatusUpdate


@dataclass(frozen=True)
class TaskStatusCounts:
    completed: int
    pending: int
    skipped: int
    total: int

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def summarize_task_statuses(tasks: Iterable[Any]) -> TaskStatusCounts:
    """Count done/pending/skipped tasks.

    Statuses outside the three known values still count toward ``total``.
    """
    completed = pending = skipped = total = 0
    for task in tasks:
        total += 1
        if task.status == "done":
            completed += 1
        elif task.status == "pending":
            pending += 1
        elif task.status == "skipped":
            skipped += 1
    return TaskStatusCounts(completed=completed, pending=pending, skipped=skipped, total=total)


def build_progress_payload(
    stats: TaskStatusCounts,
    updates: Sequence[TaskStatusUpdate] = (),
    feedback: Optional[str] = None,
    feeling_tags: Optional[List[str]] = None,
) -> Dict[str, Any]:
    return {
        **stats.as_dict(),
        "updates": [
            {
                "taskId": str(update.task_id),
                "status": update.status,
                "notes": update.notes,
            }
            for update in updates
        ],
        "feedback": feedback,
        "feelingTags": list(feeling_tags or []),
    }
