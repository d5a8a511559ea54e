from __future__ import annotations

from types import SimpleNamespace
from uuid import uuid4

from growth_map.api.schemas.sprint import TaskStatusUpdate
from growth_map.services.sprint_stats import build_progress_payload, summarize_task_statuses


def _tasks(*statuses: str):
    return [SimpleNamespace(status=status) for status in statuses]


def test_summarize_counts_each_status() -> None:
    stats = summarize_task_statuses(_tasks("done", "pending", "skipped", "done"))

    assert (stats.completed, stats.pending, stats.skipped, stats.total) == (2, 1, 1, 4)


def test_unknown_status_only_counts_toward_total() -> None:
    stats = summarize_task_statuses(_tasks("done", "archived"))

    assert stats.as_dict() == {"completed": 1, "pending": 0, "skipped": 0, "total": 2}


def test_empty_sprint_has_zero_counts() -> None:
    assert summarize_task_statuses([]).total == 0


def test_progress_payload_records_updates_and_feedback() -> None:
    task_id = uuid4()
    stats = summarize_task_statuses(_tasks("done", "pending"))

    payload = build_progress_payload(
        stats,
        [TaskStatusUpdate(task_id=task_id, status="done", notes="finished early")],
        feedback="Good week",
        feeling_tags=["focused"],
    )

    assert payload == {
        "completed": 1,
        "pending": 1,
        "skipped": 0,
        "total": 2,
        "updates": [{"taskId": str(task_id), "status": "done", "notes": "finished early"}],
        "feedback": "Good week",
        "feelingTags": ["focused"],
    }
