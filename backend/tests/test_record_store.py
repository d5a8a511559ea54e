from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest

from growth_map.core.errors import UpstreamFailure
from growth_map.db.models.goal import Goal
from growth_map.db.models.sprint import Sprint, SprintTask
from growth_map.db.store import Between, RecordStore


@pytest.fixture()
def store(session_factory):
    db = session_factory()
    try:
        yield RecordStore(db)
    finally:
        db.close()


def _goal_row(user_id, title="Goal"):
    return {
        "user_id": user_id,
        "title": title,
        "description": "d",
        "horizon_months": 1,
        "daily_minutes": 10,
        "tags": [],
    }


def _sprint_rows(goal_id, count):
    return [
        {
            "goal_id": goal_id,
            "sprint_number": number,
            "from_date": date(2025, 1, number),
            "to_date": date(2025, 1, number + 6),
            "summary": None if number == 1 else f"Sprint {number}",
        }
        for number in range(1, count + 1)
    ]


def test_filters_support_equality_in_range_and_null(store):
    owner = uuid4()
    (goal,) = store.insert_records(Goal, [_goal_row(owner)])
    store.insert_records(Sprint, _sprint_rows(goal.id, 4))

    assert len(store.select_records(Sprint, {"goal_id": goal.id})) == 4
    picked = store.select_records(Sprint, {"sprint_number": [1, 3]}, order_by="sprint_number")
    assert [s.sprint_number for s in picked] == [1, 3]
    in_range = store.select_records(
        Sprint,
        {"from_date": Between(date(2025, 1, 2), date(2025, 1, 3))},
        order_by="sprint_number",
    )
    assert [s.sprint_number for s in in_range] == [2, 3]
    assert [s.sprint_number for s in store.select_records(Sprint, {"summary": None})] == [1]


def test_single_record_respects_ordering(store):
    (goal,) = store.insert_records(Goal, [_goal_row(uuid4())])
    store.insert_records(Sprint, _sprint_rows(goal.id, 3))

    latest = store.select_single_record(Sprint, {"goal_id": goal.id}, order_by="sprint_number", descending=True)

    assert latest.sprint_number == 3
    assert store.select_single_record(Sprint, {"goal_id": uuid4()}) is None


def test_update_returns_matching_rows(store):
    (goal,) = store.insert_records(Goal, [_goal_row(uuid4())])
    (sprint,) = store.insert_records(Sprint, _sprint_rows(goal.id, 1))
    task_a, task_b = store.insert_records(
        SprintTask,
        [{"sprint_id": sprint.id, "title": "A"}, {"sprint_id": sprint.id, "title": "B"}],
    )

    updated = store.update_records(SprintTask, {"status": "done"}, {"id": task_a.id, "sprint_id": sprint.id})

    assert [task.id for task in updated] == [task_a.id]
    assert updated[0].status == "done"
    assert store.select_single_record(SprintTask, {"id": task_b.id}).status == "pending"


def test_insert_nothing_returns_empty_list(store):
    assert store.insert_records(Goal, []) == []


def test_atomic_rolls_back_on_error(store, session_factory):
    with pytest.raises(RuntimeError):
        with store.atomic():
            store.insert_records(Goal, [_goal_row(uuid4())])
            raise RuntimeError("later step failed")

    with session_factory() as db:
        assert RecordStore(db).select_records(Goal) == []


def test_driver_errors_become_upstream_failures(store):
    orphan = {"goal_id": uuid4(), "sprint_number": 1, "from_date": date(2025, 1, 1), "to_date": date(2025, 1, 7)}

    with pytest.raises(UpstreamFailure):
        store.insert_records(Sprint, [orphan])
