from __future__ import annotations

from datetime import date, timedelta
from uuid import UUID, uuid4

from sqlalchemy import func, select

from growth_map.api.deps import get_content_generator
from growth_map.db.models.goal import Goal
from growth_map.db.models.skill_tree import SkillTree
from growth_map.db.models.sprint import Sprint
from growth_map.main import app
from growth_map.services.content_generator import ContentGenerator
from growth_map.services.drafts import SprintPlan


def _count(session_factory, model) -> int:
    with session_factory() as db:
        return db.scalar(select(func.count()).select_from(model))


def test_create_growth_map_persists_goal_tree_and_first_sprint(api):
    body = api.create_growth_map(targetDate="2025-07-01")

    goal = body["goal"]
    assert goal["user_id"] == str(api.owner_id)
    assert goal["status"] == "active"
    assert goal["tags"] == ["language"]
    assert goal["target_date"] == "2025-07-01"

    tree = body["skillTree"]
    assert tree["goal_id"] == goal["id"]
    assert tree["generated_by"] == "create-growth-map"
    assert tree["version"] == 1
    assert len(tree["nodes"]) == 3

    sprint = body["sprint"]
    today = date.today()
    assert sprint["sprint_number"] == 1
    assert sprint["status"] == "planned"
    assert sprint["from_date"] == today.isoformat()
    assert sprint["to_date"] == (today + timedelta(days=6)).isoformat()
    assert sprint["metrics"] == {"horizonMonths": 6}

    node_ids = {node["id"] for node in tree["nodes"]}
    assert len(sprint["tasks"]) == 3
    assert all(task["status"] == "pending" for task in sprint["tasks"])
    assert {task["skill_node_id"] for task in sprint["tasks"]} == node_ids
    assert body["requestId"]


def test_create_growth_map_twice_creates_two_goals(api):
    first = api.create_growth_map()
    second = api.create_growth_map()

    assert first["goal"]["id"] != second["goal"]["id"]
    assert _count(api.session_factory, Goal) == 2


def test_blank_title_is_rejected_without_writes(api):
    response = api.client.post(
        "/growth-maps",
        json={"title": "   ", "description": "x", "horizonMonths": 3, "dailyMinutes": 20},
        headers=api.headers(),
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Goal title and description are required"}
    assert _count(api.session_factory, Goal) == 0


def test_non_positive_numbers_are_rejected(api):
    horizon = api.client.post(
        "/growth-maps",
        json={"title": "Run", "description": "5k", "horizonMonths": 0, "dailyMinutes": 20},
        headers=api.headers(),
    )
    minutes = api.client.post(
        "/growth-maps",
        json={"title": "Run", "description": "5k", "horizonMonths": 2, "dailyMinutes": -5},
        headers=api.headers(),
    )

    assert horizon.status_code == 400
    assert horizon.json()["detail"] == "horizonMonths must be a positive number"
    assert minutes.status_code == 400
    assert minutes.json()["detail"] == "dailyMinutes must be a positive number"


def test_malformed_body_maps_to_bad_request(api):
    response = api.client.post(
        "/growth-maps",
        json={"title": "Run", "description": "5k"},
        headers=api.headers(),
    )

    assert response.status_code == 400
    assert "detail" in response.json()


def test_missing_or_invalid_token_is_unauthorized(api):
    body = {"title": "Run", "description": "5k", "horizonMonths": 2, "dailyMinutes": 20}

    missing = api.client.post("/growth-maps", json=body)
    invalid = api.client.post("/growth-maps", json=body, headers=api.headers("nope"))

    assert missing.status_code == 401
    assert missing.json() == {"detail": "Authorization token required"}
    assert invalid.status_code == 401
    assert _count(api.session_factory, Goal) == 0


class _NoTaskGenerator(ContentGenerator):
    def plan_initial_sprint(self, goal, nodes, start_date=None, length_days=6):
        plan = super().plan_initial_sprint(goal, nodes, start_date, length_days)
        return SprintPlan(
            sprint_number=plan.sprint_number,
            from_date=plan.from_date,
            to_date=plan.to_date,
            summary=plan.summary,
            tasks=[],
        )


def test_failed_step_rolls_back_the_whole_growth_map(api):
    app.dependency_overrides[get_content_generator] = lambda: _NoTaskGenerator()

    response = api.client.post(
        "/growth-maps",
        json={"title": "Run", "description": "5k", "horizonMonths": 2, "dailyMinutes": 20},
        headers=api.headers(),
    )

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to persist sprint tasks"}
    assert _count(api.session_factory, Goal) == 0
    assert _count(api.session_factory, SkillTree) == 0
    assert _count(api.session_factory, Sprint) == 0


def test_goal_detail_returns_tree_and_latest_sprint(api):
    created = api.create_growth_map()
    goal_id = created["goal"]["id"]

    response = api.client.get(f"/goals/{goal_id}", headers=api.headers())

    assert response.status_code == 200
    data = response.json()
    assert data["goal"]["id"] == goal_id
    assert [node["node_path"] for node in data["skillTree"]["nodes"]] == sorted(
        node["node_path"] for node in created["skillTree"]["nodes"]
    )
    assert data["latestSprint"]["id"] == created["sprint"]["id"]
    assert len(data["latestSprint"]["tasks"]) == 3


def test_goal_detail_enforces_ownership(api):
    goal_id = api.create_growth_map()["goal"]["id"]

    forbidden = api.client.get(f"/goals/{goal_id}", headers=api.headers("other-token"))
    missing = api.client.get(f"/goals/{uuid4()}", headers=api.headers())

    assert forbidden.status_code == 403
    assert forbidden.json() == {"detail": "Forbidden"}
    assert missing.status_code == 404
    assert missing.json() == {"detail": "Goal not found"}


def test_goal_detail_without_tree_or_sprints(api):
    with api.session_factory() as db:
        goal = Goal(
            user_id=api.owner_id,
            title="Draft goal",
            description="Not planned yet",
            horizon_months=1,
            daily_minutes=10,
            tags=[],
        )
        db.add(goal)
        db.commit()
        goal_id = UUID(str(goal.id))

    response = api.client.get(f"/goals/{goal_id}", headers=api.headers())

    assert response.status_code == 200
    data = response.json()
    assert data["goal"]["status"] == "draft"
    assert data["skillTree"] is None
    assert data["latestSprint"] is None
