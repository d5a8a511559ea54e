"""Growth map creation and goal detail endpoints."""
from __future__ import annotations

from time import perf_counter
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from growth_map.api.deps import get_content_generator, get_record_store
from growth_map.api.schemas.growth_map import CreateGrowthMapRequest, GoalDetailResponse, GrowthMapResponse
from growth_map.api.schemas.records import GoalRecord, SkillTreeRecord, SprintWithTasks
from growth_map.core.auth import get_current_user_id
from growth_map.db.store import RecordStore
from growth_map.observability.metrics import log_metric
from growth_map.observability.tracing import trace
from growth_map.services.content_generator import ContentGenerator
from growth_map.services.goal_detail import get_goal_detail
from growth_map.services.growth_map_builder import create_growth_map

router = APIRouter()


@router.post(
    "/growth-maps",
    response_model=GrowthMapResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["growth-maps"],
)
def create_growth_map_endpoint(
    request: Request,
    payload: CreateGrowthMapRequest,
    user_id: UUID = Depends(get_current_user_id),
    store: RecordStore = Depends(get_record_store),
    generator: ContentGenerator = Depends(get_content_generator),
) -> GrowthMapResponse:
    request_id = getattr(request.state, "request_id", None)
    metadata = {"user_id": str(user_id), "request_id": request_id}
    start = perf_counter()

    with trace("growth_map.create", metadata=metadata, user_id=str(user_id), request_id=request_id):
        result = create_growth_map(store, generator, payload, user_id)

    latency_ms = (perf_counter() - start) * 1000
    log_metric("growth_map.create.success", 1, metadata={"user_id": str(user_id)})
    log_metric(
        "growth_map.create.node_count",
        len(result.nodes),
        metadata={"user_id": str(user_id), "goal_id": str(result.goal.id)},
    )
    log_metric("growth_map.create.latency_ms", latency_ms, metadata={"user_id": str(user_id)})

    return GrowthMapResponse(
        goal=GoalRecord.model_validate(result.goal),
        skill_tree=SkillTreeRecord.from_records(result.skill_tree, result.nodes),
        sprint=SprintWithTasks.from_records(result.sprint, result.tasks),
        request_id=request_id or "",
    )


@router.get("/goals/{goal_id}", response_model=GoalDetailResponse, tags=["growth-maps"])
def goal_detail_endpoint(
    goal_id: UUID,
    request: Request,
    user_id: UUID = Depends(get_current_user_id),
    store: RecordStore = Depends(get_record_store),
) -> GoalDetailResponse:
    request_id = getattr(request.state, "request_id", None)
    metadata = {"user_id": str(user_id), "goal_id": str(goal_id), "request_id": request_id}

    with trace("growth_map.goal_detail", metadata=metadata, user_id=str(user_id), request_id=request_id):
        detail = get_goal_detail(store, goal_id, user_id)

    log_metric("growth_map.goal_detail.success", 1, metadata={"user_id": str(user_id)})
    return GoalDetailResponse(
        goal=GoalRecord.model_validate(detail.goal),
        skill_tree=SkillTreeRecord.from_records(detail.skill_tree, detail.nodes) if detail.skill_tree else None,
        latest_sprint=(
            SprintWithTasks.from_records(detail.latest_sprint, detail.tasks) if detail.latest_sprint else None
        ),
        request_id=request_id or "",
    )
