"""Adaptive sprint regeneration endpoint."""
from __future__ import annotations

from time import perf_counter
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from growth_map.api.deps import get_content_generator, get_record_store
from growth_map.api.schemas.records import ProgressLogRecord, SprintWithTasks
from growth_map.api.schemas.sprint import RegenerateSprintRequest, RegenerateSprintResponse
from growth_map.core.auth import get_current_user_id
from growth_map.db.store import RecordStore
from growth_map.observability.metrics import log_metric
from growth_map.observability.tracing import trace
from growth_map.services.content_generator import ContentGenerator
from growth_map.services.sprint_regenerator import regenerate_sprint

router = APIRouter()


@router.post(
    "/sprints/regenerate",
    response_model=RegenerateSprintResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["sprints"],
)
def regenerate_sprint_endpoint(
    request: Request,
    payload: RegenerateSprintRequest,
    user_id: UUID = Depends(get_current_user_id),
    store: RecordStore = Depends(get_record_store),
    generator: ContentGenerator = Depends(get_content_generator),
) -> RegenerateSprintResponse:
    request_id = getattr(request.state, "request_id", None)
    metadata = {
        "user_id": str(user_id),
        "sprint_id": payload.sprint_id or None,
        "status_updates": len(payload.status_updates),
        "request_id": request_id,
    }
    start = perf_counter()

    with trace("sprints.regenerate", metadata=metadata, user_id=str(user_id), request_id=request_id):
        result = regenerate_sprint(store, generator, payload, user_id)

    latency_ms = (perf_counter() - start) * 1000
    log_metric("sprints.regenerate.success", 1, metadata={"user_id": str(user_id)})
    log_metric(
        "sprints.regenerate.sprint_number",
        result.sprint.sprint_number,
        metadata={"user_id": str(user_id), "goal_id": str(result.sprint.goal_id)},
    )
    log_metric("sprints.regenerate.latency_ms", latency_ms, metadata={"user_id": str(user_id)})

    return RegenerateSprintResponse(
        sprint=SprintWithTasks.from_records(result.sprint, result.tasks),
        progress_log=ProgressLogRecord.model_validate(result.progress_log),
        request_id=request_id or "",
    )
