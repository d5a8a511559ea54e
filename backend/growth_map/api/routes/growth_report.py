"""Growth report endpoint."""
from __future__ import annotations

from time import perf_counter
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from growth_map.api.deps import get_content_generator, get_record_store
from growth_map.api.schemas.records import GoalRecord, ProgressLogRecord, SprintRecord
from growth_map.api.schemas.report import (
    GrowthInsightsPayload,
    GrowthReportRequest,
    GrowthReportResponse,
    SprintSummary,
)
from growth_map.core.auth import get_current_user_id
from growth_map.db.store import RecordStore
from growth_map.observability.metrics import log_metric
from growth_map.observability.tracing import trace
from growth_map.services.content_generator import ContentGenerator
from growth_map.services.growth_report import build_growth_report

router = APIRouter()


@router.post("/growth-report", response_model=GrowthReportResponse, tags=["reports"])
def growth_report_endpoint(
    request: Request,
    payload: GrowthReportRequest,
    user_id: UUID = Depends(get_current_user_id),
    store: RecordStore = Depends(get_record_store),
    generator: ContentGenerator = Depends(get_content_generator),
) -> GrowthReportResponse:
    request_id = getattr(request.state, "request_id", None)
    metadata = {"user_id": str(user_id), "goal_id": payload.goal_id or None, "request_id": request_id}
    start = perf_counter()

    with trace("growth_report.build", metadata=metadata, user_id=str(user_id), request_id=request_id):
        report = build_growth_report(store, generator, payload, user_id)

    latency_ms = (perf_counter() - start) * 1000
    log_metric("growth_report.build.success", 1, metadata={"user_id": str(user_id)})
    log_metric(
        "growth_report.build.sprint_count",
        len(report.summaries),
        metadata={"user_id": str(user_id), "goal_id": str(report.goal.id)},
    )
    log_metric("growth_report.build.latency_ms", latency_ms, metadata={"user_id": str(user_id)})

    return GrowthReportResponse(
        goal=GoalRecord.model_validate(report.goal),
        sprint_summaries=[
            SprintSummary(
                sprint=SprintRecord.model_validate(summary.sprint),
                completed=summary.completed,
                pending=summary.pending,
                skipped=summary.skipped,
                total=summary.total,
            )
            for summary in report.summaries
        ],
        insights=GrowthInsightsPayload(
            narrative=report.insights.narrative,
            recommendations=list(report.insights.recommendations),
        ),
        progress_logs=[ProgressLogRecord.model_validate(log) for log in report.logs],
        request_id=request_id or "",
    )
