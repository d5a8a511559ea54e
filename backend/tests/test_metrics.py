"""Tests for tracing and metrics helpers."""
from __future__ import annotations

from typing import Any, Dict

import pytest

from growth_map.core.context import bind_request_id
from growth_map.observability import metrics
from growth_map.observability import tracing


class _RecordingTrace:
    def __init__(self, name: str, metadata: Dict[str, Any]):
        self.name = name
        self.metadata = metadata
        self.error_info: Dict[str, Any] | None = None
        self.ended = False

    def update(self, error_info=None, **kwargs) -> None:
        self.error_info = error_info

    def end(self) -> None:
        self.ended = True


class _RecordingClient:
    def __init__(self):
        self.traces: list[_RecordingTrace] = []

    def trace(self, name: str, metadata: Dict[str, Any] | None = None):
        handle = _RecordingTrace(name, metadata or {})
        self.traces.append(handle)
        return handle


@pytest.fixture()
def recording_client(monkeypatch) -> _RecordingClient:
    client = _RecordingClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: client)
    return client


def test_log_metric_records_value_and_closes_trace(recording_client) -> None:
    metrics.log_metric("generation.fallback.used", 1, metadata={"kind": "skill_tree"})

    recorded = recording_client.traces[0]
    assert recorded.name == "metric:generation.fallback.used"
    assert recorded.metadata["value"] == 1
    assert recorded.metadata["kind"] == "skill_tree"
    assert recorded.ended is True


def test_trace_drops_empty_metadata_and_uses_bound_request_id(recording_client) -> None:
    with bind_request_id("req-42"):
        with tracing.trace("sprints.regenerate", metadata={"sprint_id": None, "status_updates": 2}, user_id="u1"):
            pass

    recorded = recording_client.traces[0]
    assert recorded.metadata == {"status_updates": 2, "user_id": "u1", "request_id": "req-42"}


def test_trace_attaches_error_and_reraises(recording_client) -> None:
    with pytest.raises(ValueError):
        with tracing.trace("growth_map.create"):
            raise ValueError("boom")

    recorded = recording_client.traces[0]
    assert recorded.error_info == {"exception_type": "ValueError", "message": "boom"}
    assert recorded.ended is True


def test_metrics_are_noops_without_client(monkeypatch) -> None:
    monkeypatch.setattr(tracing, "get_opik_client", lambda: None)

    with tracing.trace("growth_report.build") as handle:
        assert handle is None
    metrics.log_metric("growth_report.build.success", 1)
