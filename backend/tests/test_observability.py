"""Tests ensuring observability wiring is safe by default."""
from __future__ import annotations

import importlib


def test_app_import_succeeds_when_opik_is_disabled(monkeypatch) -> None:
    monkeypatch.setenv("OPIK_ENABLED", "false")
    monkeypatch.delenv("OPIK_API_KEY", raising=False)

    import growth_map.core.config as core_config
    import growth_map.observability.client as client_module

    importlib.reload(core_config)
    reloaded_client = importlib.reload(client_module)
    reloaded_client.reset_opik_client()

    assert reloaded_client.init_opik() is None
    assert reloaded_client.get_opik_client() is None


def test_missing_api_key_disables_tracing(monkeypatch) -> None:
    import growth_map.observability.client as client_module
    from growth_map.core.config import Settings

    monkeypatch.setattr(client_module, "settings", Settings(opik_enabled=True, opik_api_key=None))
    client_module.reset_opik_client()
    try:
        assert client_module.init_opik() is None
    finally:
        client_module.reset_opik_client()
