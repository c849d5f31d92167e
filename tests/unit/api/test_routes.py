"""API tests — routes wired to in-memory fakes through dependency overrides."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from autoassign.adapters.persistence.database import get_session
from autoassign.application.use_cases.agent_overrides import (
    GetAgentOverridesUseCase,
    UpdateAgentOverridesUseCase,
)
from autoassign.application.use_cases.assignment_history import GetAssignmentHistoryUseCase
from autoassign.application.use_cases.manage_policy import GetPolicyUseCase, UpdatePolicyUseCase
from autoassign.domain.errors import Conflict, StoreError
from autoassign.infrastructure.api import dependencies
from autoassign.main import create_app
from tests.fakes import (
    FakeAgentDirectory,
    FakeAuditLog,
    FakeClock,
    FakePolicyRepo,
    FakeUnitOfWork,
    InMemoryStore,
    build_run_cycle,
    make_agent,
    make_item,
    make_policy,
)


class FakeSession:
    def __init__(self, healthy: bool = True):
        self._healthy = healthy

    async def execute(self, statement):
        if not self._healthy:
            raise ConnectionError("connection refused")
        return self

    def scalar(self):
        return 1


@pytest.fixture
def api_store():
    store = InMemoryStore()
    store.policies["default"] = make_policy()
    return store


@pytest.fixture
def client(api_store):
    app = create_app()
    clock = FakeClock()
    overrides = app.dependency_overrides
    overrides[dependencies.get_clock] = lambda: clock
    overrides[get_session] = lambda: FakeSession()
    overrides[dependencies.get_run_cycle_uc] = lambda: build_run_cycle(api_store, clock=clock)
    overrides[dependencies.get_policy_uc] = lambda: GetPolicyUseCase(FakePolicyRepo(api_store))
    overrides[dependencies.get_update_policy_uc] = lambda: UpdatePolicyUseCase(
        FakePolicyRepo(api_store), clock, FakeUnitOfWork(api_store)
    )
    overrides[dependencies.get_history_uc] = lambda: GetAssignmentHistoryUseCase(
        FakeAuditLog(api_store)
    )
    overrides[dependencies.get_agent_overrides_uc] = lambda: GetAgentOverridesUseCase(
        FakeAgentDirectory(api_store)
    )
    overrides[dependencies.get_update_agent_overrides_uc] = lambda: UpdateAgentOverridesUseCase(
        FakeAgentDirectory(api_store), FakeUnitOfWork(api_store)
    )
    return TestClient(app)


# ─── Health ─────────────────────────────────────────────────────────


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["database"] == "connected"
    assert data["cycle_running"] is False


def test_health_degraded(client):
    client.app.dependency_overrides[get_session] = lambda: FakeSession(healthy=False)
    data = client.get("/api/health").json()
    assert data["status"] == "degraded"


# ─── Config ─────────────────────────────────────────────────────────


def test_get_config(client):
    resp = client.get("/api/auto-assignment/config")
    assert resp.status_code == 200
    config = resp.json()["config"]
    assert config["max_assigned_tickets"] == 5
    assert config["refill_threshold"] == 2
    assert config["priority_order"] == "priority_first"
    assert config["channels"] == ["chat", "email"]


def test_get_config_missing(client, api_store):
    api_store.policies.clear()
    resp = client.get("/api/auto-assignment/config")
    assert resp.status_code == 404
    assert resp.json()["error"] == "ConfigurationMissing"


def test_patch_config_partial(client, api_store):
    resp = client.patch("/api/auto-assignment/config", json={"max_assigned_tickets": 8})
    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "Configuration updated successfully"
    assert data["config"]["max_assigned_tickets"] == 8
    assert data["config"]["refill_threshold"] == 2
    assert data["config"]["version"] == 2
    assert api_store.policies["default"].max_assigned_tickets == 8


@pytest.mark.parametrize("body", [
    {"max_assigned_tickets": "5"},
    {"enabled": "true"},
    {"max_assigned_tickets": 0},
    {"refill_threshold": 9},
    {"priority_order": "random"},
    {"channels": []},
    {"unknown_field": 1},
])
def test_patch_config_rejects_bad_input(client, api_store, body):
    before = api_store.policies["default"]
    resp = client.patch("/api/auto-assignment/config", json=body)
    assert resp.status_code == 422
    assert api_store.policies["default"] == before


# ─── Run & history ──────────────────────────────────────────────────


def test_run_assigns_and_logs(client, api_store):
    api_store.add_agent(make_agent("A"))
    api_store.add_items(make_item("1"), make_item("2", minutes=1))

    resp = client.post("/api/auto-assignment/run")

    assert resp.status_code == 200
    data = resp.json()
    assert data["cycle_status"] == "completed"
    assert data["assigned"] == 2
    assert data["message"] == "Auto-assignment completed: 2 tickets assigned"
    assert [r["work_item_id"] for r in data["results"]] == ["1", "2"]
    assert data["results"][0]["reason"] == "auto_refill"

    history = client.get("/api/auto-assignment/history").json()
    assert history["total"] == 2
    assert history["count"] == 2
    assert {r["work_item_id"] for r in history["history"]} == {"1", "2"}
    assert history["history"][0]["agent_name"] == "A"


def test_run_disabled(client, api_store):
    api_store.policies["default"] = make_policy(enabled=False)
    api_store.add_agent(make_agent("A"))
    api_store.add_items(make_item("1"))

    data = client.post("/api/auto-assignment/run").json()

    assert data["assigned"] == 0
    assert data["cycle_status"] == "disabled"
    assert api_store.unassigned_ids() == {"1"}


def test_run_store_failure_maps_to_503(client, api_store):
    class BrokenCycle:
        async def execute(self, deadline=None):
            raise StoreError("Reading work items failed", {"policy_id": "default"})

    client.app.dependency_overrides[dependencies.get_run_cycle_uc] = lambda: BrokenCycle()
    resp = client.post("/api/auto-assignment/run")
    assert resp.status_code == 503
    data = resp.json()
    assert data["status"] == "error"
    assert data["error"] == "StoreError"
    assert data["details"]["policy_id"] == "default"


def test_history_paging_validation(client):
    assert client.get("/api/auto-assignment/history?limit=0").status_code == 422
    assert client.get("/api/auto-assignment/history?limit=501").status_code == 422
    assert client.get("/api/auto-assignment/history?offset=-1").status_code == 422
    assert client.get("/api/auto-assignment/history?limit=10&offset=0").status_code == 200


# ─── Agent overrides ────────────────────────────────────────────────


def test_agent_settings_roundtrip(client, api_store):
    api_store.add_agent(make_agent("A"))

    resp = client.patch(
        "/api/agents/A/auto-assign",
        json={"auto_assign_max": 2, "auto_assign_channels": ["email"]},
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "Agent settings updated"

    settings = client.get("/api/agents/A/auto-assign").json()["settings"]
    assert settings["auto_assign_max"] == 2
    assert settings["auto_assign_channels"] == ["email"]

    cleared = client.patch("/api/agents/A/auto-assign", json={"auto_assign_max": None}).json()
    assert cleared["settings"]["auto_assign_max"] is None


def test_agent_settings_unknown_agent(client):
    assert client.get("/api/agents/ghost/auto-assign").status_code == 404
    resp = client.patch("/api/agents/ghost/auto-assign", json={"auto_assign_enabled": False})
    assert resp.status_code == 404
    assert resp.json()["error"] == "NotFound"


def test_agent_settings_strict_types(client, api_store):
    api_store.add_agent(make_agent("A"))
    resp = client.patch("/api/agents/A/auto-assign", json={"auto_assign_max": "3"})
    assert resp.status_code == 422
    assert api_store.agents["A"].auto_assign_max is None


def test_history_total_counts_all_records(client, api_store):
    api_store.add_agent(make_agent("A"))
    api_store.add_items(*(make_item(str(n), minutes=n) for n in range(3)))
    client.post("/api/auto-assignment/run")

    data = client.get("/api/auto-assignment/history?limit=1&offset=1").json()

    assert data["total"] == 3
    assert data["count"] == 1
    assert (data["limit"], data["offset"]) == (1, 1)


@pytest.mark.parametrize("method,path,body", [
    ("patch", "/api/auto-assignment/config", {"max_assigned_tickets": "5"}),
    ("patch", "/api/auto-assignment/config", {"unknown_field": 1}),
    ("get", "/api/auto-assignment/history?limit=abc", None),
])
def test_request_type_errors_use_error_body(client, method, path, body):
    kwargs = {"json": body} if body is not None else {}
    resp = getattr(client, method)(path, **kwargs)

    assert resp.status_code == 422
    data = resp.json()
    assert data["status"] == "error"
    assert data["error"] == "ValidationError"
    assert data["message"] == "Request validation failed"
    assert data["details"]["errors"]
    assert "detail" not in data


def test_policy_update_conflict_maps_to_409(client):
    class StaleUpdate:
        async def execute(self, changes):
            raise Conflict("Configuration was modified concurrently, try again", {"policy_id": "default"})

    client.app.dependency_overrides[dependencies.get_update_policy_uc] = lambda: StaleUpdate()
    resp = client.patch("/api/auto-assignment/config", json={"enabled": False})
    assert resp.status_code == 409
    assert resp.json()["error"] == "Conflict"
