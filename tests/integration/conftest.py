"""Pytest configuration and fixtures for API integration tests."""

import asyncio
import time
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient

import api.dependencies as dependencies
from api.main import app
from tests.fakes import make_settings
from core.infrastructure.adapters.persistence.memory_audit_store import InMemoryAuditStore
from orchestration.executor import CommandExecutor
from orchestration.models import StepContext, StepOutcome
from orchestration.orchestrator import RunController
from orchestration.workflow import StepDefinition, StepRegistry


async def _passing(ctx: StepContext) -> StepOutcome:
    await asyncio.sleep(0.01)
    return StepOutcome(success=True, output="ok")


async def _failing(ctx: StepContext) -> StepOutcome:
    await asyncio.sleep(0.01)
    return StepOutcome(success=False, output="error TS2304: Cannot find name 'zodiac'")


FAST_REGISTRY = StepRegistry(
    [
        StepDefinition("Install Dependencies", _passing),
        StepDefinition("Lint", _failing),
        StepDefinition("Console/Network Check", _passing),
    ]
)


@pytest.fixture
def test_client(tmp_path, monkeypatch) -> Generator[TestClient, None, None]:
    """FastAPI test client wired to an in-memory store and a fast step registry.

    The storefront project directory, and with it the managed .env files,
    is the test's tmp_path.
    """
    dependencies.reset_dependencies()

    store = InMemoryAuditStore()
    settings = make_settings(tmp_path)
    monkeypatch.setattr(dependencies, "_audit_settings", settings)
    monkeypatch.setattr(dependencies, "_audit_store", store)
    monkeypatch.setattr(
        dependencies,
        "_run_controller",
        RunController(
            store=store,
            notifier=dependencies.get_event_bus(),
            registry=FAST_REGISTRY,
            executor=CommandExecutor(cwd=tmp_path, timeout_seconds=5),
            settings=settings,
        ),
    )

    with TestClient(app) as client:
        yield client

    dependencies.reset_dependencies()


@pytest.fixture
def wait_for_run(test_client) -> Callable[[str], dict]:
    """Poll the run endpoint until the run reaches a terminal status."""

    def _wait(run_id: str, timeout: float = 5.0) -> dict:
        deadline = time.monotonic() + timeout
        while True:
            response = test_client.get(f"/api/audit/runs/{run_id}")
            assert response.status_code == 200
            details = response.json()
            if details["run"]["status"] in ("completed", "failed"):
                return details
            if time.monotonic() > deadline:
                pytest.fail(f"Run {run_id} did not finish: {details['run']}")
            time.sleep(0.02)

    return _wait
