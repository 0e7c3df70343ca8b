"""Behavioural tests shared by both AuditStore implementations."""

from datetime import timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from core.domain.entities import ApiConnection, AuditRun, AuditStep, DetectedIssue, EnvironmentVar
from core.domain.enums import ConnectionStatus, IssueSeverity, IssueType, RunStatus, StepStatus
from core.domain.exceptions import DuplicateRecordError, RecordNotFoundError
from core.domain.repositories import AuditStore
from core.infrastructure.adapters.persistence.memory_audit_store import InMemoryAuditStore
from core.infrastructure.database.config import create_session_factory
from core.infrastructure.database.models import Base
from core.infrastructure.database.repositories.sqlalchemy_audit_store import SQLAlchemyAuditStore


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(params=["memory", "sqlalchemy"])
async def store(request) -> AsyncGenerator[AuditStore, None]:
    if request.param == "memory":
        yield InMemoryAuditStore()
        return

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield SQLAlchemyAuditStore(create_session_factory(engine))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


def _issue(run_id, severity: IssueSeverity, title: str) -> DetectedIssue:
    return DetectedIssue(
        type=IssueType.FORM_INPUT,
        severity=severity,
        title=title,
        description="disabled input",
        run_id=run_id,
        file_path="./client/src/App.tsx",
        line_number=3,
    )


@pytest.mark.asyncio
async def test_run_round_trip(store):
    run = AuditRun()
    await store.create_run(run)

    loaded = await store.get_run(run.id)

    assert loaded.id == run.id
    assert loaded.status is RunStatus.PENDING
    assert loaded.started_at == run.started_at
    assert loaded.started_at.tzinfo is not None
    assert await store.get_run("missing") is None


@pytest.mark.asyncio
async def test_update_run(store):
    run = AuditRun()
    await store.create_run(run)

    run.mark_running()
    run.mark_completed({"total_steps": 6, "failed": 1})
    await store.update_run(run)

    loaded = await store.get_run(run.id)
    assert loaded.status is RunStatus.COMPLETED
    assert loaded.results == {"total_steps": 6, "failed": 1}
    assert loaded.completed_at is not None
    assert loaded.logs == ["run started", "run completed"]


@pytest.mark.asyncio
async def test_list_runs_newest_first(store):
    older = AuditRun()
    newer = AuditRun(started_at=older.started_at + timedelta(seconds=1))
    await store.create_run(older)
    await store.create_run(newer)

    runs = await store.list_runs()

    assert [r.id for r in runs] == [newer.id, older.id]


@pytest.mark.asyncio
async def test_steps_listed_in_order(store):
    run = AuditRun()
    await store.create_run(run)
    steps = [AuditStep(run_id=run.id, name=name, order=order) for order, name in ((2, "Lint"), (1, "Install"))]
    await store.create_steps(steps)

    listed = await store.list_steps(run.id)

    assert [s.name for s in listed] == ["Install", "Lint"]
    assert await store.list_steps("other-run") == []


@pytest.mark.asyncio
async def test_update_step(store):
    run = AuditRun()
    await store.create_run(run)
    step = AuditStep(run_id=run.id, name="Lint", order=1)
    await store.create_steps([step])

    step.mark_running()
    step.finish(False, "src/App.tsx(3,1): error TS2304", "src/App.tsx(3,1): error TS2304")
    await store.update_step(step)

    loaded = await store.get_step(step.id)
    assert loaded.status is StepStatus.FAILED
    assert loaded.error_message == "src/App.tsx(3,1): error TS2304"
    assert loaded.started_at is not None
    assert loaded.completed_at is not None


@pytest.mark.asyncio
async def test_update_unknown_records_raises(store):
    with pytest.raises(RecordNotFoundError):
        await store.update_run(AuditRun())
    with pytest.raises(RecordNotFoundError):
        await store.update_step(AuditStep(run_id="run", name="Lint", order=1))
    with pytest.raises(RecordNotFoundError):
        await store.update_issue(_issue(None, IssueSeverity.LOW, "ghost"))


@pytest.mark.asyncio
async def test_run_issues_sorted_by_severity(store):
    run = AuditRun()
    await store.create_run(run)
    await store.create_issue(_issue(run.id, IssueSeverity.LOW, "low"))
    await store.create_issue(_issue(run.id, IssueSeverity.CRITICAL, "critical"))
    await store.create_issue(_issue(run.id, IssueSeverity.MEDIUM, "medium"))
    await store.create_issue(_issue(None, IssueSeverity.HIGH, "manual"))

    scoped = await store.list_issues(run.id)
    everything = await store.list_issues()

    assert [i.title for i in scoped] == ["critical", "medium", "low"]
    assert len(everything) == 4


@pytest.mark.asyncio
async def test_update_issue(store):
    issue = await store.create_issue(_issue(None, IssueSeverity.HIGH, "manual"))

    issue.is_resolved = True
    issue.recommendation = "Drop the readOnly prop"
    await store.update_issue(issue)

    loaded = await store.get_issue(issue.id)
    assert loaded.is_resolved is True
    assert loaded.recommendation == "Drop the readOnly prop"
    assert loaded.line_number == 3


@pytest.mark.asyncio
async def test_reads_are_snapshots(store):
    run = AuditRun()
    await store.create_run(run)

    snapshot = await store.get_run(run.id)
    snapshot.logs.append("local change")

    assert (await store.get_run(run.id)).logs == []


@pytest.mark.asyncio
async def test_env_vars_listed_by_key_and_service(store):
    await store.create_env_var(EnvironmentVar(key="RAZORPAY_KEY_SECRET", value="s3cret", service="razorpay"))
    await store.create_env_var(EnvironmentVar(key="PROKERALA_API_KEY", value="pk", service="prokerala"))
    await store.create_env_var(EnvironmentVar(key="RAZORPAY_KEY_ID", value="rzp_test", service="razorpay"))

    everything = await store.list_env_vars()
    razorpay = await store.list_env_vars("razorpay")

    assert [v.key for v in everything] == ["PROKERALA_API_KEY", "RAZORPAY_KEY_ID", "RAZORPAY_KEY_SECRET"]
    assert [v.key for v in razorpay] == ["RAZORPAY_KEY_ID", "RAZORPAY_KEY_SECRET"]
    assert (await store.get_env_var_by_key("PROKERALA_API_KEY")).value == "pk"
    assert await store.get_env_var_by_key("MISSING") is None


@pytest.mark.asyncio
async def test_env_var_keys_are_unique(store):
    first = await store.create_env_var(EnvironmentVar(key="GOAFFPRO_API_KEY", value="a"))
    other = await store.create_env_var(EnvironmentVar(key="GOAFFPRO_STORE_ID", value="42"))

    with pytest.raises(DuplicateRecordError):
        await store.create_env_var(EnvironmentVar(key="GOAFFPRO_API_KEY", value="b"))

    other.key = first.key
    with pytest.raises(DuplicateRecordError):
        await store.update_env_var(other)


@pytest.mark.asyncio
async def test_update_and_delete_env_var(store):
    env_var = await store.create_env_var(EnvironmentVar(key="PORT", value="5000"))

    env_var.value = "5173"
    env_var.is_active = False
    await store.update_env_var(env_var)

    loaded = await store.get_env_var(env_var.id)
    assert loaded.value == "5173"
    assert loaded.is_active is False
    assert loaded.updated_at.tzinfo is not None

    await store.delete_env_var(env_var.id)

    assert await store.get_env_var(env_var.id) is None
    with pytest.raises(RecordNotFoundError):
        await store.delete_env_var(env_var.id)
    with pytest.raises(RecordNotFoundError):
        await store.update_env_var(env_var)


@pytest.mark.asyncio
async def test_save_connection_replaces_by_service(store):
    first = ApiConnection(service="razorpay")
    first.record_check(False, "Missing RAZORPAY_KEY_SECRET", 3)
    await store.save_connection(first)

    second = ApiConnection(service="razorpay")
    second.record_check(True, None, 120)
    saved = await store.save_connection(second)
    await store.save_connection(ApiConnection(service="goaffpro"))

    connections = await store.list_connections()

    assert [c.service for c in connections] == ["goaffpro", "razorpay"]
    assert saved.id == first.id
    loaded = await store.get_connection("razorpay")
    assert loaded.status is ConnectionStatus.CONNECTED
    assert loaded.error_message is None
    assert loaded.response_time_ms == 120
    assert loaded.last_checked.tzinfo is not None
    assert await store.get_connection("prokerala") is None
