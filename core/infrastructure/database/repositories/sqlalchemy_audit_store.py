"""
SQLAlchemy Audit Store Implementation.

Implements AuditStore using async SQLAlchemy. Each operation runs in its own
session and commits before returning, so every update is an atomic
per-record replace.
"""
from typing import List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.domain.entities import ApiConnection, AuditRun, AuditStep, DetectedIssue, EnvironmentVar
from core.domain.enums import ConnectionStatus, IssueSeverity, IssueType, RunStatus, StepStatus
from core.domain.exceptions import DuplicateRecordError, RecordNotFoundError
from core.domain.repositories import AuditStore
from core.infrastructure.database.models import (
    ApiConnectionModel,
    AuditRunModel,
    AuditStepModel,
    DetectedIssueModel,
    EnvironmentVarModel,
)
from core.utils.datetime import ensure_utc


logger = logging.getLogger(__name__)


class SQLAlchemyAuditStore(AuditStore):
    """
    SQLAlchemy implementation of AuditStore.

    Handles persistence of audit runs, steps, detected issues, environment
    variables and API connection checks.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """
        Initialize store with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session_factory = session_factory

    # =========================================================================
    # AUDIT RUNS
    # =========================================================================

    async def create_run(self, run: AuditRun) -> AuditRun:
        async with self._session_factory() as session:
            session.add(
                AuditRunModel(
                    id=run.id,
                    status=run.status.value,
                    started_at=run.started_at,
                    completed_at=run.completed_at,
                    results=run.results,
                    logs=list(run.logs),
                )
            )
            await session.commit()
        logger.debug(f"Audit run created: {run.id}")
        return run

    async def get_run(self, run_id: str) -> Optional[AuditRun]:
        async with self._session_factory() as session:
            model = await session.get(AuditRunModel, run_id)
            return self._run_to_entity(model) if model else None

    async def list_runs(self) -> List[AuditRun]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(AuditRunModel).order_by(AuditRunModel.started_at.desc())
            )
            return [self._run_to_entity(m) for m in result.scalars().all()]

    async def update_run(self, run: AuditRun) -> AuditRun:
        async with self._session_factory() as session:
            model = await session.get(AuditRunModel, run.id)
            if model is None:
                raise RecordNotFoundError("Audit run", run.id)
            model.status = run.status.value
            model.completed_at = run.completed_at
            model.results = run.results
            model.logs = list(run.logs)
            await session.commit()
        return run

    # =========================================================================
    # AUDIT STEPS
    # =========================================================================

    async def create_steps(self, steps: List[AuditStep]) -> List[AuditStep]:
        async with self._session_factory() as session:
            session.add_all(
                [
                    AuditStepModel(
                        id=step.id,
                        audit_run_id=step.run_id,
                        step_name=step.name,
                        step_order=step.order,
                        status=step.status.value,
                        output=step.output,
                        error_message=step.error_message,
                        started_at=step.started_at,
                        completed_at=step.completed_at,
                    )
                    for step in steps
                ]
            )
            await session.commit()
        logger.debug(f"Created {len(steps)} audit step(s)")
        return steps

    async def get_step(self, step_id: str) -> Optional[AuditStep]:
        async with self._session_factory() as session:
            model = await session.get(AuditStepModel, step_id)
            return self._step_to_entity(model) if model else None

    async def list_steps(self, run_id: str) -> List[AuditStep]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(AuditStepModel)
                .where(AuditStepModel.audit_run_id == run_id)
                .order_by(AuditStepModel.step_order)
            )
            return [self._step_to_entity(m) for m in result.scalars().all()]

    async def update_step(self, step: AuditStep) -> AuditStep:
        async with self._session_factory() as session:
            model = await session.get(AuditStepModel, step.id)
            if model is None:
                raise RecordNotFoundError("Audit step", step.id)
            model.status = step.status.value
            model.output = step.output
            model.error_message = step.error_message
            model.started_at = step.started_at
            model.completed_at = step.completed_at
            await session.commit()
        return step

    # =========================================================================
    # DETECTED ISSUES
    # =========================================================================

    async def create_issue(self, issue: DetectedIssue) -> DetectedIssue:
        async with self._session_factory() as session:
            session.add(
                DetectedIssueModel(
                    id=issue.id,
                    audit_run_id=issue.run_id,
                    type=issue.type.value,
                    severity=issue.severity.value,
                    title=issue.title,
                    description=issue.description,
                    file_path=issue.file_path,
                    line_number=issue.line_number,
                    recommendation=issue.recommendation,
                    is_resolved=issue.is_resolved,
                    created_at=issue.created_at,
                )
            )
            await session.commit()
        return issue

    async def get_issue(self, issue_id: str) -> Optional[DetectedIssue]:
        async with self._session_factory() as session:
            model = await session.get(DetectedIssueModel, issue_id)
            return self._issue_to_entity(model) if model else None

    async def list_issues(self, run_id: Optional[str] = None) -> List[DetectedIssue]:
        async with self._session_factory() as session:
            query = select(DetectedIssueModel).order_by(DetectedIssueModel.created_at)
            if run_id is not None:
                query = query.where(DetectedIssueModel.audit_run_id == run_id)
            result = await session.execute(query)
            issues = [self._issue_to_entity(m) for m in result.scalars().all()]
        if run_id is not None:
            issues.sort(key=lambda i: i.severity.rank)
        return issues

    async def update_issue(self, issue: DetectedIssue) -> DetectedIssue:
        async with self._session_factory() as session:
            model = await session.get(DetectedIssueModel, issue.id)
            if model is None:
                raise RecordNotFoundError("Detected issue", issue.id)
            model.severity = issue.severity.value
            model.description = issue.description
            model.recommendation = issue.recommendation
            model.is_resolved = issue.is_resolved
            await session.commit()
        return issue

    # =========================================================================
    # ENVIRONMENT VARIABLES
    # =========================================================================

    async def create_env_var(self, env_var: EnvironmentVar) -> EnvironmentVar:
        async with self._session_factory() as session:
            if await self._key_owner(session, env_var.key) is not None:
                raise DuplicateRecordError("Environment variable", env_var.key)
            session.add(
                EnvironmentVarModel(
                    id=env_var.id,
                    key=env_var.key,
                    value=env_var.value,
                    service=env_var.service,
                    is_active=env_var.is_active,
                    created_at=env_var.created_at,
                    updated_at=env_var.updated_at,
                )
            )
            try:
                await session.commit()
            except IntegrityError as e:
                raise DuplicateRecordError("Environment variable", env_var.key) from e
        logger.debug(f"Environment variable created: {env_var.key}")
        return env_var

    async def get_env_var(self, var_id: str) -> Optional[EnvironmentVar]:
        async with self._session_factory() as session:
            model = await session.get(EnvironmentVarModel, var_id)
            return self._env_var_to_entity(model) if model else None

    async def get_env_var_by_key(self, key: str) -> Optional[EnvironmentVar]:
        async with self._session_factory() as session:
            model = await self._key_owner(session, key)
            return self._env_var_to_entity(model) if model else None

    async def list_env_vars(self, service: Optional[str] = None) -> List[EnvironmentVar]:
        async with self._session_factory() as session:
            query = select(EnvironmentVarModel).order_by(EnvironmentVarModel.key)
            if service is not None:
                query = query.where(EnvironmentVarModel.service == service)
            result = await session.execute(query)
            return [self._env_var_to_entity(m) for m in result.scalars().all()]

    async def update_env_var(self, env_var: EnvironmentVar) -> EnvironmentVar:
        async with self._session_factory() as session:
            model = await session.get(EnvironmentVarModel, env_var.id)
            if model is None:
                raise RecordNotFoundError("Environment variable", env_var.id)
            owner = await self._key_owner(session, env_var.key)
            if owner is not None and owner.id != env_var.id:
                raise DuplicateRecordError("Environment variable", env_var.key)
            model.key = env_var.key
            model.value = env_var.value
            model.service = env_var.service
            model.is_active = env_var.is_active
            model.updated_at = env_var.updated_at
            await session.commit()
        return env_var

    async def delete_env_var(self, var_id: str) -> None:
        async with self._session_factory() as session:
            model = await session.get(EnvironmentVarModel, var_id)
            if model is None:
                raise RecordNotFoundError("Environment variable", var_id)
            await session.delete(model)
            await session.commit()

    @staticmethod
    async def _key_owner(session: AsyncSession, key: str) -> Optional[EnvironmentVarModel]:
        result = await session.execute(
            select(EnvironmentVarModel).where(EnvironmentVarModel.key == key)
        )
        return result.scalar_one_or_none()

    # =========================================================================
    # API CONNECTIONS
    # =========================================================================

    async def save_connection(self, connection: ApiConnection) -> ApiConnection:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ApiConnectionModel).where(ApiConnectionModel.service == connection.service)
            )
            model = result.scalar_one_or_none()
            if model is None:
                model = ApiConnectionModel(id=connection.id, service=connection.service)
                session.add(model)
            else:
                connection.id = model.id
            model.status = connection.status.value
            model.last_checked = connection.last_checked
            model.error_message = connection.error_message
            model.response_time_ms = connection.response_time_ms
            await session.commit()
        return connection

    async def get_connection(self, service: str) -> Optional[ApiConnection]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ApiConnectionModel).where(ApiConnectionModel.service == service)
            )
            model = result.scalar_one_or_none()
            return self._connection_to_entity(model) if model else None

    async def list_connections(self) -> List[ApiConnection]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ApiConnectionModel).order_by(ApiConnectionModel.service)
            )
            return [self._connection_to_entity(m) for m in result.scalars().all()]

    # =========================================================================
    # MAPPERS
    # =========================================================================

    @staticmethod
    def _run_to_entity(model: AuditRunModel) -> AuditRun:
        return AuditRun(
            id=model.id,
            status=RunStatus(model.status),
            started_at=ensure_utc(model.started_at),
            completed_at=ensure_utc(model.completed_at),
            results=model.results,
            logs=list(model.logs or []),
        )

    @staticmethod
    def _step_to_entity(model: AuditStepModel) -> AuditStep:
        return AuditStep(
            id=model.id,
            run_id=model.audit_run_id,
            name=model.step_name,
            order=model.step_order,
            status=StepStatus(model.status),
            output=model.output,
            error_message=model.error_message,
            started_at=ensure_utc(model.started_at),
            completed_at=ensure_utc(model.completed_at),
        )

    @staticmethod
    def _issue_to_entity(model: DetectedIssueModel) -> DetectedIssue:
        return DetectedIssue(
            id=model.id,
            run_id=model.audit_run_id,
            type=IssueType(model.type),
            severity=IssueSeverity(model.severity),
            title=model.title,
            description=model.description,
            file_path=model.file_path,
            line_number=model.line_number,
            recommendation=model.recommendation,
            is_resolved=model.is_resolved,
            created_at=ensure_utc(model.created_at),
        )

    @staticmethod
    def _env_var_to_entity(model: EnvironmentVarModel) -> EnvironmentVar:
        return EnvironmentVar(
            id=model.id,
            key=model.key,
            value=model.value,
            service=model.service,
            is_active=model.is_active,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )

    @staticmethod
    def _connection_to_entity(model: ApiConnectionModel) -> ApiConnection:
        return ApiConnection(
            id=model.id,
            service=model.service,
            status=ConnectionStatus(model.status),
            last_checked=ensure_utc(model.last_checked),
            error_message=model.error_message,
            response_time_ms=model.response_time_ms,
        )
