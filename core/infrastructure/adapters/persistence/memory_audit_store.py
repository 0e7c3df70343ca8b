"""
In-Memory Audit Store Implementation.

Default status store for a single process; runs live for the lifetime of
the process.
"""
from copy import deepcopy
from itertools import count
from typing import Dict, List, Optional
import logging

from core.domain.entities import ApiConnection, AuditRun, AuditStep, DetectedIssue, EnvironmentVar
from core.domain.exceptions import DuplicateRecordError, RecordNotFoundError
from core.domain.repositories import AuditStore


logger = logging.getLogger(__name__)


class InMemoryAuditStore(AuditStore):
    """
    In-memory implementation of AuditStore.

    Records are kept in dictionaries keyed by id. Every write stores a deep
    copy and every read hands one out, so a reader never observes a record
    half way through an update.
    """

    def __init__(self):
        """Initialize empty storage."""
        self._runs: Dict[str, AuditRun] = {}
        self._run_sequence: Dict[str, int] = {}
        self._steps: Dict[str, AuditStep] = {}
        self._issues: Dict[str, DetectedIssue] = {}
        self._env_vars: Dict[str, EnvironmentVar] = {}
        self._connections: Dict[str, ApiConnection] = {}
        self._sequence = count()
        logger.info("InMemoryAuditStore initialized")

    # Audit runs

    async def create_run(self, run: AuditRun) -> AuditRun:
        self._runs[run.id] = deepcopy(run)
        self._run_sequence[run.id] = next(self._sequence)
        logger.debug(f"Audit run created: {run.id}")
        return deepcopy(run)

    async def get_run(self, run_id: str) -> Optional[AuditRun]:
        run = self._runs.get(run_id)
        return deepcopy(run) if run else None

    async def list_runs(self) -> List[AuditRun]:
        runs = sorted(
            self._runs.values(),
            key=lambda r: (r.started_at, self._run_sequence[r.id]),
            reverse=True,
        )
        return [deepcopy(r) for r in runs]

    async def update_run(self, run: AuditRun) -> AuditRun:
        if run.id not in self._runs:
            raise RecordNotFoundError("Audit run", run.id)
        self._runs[run.id] = deepcopy(run)
        return deepcopy(run)

    # Audit steps

    async def create_steps(self, steps: List[AuditStep]) -> List[AuditStep]:
        for step in steps:
            self._steps[step.id] = deepcopy(step)
        logger.debug(f"Created {len(steps)} audit step(s)")
        return [deepcopy(s) for s in steps]

    async def get_step(self, step_id: str) -> Optional[AuditStep]:
        step = self._steps.get(step_id)
        return deepcopy(step) if step else None

    async def list_steps(self, run_id: str) -> List[AuditStep]:
        steps = [s for s in self._steps.values() if s.run_id == run_id]
        return [deepcopy(s) for s in sorted(steps, key=lambda s: s.order)]

    async def update_step(self, step: AuditStep) -> AuditStep:
        if step.id not in self._steps:
            raise RecordNotFoundError("Audit step", step.id)
        self._steps[step.id] = deepcopy(step)
        return deepcopy(step)

    # Detected issues

    async def create_issue(self, issue: DetectedIssue) -> DetectedIssue:
        self._issues[issue.id] = deepcopy(issue)
        return deepcopy(issue)

    async def get_issue(self, issue_id: str) -> Optional[DetectedIssue]:
        issue = self._issues.get(issue_id)
        return deepcopy(issue) if issue else None

    async def list_issues(self, run_id: Optional[str] = None) -> List[DetectedIssue]:
        if run_id is None:
            return [deepcopy(i) for i in self._issues.values()]
        issues = [i for i in self._issues.values() if i.run_id == run_id]
        return [deepcopy(i) for i in sorted(issues, key=lambda i: i.severity.rank)]

    async def update_issue(self, issue: DetectedIssue) -> DetectedIssue:
        if issue.id not in self._issues:
            raise RecordNotFoundError("Detected issue", issue.id)
        self._issues[issue.id] = deepcopy(issue)
        return deepcopy(issue)

    # Environment variables

    async def create_env_var(self, env_var: EnvironmentVar) -> EnvironmentVar:
        if self._find_key(env_var.key) is not None:
            raise DuplicateRecordError("Environment variable", env_var.key)
        self._env_vars[env_var.id] = deepcopy(env_var)
        logger.debug(f"Environment variable created: {env_var.key}")
        return deepcopy(env_var)

    async def get_env_var(self, var_id: str) -> Optional[EnvironmentVar]:
        env_var = self._env_vars.get(var_id)
        return deepcopy(env_var) if env_var else None

    async def get_env_var_by_key(self, key: str) -> Optional[EnvironmentVar]:
        env_var = self._find_key(key)
        return deepcopy(env_var) if env_var else None

    async def list_env_vars(self, service: Optional[str] = None) -> List[EnvironmentVar]:
        env_vars = [
            v for v in self._env_vars.values()
            if service is None or v.service == service
        ]
        return [deepcopy(v) for v in sorted(env_vars, key=lambda v: v.key)]

    async def update_env_var(self, env_var: EnvironmentVar) -> EnvironmentVar:
        if env_var.id not in self._env_vars:
            raise RecordNotFoundError("Environment variable", env_var.id)
        owner = self._find_key(env_var.key)
        if owner is not None and owner.id != env_var.id:
            raise DuplicateRecordError("Environment variable", env_var.key)
        self._env_vars[env_var.id] = deepcopy(env_var)
        return deepcopy(env_var)

    async def delete_env_var(self, var_id: str) -> None:
        if self._env_vars.pop(var_id, None) is None:
            raise RecordNotFoundError("Environment variable", var_id)

    def _find_key(self, key: str) -> Optional[EnvironmentVar]:
        return next((v for v in self._env_vars.values() if v.key == key), None)

    # API connections

    async def save_connection(self, connection: ApiConnection) -> ApiConnection:
        existing = self._connections.get(connection.service)
        if existing is not None:
            connection.id = existing.id
        self._connections[connection.service] = deepcopy(connection)
        return deepcopy(connection)

    async def get_connection(self, service: str) -> Optional[ApiConnection]:
        connection = self._connections.get(service)
        return deepcopy(connection) if connection else None

    async def list_connections(self) -> List[ApiConnection]:
        return [deepcopy(self._connections[s]) for s in sorted(self._connections)]

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._runs.clear()
        self._run_sequence.clear()
        self._steps.clear()
        self._issues.clear()
        self._env_vars.clear()
        self._connections.clear()
        logger.info("InMemoryAuditStore cleared")
