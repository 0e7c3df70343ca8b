"""Store interface for audit runs, steps, detected issues, environment
variables and API connection checks."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities import ApiConnection, AuditRun, AuditStep, DetectedIssue, EnvironmentVar


class AuditStore(ABC):
    """
    Abstract status store.

    Pure data access: the only rules here are ordering and per-record
    atomic replace. Implementations return copies, so callers never share
    mutable state with the store.
    """

    # Audit runs

    @abstractmethod
    async def create_run(self, run: AuditRun) -> AuditRun:
        """Persist a new run.

        Args:
            run: Run to persist

        Returns:
            Stored copy of the run
        """

    @abstractmethod
    async def get_run(self, run_id: str) -> Optional[AuditRun]:
        """Retrieve a run by id, None when unknown."""

    @abstractmethod
    async def list_runs(self) -> List[AuditRun]:
        """List all runs, newest first."""

    @abstractmethod
    async def update_run(self, run: AuditRun) -> AuditRun:
        """Replace a stored run.

        Raises:
            RecordNotFoundError: If the run was never created
        """

    # Audit steps

    @abstractmethod
    async def create_steps(self, steps: List[AuditStep]) -> List[AuditStep]:
        """Persist the steps of a run in one go."""

    @abstractmethod
    async def get_step(self, step_id: str) -> Optional[AuditStep]:
        """Retrieve a step by id, None when unknown."""

    @abstractmethod
    async def list_steps(self, run_id: str) -> List[AuditStep]:
        """List the steps of a run ordered by step order."""

    @abstractmethod
    async def update_step(self, step: AuditStep) -> AuditStep:
        """Replace a stored step.

        Raises:
            RecordNotFoundError: If the step was never created
        """

    # Detected issues

    @abstractmethod
    async def create_issue(self, issue: DetectedIssue) -> DetectedIssue:
        """Persist a detected issue."""

    @abstractmethod
    async def get_issue(self, issue_id: str) -> Optional[DetectedIssue]:
        """Retrieve an issue by id, None when unknown."""

    @abstractmethod
    async def list_issues(self, run_id: Optional[str] = None) -> List[DetectedIssue]:
        """List issues; a run-scoped list is ordered by severity, critical first."""

    @abstractmethod
    async def update_issue(self, issue: DetectedIssue) -> DetectedIssue:
        """Replace a stored issue.

        Raises:
            RecordNotFoundError: If the issue was never created
        """

    # Environment variables

    @abstractmethod
    async def create_env_var(self, env_var: EnvironmentVar) -> EnvironmentVar:
        """Persist a new environment variable.

        Raises:
            DuplicateRecordError: If a variable with the same key exists
        """

    @abstractmethod
    async def get_env_var(self, var_id: str) -> Optional[EnvironmentVar]:
        """Retrieve a variable by id, None when unknown."""

    @abstractmethod
    async def get_env_var_by_key(self, key: str) -> Optional[EnvironmentVar]:
        """Retrieve a variable by key, None when unknown."""

    @abstractmethod
    async def list_env_vars(self, service: Optional[str] = None) -> List[EnvironmentVar]:
        """List variables ordered by key, optionally only those of one service."""

    @abstractmethod
    async def update_env_var(self, env_var: EnvironmentVar) -> EnvironmentVar:
        """Replace a stored variable.

        Raises:
            RecordNotFoundError: If the variable was never created
            DuplicateRecordError: If the new key belongs to another variable
        """

    @abstractmethod
    async def delete_env_var(self, var_id: str) -> None:
        """Remove a variable.

        Raises:
            RecordNotFoundError: If the variable does not exist
        """

    # API connections

    @abstractmethod
    async def save_connection(self, connection: ApiConnection) -> ApiConnection:
        """Insert or replace the connection record of ``connection.service``."""

    @abstractmethod
    async def get_connection(self, service: str) -> Optional[ApiConnection]:
        """Retrieve the connection record of a service, None when never checked."""

    @abstractmethod
    async def list_connections(self) -> List[ApiConnection]:
        """List connection records ordered by service name."""
