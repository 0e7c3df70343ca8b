"""Application service for the dashboard overview."""

from collections import Counter

from core.application.dtos.dashboard_dto import (
    ConnectionStatusDTO,
    DashboardSummaryDTO,
    DependencyStatusDTO,
    EnvironmentStatusDTO,
)
from core.domain.enums import ConnectionStatus, IssueSeverity, RunStatus, StepStatus
from core.domain.providers import PROVIDERS
from core.domain.repositories import AuditStore

INSTALL_STEP_NAME = "Install Dependencies"


class DashboardService:
    """Builds the summary shown on the audit dashboard from the status store."""

    def __init__(self, store: AuditStore, poll_interval_seconds: float) -> None:
        self._store = store
        self._poll_interval = poll_interval_seconds

    async def get_summary(self) -> DashboardSummaryDTO:
        runs = await self._store.list_runs()
        issues = await self._store.list_issues()
        env_vars = await self._store.list_env_vars()
        connections = await self._store.list_connections()

        latest = runs[0] if runs else None
        steps = await self._store.list_steps(latest.id) if latest else []

        install = next((s for s in steps if s.name == INSTALL_STEP_NAME), None)
        critical = [
            i for i in issues
            if i.severity is IssueSeverity.CRITICAL and not i.is_resolved
        ]
        set_keys = [v.key for v in env_vars if v.is_set]
        connected = sum(1 for c in connections if c.status is ConnectionStatus.CONNECTED)

        return DashboardSummaryDTO(
            last_audit_run=latest.to_dict() if latest else None,
            step_counts=dict(Counter(s.status.value for s in steps)),
            build_status="Ready" if latest and latest.status is RunStatus.COMPLETED else "Pending",
            dependencies=DependencyStatusDTO(
                status=install.status.value if install else "unknown",
                installed=install is not None and install.status is StepStatus.SUCCESS,
            ),
            environment=EnvironmentStatusDTO(
                total_vars=len(env_vars),
                active_vars=sum(1 for v in env_vars if v.is_active),
                services={p.name: not p.missing_vars(set_keys) for p in PROVIDERS},
            ),
            api_connections=ConnectionStatusDTO(
                connected=connected,
                total=len(connections),
                percentage=connected * 100 // len(connections) if connections else 0,
            ),
            total_issues=len(issues),
            critical_issues=len(critical),
            poll_interval_seconds=self._poll_interval,
        )
