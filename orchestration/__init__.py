"""Orchestration layer - audit step runner with eventing."""

from core.domain.repositories import AuditStore
from core.settings import AuditSettings

from .bus import ALL_EVENTS, EventHandler, InMemoryEventBus, NotifierProtocol
from .events import Event, EventMetadata, EventType
from .executor import CommandExecutor, CommandResult, combine
from .models import RunDetails, RunProgress, StepContext, StepOutcome
from .orchestrator import RunController
from .steps import build_default_registry
from .worker import Job, TaskRunner
from .workflow import Activity, StepDefinition, StepRegistry

__all__ = [
    "ALL_EVENTS",
    "Activity",
    "CommandExecutor",
    "CommandResult",
    "Event",
    "EventHandler",
    "EventMetadata",
    "EventType",
    "InMemoryEventBus",
    "Job",
    "NotifierProtocol",
    "RunController",
    "RunDetails",
    "RunProgress",
    "StepContext",
    "StepDefinition",
    "StepOutcome",
    "StepRegistry",
    "TaskRunner",
    "build_default_registry",
    "create_default_controller",
    "combine",
]


def create_default_controller(
    store: AuditStore,
    settings: AuditSettings,
    notifier: NotifierProtocol | None = None,
) -> RunController:
    """Create a run controller for the standard audit sequence.

    Args:
        store: Status store for runs, steps and issues
        settings: Audit settings
        notifier: Notifier; an in-memory event bus when omitted

    Returns:
        RunController instance
    """
    return RunController(
        store=store,
        notifier=notifier or InMemoryEventBus(),
        registry=build_default_registry(),
        executor=CommandExecutor(
            cwd=settings.project_dir,
            timeout_seconds=settings.command_timeout_seconds,
        ),
        settings=settings,
    )
