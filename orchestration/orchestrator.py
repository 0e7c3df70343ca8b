"""Run controller - executes the step registry with status tracking and eventing."""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from core.domain.entities import AuditRun, AuditStep, DetectedIssue
from core.domain.enums import StepStatus
from core.domain.exceptions import ControllerFault, RunNotFoundError
from core.domain.repositories import AuditStore
from core.infrastructure.logging import get_logger
from core.settings import AuditSettings
from core.utils.datetime import utc_now

from .bus import NotifierProtocol
from .events import Event, EventMetadata, EventType
from .executor import CommandExecutor
from .models import RunDetails, RunProgress, StepContext, StepOutcome
from .worker import Job, TaskRunner
from .workflow import StepDefinition, StepRegistry

T = TypeVar("T")


class RunController:
    """Create audit runs and execute their steps one after another.

    Two failure tiers are kept apart:

    * anything raised by a step activity is a step failure, recorded on the
      step, and the run moves on to the next step;
    * anything that breaks orchestration itself (store access, lifecycle
      violations) is a ``ControllerFault``: the run is marked failed, no
      further steps execute and the fault propagates to the job.
    """

    def __init__(
        self,
        store: AuditStore,
        notifier: NotifierProtocol,
        registry: StepRegistry,
        executor: CommandExecutor,
        settings: AuditSettings,
        task_runner: TaskRunner | None = None,
    ) -> None:
        """Initialize run controller.

        Args:
            store: Status store for runs, steps and issues
            notifier: Notifier for state transitions
            registry: Ordered steps to execute
            executor: Command executor handed to step activities
            settings: Audit settings handed to step activities
            task_runner: Worker for background run jobs
        """
        self._store = store
        self._notifier = notifier
        self._registry = registry
        self._executor = executor
        self._settings = settings
        self._task_runner = task_runner or TaskRunner()
        # runs share one project tree, so they never overlap
        self._run_lock = asyncio.Lock()
        self._logger = get_logger("orchestration.run_controller")

    @property
    def registry(self) -> StepRegistry:
        return self._registry

    # =========================================================================
    # COMMANDS
    # =========================================================================

    async def start_run(self) -> str:
        """Create a run with one pending step per registered step and start it.

        Returns immediately after the execution job is submitted.

        Returns:
            The new run id

        Raises:
            ControllerFault: If the run or step records cannot be created
        """
        run = AuditRun()
        steps = [
            AuditStep(run_id=run.id, name=definition.name, order=order)
            for order, definition in self._registry
        ]

        await self._persist(run.id, self._store.create_run(run))
        await self._persist(run.id, self._store.create_steps(steps))

        self._logger.info(f"Audit run created: {run.id} ({len(steps)} steps)")

        await self._publish(
            EventType.AUDIT_STARTED,
            run.id,
            {"audit_run_id": run.id, "step_count": len(steps)},
        )

        self._task_runner.submit(run.id, self._execute_run(run.id))
        return run.id

    async def wait_for_run(self, run_id: str) -> RunDetails:
        """Wait until the run's job has finished and return its details.

        Raises:
            ControllerFault: If the run ended with a controller fault
        """
        job = self._task_runner.get(run_id)
        if job is None:
            await self._require_run(run_id)
        else:
            await job.wait()
        return await self.get_run(run_id)

    def get_job(self, run_id: str) -> Job | None:
        return self._task_runner.get(run_id)

    async def shutdown(self) -> None:
        """Cancel run jobs that are still executing."""
        await self._task_runner.shutdown()

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def get_run(self, run_id: str) -> RunDetails:
        run = await self._require_run(run_id)
        steps = await self._store.list_steps(run_id)
        issues = await self._store.list_issues(run_id)
        return RunDetails(run=run, steps=steps, issues=issues)

    async def list_runs(self) -> list[AuditRun]:
        return await self._store.list_runs()

    async def get_progress(self, run_id: str) -> RunProgress:
        await self._require_run(run_id)
        steps = await self._store.list_steps(run_id)
        return RunProgress.from_steps(steps)

    # =========================================================================
    # EXECUTION
    # =========================================================================

    async def _execute_run(self, run_id: str) -> None:
        async with self._run_lock:
            started = utc_now()
            try:
                run = await self._load_run(run_id)
                run.mark_running()
                await self._persist(run_id, self._store.update_run(run))

                steps = await self._persist(run_id, self._store.list_steps(run_id))
                for step in steps:
                    await self._execute_step(step)

                steps = await self._persist(run_id, self._store.list_steps(run_id))
                run = await self._load_run(run_id)
                run.mark_completed(self._summarize(steps))
                await self._persist(run_id, self._store.update_run(run))
            except ControllerFault as fault:
                await self._fail_run(run_id, fault)
                raise
            except Exception as exc:
                fault = ControllerFault(str(exc), run_id)
                await self._fail_run(run_id, fault)
                raise fault from exc

        duration_ms = int((utc_now() - started).total_seconds() * 1000)
        self._logger.info(f"Audit run completed: {run_id} ({duration_ms} ms)")
        await self._publish(EventType.AUDIT_COMPLETED, run_id, {"run": run.to_dict()})

    async def _execute_step(self, step: AuditStep) -> None:
        definition = self._registry.get(step.name)

        step.mark_running()
        await self._persist(step.run_id, self._store.update_step(step))
        await self._publish(EventType.STEP_STARTED, step.run_id, {"step": step.to_dict()})
        self._logger.info(f"-> step {step.order}: {step.name}")

        outcome = await self._run_activity(step, definition)

        step.finish(outcome.success, outcome.output, outcome.error_message)
        await self._persist(step.run_id, self._store.update_step(step))

        progress = await self.get_progress(step.run_id)
        self._logger.info(
            f"step {step.name} finished with status {step.status.value} "
            f"({progress.percent_complete}%)"
        )
        await self._publish(
            EventType.STEP_COMPLETED,
            step.run_id,
            {
                "step": step.to_dict(),
                "progress": progress.percent_complete,
                "is_complete": progress.is_complete,
            },
        )

    async def _run_activity(self, step: AuditStep, definition: StepDefinition) -> StepOutcome:
        ctx = StepContext(
            run_id=step.run_id,
            step_name=step.name,
            executor=self._executor,
            settings=self._settings,
            report_issue=self._report_issue,
        )
        try:
            return await definition.activity(ctx)
        except ControllerFault:
            raise
        except Exception as exc:
            self._logger.warning(f"Step {step.name} raised: {exc}")
            return StepOutcome(success=False, output=None, error=str(exc) or type(exc).__name__)

    async def _report_issue(self, issue: DetectedIssue) -> DetectedIssue:
        stored = await self._persist(issue.run_id, self._store.create_issue(issue))
        await self._publish(EventType.ISSUE_DETECTED, issue.run_id, {"issue": stored.to_dict()})
        return stored

    async def _fail_run(self, run_id: str, fault: ControllerFault) -> None:
        self._logger.error(f"Audit run {run_id} failed: {fault}", exc_info=fault)
        try:
            run = await self._store.get_run(run_id)
            if run is not None and not run.status.is_terminal:
                run.mark_failed(str(fault))
                await self._store.update_run(run)
        except Exception as exc:
            self._logger.error(f"Could not record failure of run {run_id}: {exc}")
        await self._publish(
            EventType.AUDIT_FAILED,
            run_id,
            {"audit_run_id": run_id, "error": str(fault)},
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _persist(self, run_id: str | None, operation: Awaitable[T]) -> T:
        """Await a store operation, turning any store error into a controller fault."""
        try:
            return await operation
        except ControllerFault:
            raise
        except Exception as exc:
            raise ControllerFault(f"Status store error: {exc}", run_id) from exc

    async def _load_run(self, run_id: str) -> AuditRun:
        run = await self._persist(run_id, self._store.get_run(run_id))
        if run is None:
            raise ControllerFault(f"Audit run {run_id} disappeared from the store", run_id)
        return run

    async def _require_run(self, run_id: str) -> AuditRun:
        run = await self._store.get_run(run_id)
        if run is None:
            raise RunNotFoundError(run_id)
        return run

    async def _publish(self, event_type: EventType, run_id: str | None, payload: dict[str, object]) -> None:
        event = Event(
            type=event_type,
            payload=payload,
            metadata=EventMetadata(run_id=run_id, timestamp=utc_now()),
        )
        await self._notifier.broadcast(event)

    @staticmethod
    def _summarize(steps: list[AuditStep]) -> dict[str, object]:
        succeeded = [s.name for s in steps if s.status is StepStatus.SUCCESS]
        failed = [s.name for s in steps if s.status is StepStatus.FAILED]
        return {
            "total_steps": len(steps),
            "succeeded": len(succeeded),
            "failed": len(failed),
            "failed_steps": failed,
        }
