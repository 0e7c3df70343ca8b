"""Task runner - background jobs with an observable lifecycle."""

import asyncio
from collections import OrderedDict
from collections.abc import Coroutine
from typing import Any

from core.infrastructure.logging import get_logger


class Job:
    """A unit of work scheduled on the task runner."""

    def __init__(self, key: str, task: asyncio.Task) -> None:
        self.key = key
        self._task = task

    @property
    def task(self) -> asyncio.Task:
        return self._task

    @property
    def done(self) -> bool:
        return self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._task.cancelled()

    def exception(self) -> BaseException | None:
        """The error the job ended with, None while running or on success."""
        if not self._task.done() or self._task.cancelled():
            return None
        return self._task.exception()

    async def wait(self) -> Any:
        """Await the job and return its result, re-raising its error."""
        return await asyncio.shield(self._task)

    def cancel(self) -> bool:
        return self._task.cancel()


class TaskRunner:
    """Schedules coroutines as asyncio tasks and keeps track of them.

    Finished jobs stay observable until ``keep_finished`` newer jobs have
    finished after them.
    """

    def __init__(self, keep_finished: int = 32) -> None:
        self._jobs: dict[str, Job] = {}
        self._finished: OrderedDict[str, Job] = OrderedDict()
        self._keep_finished = keep_finished
        self._logger = get_logger("orchestration.worker")

    def submit(self, key: str, work: Coroutine[Any, Any, Any]) -> Job:
        """Schedule ``work`` on the running loop under ``key``.

        Args:
            key: Job key, usually the run id
            work: Coroutine to run

        Returns:
            Job handle
        """
        if key in self._jobs and not self._jobs[key].done:
            work.close()
            raise ValueError(f"Job {key} is already running")

        task = asyncio.get_running_loop().create_task(work, name=f"job:{key}")
        job = Job(key, task)
        self._finished.pop(key, None)
        self._jobs[key] = job
        task.add_done_callback(lambda t: self._on_done(key, t))
        self._logger.info(f"Job submitted: {key}")
        return job

    def get(self, key: str) -> Job | None:
        return self._jobs.get(key) or self._finished.get(key)

    @property
    def active(self) -> list[Job]:
        return [job for job in self._jobs.values() if not job.done]

    @property
    def finished(self) -> list[Job]:
        return list(self._finished.values())

    async def shutdown(self) -> None:
        """Cancel outstanding jobs and wait for them to unwind."""
        pending = self.active
        for job in pending:
            job.cancel()
        # errors were already logged by _on_done
        await asyncio.gather(*(job.task for job in pending), return_exceptions=True)
        if pending:
            self._logger.info(f"Cancelled {len(pending)} job(s) on shutdown")

    def _on_done(self, key: str, task: asyncio.Task) -> None:
        job = self._jobs.get(key)
        if job is not None and job.task is task:
            del self._jobs[key]
            self._finished[key] = job
            while len(self._finished) > self._keep_finished:
                self._finished.popitem(last=False)

        if task.cancelled():
            self._logger.warning(f"Job cancelled: {key}")
            return
        exc = task.exception()
        if exc is not None:
            self._logger.error(f"Job {key} failed: {exc}", exc_info=exc)
        else:
            self._logger.info(f"Job finished: {key}")
