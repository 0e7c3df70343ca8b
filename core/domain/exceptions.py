"""
Audit domain exceptions.

Step-level problems (nonzero exit, timeout, a raising activity) are recorded
on the step and never surface as exceptions. Everything below is raised for
faults in orchestration or data access.
"""


class AuditError(Exception):
    """Base class for audit errors."""


class ControllerFault(AuditError):
    """Orchestration of a run broke; the run is marked failed and halted."""

    def __init__(self, message: str, run_id: str | None = None) -> None:
        super().__init__(message)
        self.run_id = run_id


class InvalidTransitionError(ControllerFault):
    """A run or step was asked to move to a status its lifecycle forbids."""


class RecordNotFoundError(AuditError):
    """A run, step or issue id is unknown to the store."""

    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class RunNotFoundError(RecordNotFoundError):
    """An audit run id is unknown."""

    def __init__(self, run_id: str) -> None:
        super().__init__("Audit run", run_id)


class DuplicateRecordError(AuditError):
    """A record with the same unique key already exists."""

    def __init__(self, kind: str, key: str) -> None:
        super().__init__(f"{kind} {key} already exists")
        self.kind = kind
        self.key = key


class UnknownServiceError(RecordNotFoundError):
    """A third-party service name is not in the provider catalog."""

    def __init__(self, service: str) -> None:
        super().__init__("Service", service)
