"""Step registry - Activity, StepDefinition, StepRegistry."""

from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass

from .models import StepContext, StepOutcome

# Type alias for step activities
Activity = Callable[[StepContext], Awaitable[StepOutcome]]


@dataclass(frozen=True)
class StepDefinition:
    """A single registered step."""

    name: str
    activity: Activity


class StepRegistry:
    """Fixed, ordered list of named steps; order indices are 1..N."""

    def __init__(self, steps: list[StepDefinition]) -> None:
        names = [step.name for step in steps]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate step names in registry: {names}")
        self._steps = tuple(steps)

    def __iter__(self) -> Iterator[tuple[int, StepDefinition]]:
        return iter(enumerate(self._steps, start=1))

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def names(self) -> list[str]:
        return [step.name for step in self._steps]

    def get(self, name: str) -> StepDefinition:
        for step in self._steps:
            if step.name == name:
                return step
        raise KeyError(name)
