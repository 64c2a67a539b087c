from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any


class UnknownStepError(KeyError):
    pass


# Step factories take the step's config mapping plus wiring and return a callable step.
# Step input/output types vary per step, so the registry stays untyped at this boundary.
StepFactory = Callable[[dict[str, Any], dict[str, object]], Callable[[Any, Any], Iterable[Any]]]


@dataclass
class StepRegistry:
    _factories: dict[str, StepFactory] = field(default_factory=dict)

    def register(self, name: str, factory: StepFactory) -> None:
        # Later registration overrides earlier ones.
        self._factories[name] = factory

    def get(self, name: str) -> StepFactory:
        if name not in self._factories:
            raise UnknownStepError(name)
        return self._factories[name]

    def names(self) -> list[str]:
        return sorted(self._factories)
