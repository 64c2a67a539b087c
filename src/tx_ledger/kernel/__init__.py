from .context import Context, ContextFactory, CtxError
from .runner import Runner
from .scenario import Scenario, StepSpec
from .scenario_builder import InvalidScenarioConfigError, ScenarioBuilder, StepBuildError
from .step_registry import StepRegistry, UnknownStepError
from .trace import TraceRecord, TraceRecorder

# Kernel exports are minimal and runtime-focused.
__all__ = [
    "Context",
    "ContextFactory",
    "CtxError",
    "InvalidScenarioConfigError",
    "Runner",
    "Scenario",
    "ScenarioBuilder",
    "StepBuildError",
    "StepSpec",
    "StepRegistry",
    "TraceRecord",
    "TraceRecorder",
    "UnknownStepError",
]
