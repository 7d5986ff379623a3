from .events import Event, EventLog, EventType
from .runtime import RunResult, Runtime, RuntimeConfig, StepResult

__all__ = [
    "Event",
    "EventLog",
    "EventType",
    "RunResult",
    "Runtime",
    "RuntimeConfig",
    "StepResult",
]
