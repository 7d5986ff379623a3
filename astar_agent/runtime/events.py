from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Deque, Dict, List, Optional


class EventType(Enum):
    """Things worth recording during a run."""
    PATH_PLANNED = auto()
    PATH_REPLANNED = auto()
    MOVE_ISSUED = auto()
    ATTACK_ISSUED = auto()
    INVALID_PLAN = auto()
    GOAL_DESTROYED = auto()
    PLANNING_FAILED = auto()
    SETUP_FAILED = auto()
    AGENT_LOST = auto()


@dataclass
class Event:
    event_type: EventType
    turn: int
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type.name.lower(),
            "turn": self.turn,
            "data": self.data,
        }


class EventLog:
    """
    Bounded log of run events. Oldest events drop off once max_size is hit.
    """

    def __init__(self, max_size: int = 1000):
        self._events: Deque[Event] = deque(maxlen=max_size)

    def record(self, event_type: EventType, turn: int, **data: Any) -> Event:
        event = Event(event_type=event_type, turn=turn, data=data)
        self._events.append(event)
        return event

    def of_type(self, event_type: EventType) -> List[Event]:
        return [e for e in self._events if e.event_type == event_type]

    def last(self) -> Optional[Event]:
        return self._events[-1] if self._events else None

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self):
        return iter(self._events)
