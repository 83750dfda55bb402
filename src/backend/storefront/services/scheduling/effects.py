"""
Reducer plumbing shared by the live search and navigator state machines.

A reducer is a pure function (state, event) -> Transition. The
Transition carries the next state plus the side effects the runtime must
perform (fetches, timers, navigation). Reducers never touch the network
or the clock themselves, which keeps them testable without an event loop.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, Tuple, TypeVar

S = TypeVar("S")


@dataclass(frozen=True)
class ScheduleTimer:
    """Cancel-then-set the timer slot key; deliver event after delay seconds"""
    key: str
    delay: float
    event: Any


@dataclass(frozen=True)
class CancelTimer:
    key: str


@dataclass(frozen=True)
class Transition(Generic[S]):
    state: S
    effects: Tuple[Any, ...] = field(default_factory=tuple)
