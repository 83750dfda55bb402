"""Scheduling package - named timer slots and reducer effect types"""

from .effects import CancelTimer, ScheduleTimer, Transition
from .timers import AsyncioScheduler, Scheduler

__all__ = [
    "AsyncioScheduler",
    "CancelTimer",
    "ScheduleTimer",
    "Scheduler",
    "Transition",
]
