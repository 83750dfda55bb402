"""
Named Timer Scheduler

Debounce and delayed-reset timers for the live search box and the
navigation mega-menu. Each timer lives in a named slot; scheduling a
slot always cancels whatever was pending there first, so a burst of
events collapses to the last one.

Teardown must call cancel_all() so nothing fires against a component
that is gone.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """Abstract timer slots keyed by name"""

    @abstractmethod
    def schedule(self, key: str, delay: float, callback: Callable[[], None]) -> None:
        """Cancel any pending timer under key, then run callback after delay seconds"""
        pass

    @abstractmethod
    def cancel(self, key: str) -> bool:
        """Cancel the pending timer under key. Returns True if one was pending."""
        pass

    @abstractmethod
    def is_pending(self, key: str) -> bool:
        pass

    @abstractmethod
    def cancel_all(self) -> None:
        pass


class AsyncioScheduler(Scheduler):
    """Scheduler backed by loop.call_later"""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._handles: Dict[str, asyncio.TimerHandle] = {}

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule(self, key: str, delay: float, callback: Callable[[], None]) -> None:
        self.cancel(key)

        def _fire() -> None:
            self._handles.pop(key, None)
            callback()

        self._handles[key] = self._get_loop().call_later(delay, _fire)
        logger.debug(f"Timer '{key}' scheduled in {delay:.3f}s")

    def cancel(self, key: str) -> bool:
        handle = self._handles.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        logger.debug(f"Timer '{key}' cancelled")
        return True

    def is_pending(self, key: str) -> bool:
        return key in self._handles

    def cancel_all(self) -> None:
        for key in list(self._handles):
            self.cancel(key)
