"""
Live Search Suggestions - asyncio runtime

SuggestionController feeds events through reduce_suggestions() and
carries out the effects it returns: timers go to a Scheduler, searches
run as tasks whose outcome is fed back as another event, navigation is
handed to the on_navigate callback.

Search failures never escape: they are logged and turned into a
SearchFailed event, which empties the dropdown.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, Set

from storefront.models.search import SearchMode, SearchResult, SuggestionQuery
from storefront.services.scheduling import AsyncioScheduler, CancelTimer, ScheduleTimer, Scheduler
from .suggestions import (
    Closed,
    DispatchSearch,
    InputChanged,
    Key,
    KeyPressed,
    ModeChanged,
    Navigate,
    SearchFailed,
    SearchSucceeded,
    Submitted,
    SuggestionClicked,
    SuggestionSettings,
    SuggestionState,
    TornDown,
    reduce_suggestions,
)

logger = logging.getLogger(__name__)

SearchFn = Callable[[str, SearchMode], Awaitable[Sequence[SearchResult]]]


class SuggestionController:
    """
    Stateful wrapper around the search box reducer.

    Args:
        search: async (term, mode) -> results
        scheduler: Timer slots (AsyncioScheduler by default)
        settings: Debounce and routing settings (from config by default)
        on_navigate: Called with the target URL whenever the box navigates
    """

    def __init__(
        self,
        search: SearchFn,
        scheduler: Optional[Scheduler] = None,
        settings: Optional[SuggestionSettings] = None,
        on_navigate: Optional[Callable[[str], None]] = None,
    ):
        self._search = search
        self._scheduler = scheduler or AsyncioScheduler()
        self._settings = settings or SuggestionSettings.from_config()
        self._on_navigate = on_navigate
        self._state = SuggestionState()
        self._tasks: Set[asyncio.Task] = set()
        self._closed = False
        self.navigations: List[str] = []

    @property
    def state(self) -> SuggestionState:
        return self._state

    @property
    def settings(self) -> SuggestionSettings:
        return self._settings

    def dispatch(self, event: object) -> SuggestionState:
        if self._closed:
            logger.debug(f"Ignoring {type(event).__name__} after teardown")
            return self._state

        transition = reduce_suggestions(self._state, event, self._settings)
        self._state = transition.state
        for effect in transition.effects:
            self._run_effect(effect)
        return self._state

    # Convenience wrappers for the UI layer

    def type_text(self, text: str) -> SuggestionState:
        return self.dispatch(InputChanged(text))

    def set_mode(self, mode: SearchMode) -> SuggestionState:
        return self.dispatch(ModeChanged(mode))

    def press(self, key: Key) -> SuggestionState:
        return self.dispatch(KeyPressed(Key(key)))

    def click(self, index: int) -> SuggestionState:
        return self.dispatch(SuggestionClicked(index))

    def submit(self) -> SuggestionState:
        return self.dispatch(Submitted())

    def close(self) -> SuggestionState:
        return self.dispatch(Closed())

    def _run_effect(self, effect: object) -> None:
        if isinstance(effect, ScheduleTimer):
            event = effect.event
            self._scheduler.schedule(effect.key, effect.delay, lambda: self.dispatch(event))
        elif isinstance(effect, CancelTimer):
            self._scheduler.cancel(effect.key)
        elif isinstance(effect, DispatchSearch):
            task = asyncio.ensure_future(self._run_search(effect.query))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        elif isinstance(effect, Navigate):
            logger.info(f"Search navigating to {effect.url}")
            self.navigations.append(effect.url)
            if self._on_navigate is not None:
                self._on_navigate(effect.url)
        else:
            logger.warning(f"Unhandled search box effect: {effect!r}")

    async def _run_search(self, query: SuggestionQuery) -> None:
        logger.debug(f"Search seq={query.seq} term='{query.term}' mode={query.mode.value}")
        try:
            results = await self._search(query.term, query.mode)
        except Exception as e:
            logger.warning(f"Search seq={query.seq} failed: {e}")
            self.dispatch(SearchFailed(query.seq, str(e)))
            return
        self.dispatch(SearchSucceeded(query.seq, tuple(results)))

    async def join(self) -> None:
        """Wait until every in-flight search has answered"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Tear down: cancel timers and ignore whatever is still in flight"""
        if self._closed:
            return
        self.dispatch(TornDown())
        self._scheduler.cancel_all()
        self._closed = True
