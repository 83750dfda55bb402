"""
Live Search Suggestions - state machine

The search box is modelled as a pure reducer:

    reduce_suggestions(state, event, settings) -> Transition(state, effects)

Events come from the keyboard, the debounce timer and search responses.
Effects tell the runtime what to do next: (re)start or cancel the
debounce timer, dispatch a search, navigate.

Stale responses: every dispatched search gets the next sequence number,
and only a response carrying the number the box is currently waiting
for is applied. Anything else is dropped without touching state, so a
slow early response can never overwrite a fresher one.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Tuple

from storefront.models.search import SearchMode, SearchResult, SuggestionQuery
from storefront.services.config.configuration_service import get_config_service
from storefront.services.scheduling.effects import CancelTimer, ScheduleTimer, Transition
from .destination import (
    DEFAULT_DESTINATIONS,
    best_match,
    generic_search_url,
    listing_url,
    smart_destination,
    spans_both_kinds,
)

logger = logging.getLogger(__name__)

DEBOUNCE_TIMER = "search_debounce"


class Key(str, Enum):
    ARROW_DOWN = "ArrowDown"
    ARROW_UP = "ArrowUp"
    ENTER = "Enter"
    ESCAPE = "Escape"


@dataclass(frozen=True)
class SuggestionSettings:
    min_query_length: int = 2
    debounce_seconds: float = 0.3
    destinations: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_DESTINATIONS))

    @classmethod
    def from_config(cls) -> "SuggestionSettings":
        search = get_config_service().get_search_settings()
        return cls(
            min_query_length=int(search["min_query_length"]),
            debounce_seconds=search["debounce_ms"] / 1000.0,
            destinations=dict(search["destinations"]),
        )


@dataclass(frozen=True)
class SuggestionState:
    """
    Attributes:
        term: Raw text in the search box
        suggestions: Hits of the last applied response
        loading: A dispatched search has not answered yet
        is_open: Dropdown visible
        selected_index: Keyboard cursor; -1 means the raw text
        last_seq: Sequence number of the last dispatched search
        awaiting_seq: Sequence number whose response will be applied, if any
        debounce_pending: The debounce timer is running
    """
    term: str = ""
    mode: SearchMode = SearchMode.ALL
    suggestions: Tuple[SearchResult, ...] = ()
    loading: bool = False
    is_open: bool = False
    selected_index: int = -1
    last_seq: int = 0
    awaiting_seq: Optional[int] = None
    debounce_pending: bool = False

    @property
    def selected(self) -> Optional[SearchResult]:
        if 0 <= self.selected_index < len(self.suggestions):
            return self.suggestions[self.selected_index]
        return None


# Events

@dataclass(frozen=True)
class InputChanged:
    text: str


@dataclass(frozen=True)
class ModeChanged:
    mode: SearchMode


@dataclass(frozen=True)
class DebounceElapsed:
    pass


@dataclass(frozen=True)
class SearchSucceeded:
    seq: int
    results: Tuple[SearchResult, ...]


@dataclass(frozen=True)
class SearchFailed:
    seq: int
    error: str = ""


@dataclass(frozen=True)
class KeyPressed:
    key: Key


@dataclass(frozen=True)
class SuggestionClicked:
    index: int


@dataclass(frozen=True)
class Submitted:
    """Search button pressed"""
    pass


@dataclass(frozen=True)
class Closed:
    """Click outside the search box"""
    pass


@dataclass(frozen=True)
class TornDown:
    pass


# Effects

@dataclass(frozen=True)
class DispatchSearch:
    query: SuggestionQuery


@dataclass(frozen=True)
class Navigate:
    url: str


DEFAULT_SETTINGS = SuggestionSettings()


def _is_searchable(text: str, settings: SuggestionSettings) -> bool:
    return len(text.strip()) >= settings.min_query_length


def _cleared(state: SuggestionState, term: str) -> SuggestionState:
    return replace(
        state,
        term=term,
        suggestions=(),
        loading=False,
        is_open=False,
        selected_index=-1,
        awaiting_seq=None,
        debounce_pending=False,
    )


def _closed_after_navigation(state: SuggestionState) -> SuggestionState:
    return replace(state, is_open=False, selected_index=-1, debounce_pending=False)


def reduce_suggestions(
    state: SuggestionState,
    event: object,
    settings: SuggestionSettings = DEFAULT_SETTINGS,
) -> Transition:
    """Apply one event to the search box state"""

    if isinstance(event, InputChanged):
        if not _is_searchable(event.text, settings):
            return Transition(_cleared(state, event.text), (CancelTimer(DEBOUNCE_TIMER),))
        new_state = replace(
            state,
            term=event.text,
            selected_index=-1,
            is_open=True,
            debounce_pending=True,
        )
        return Transition(
            new_state,
            (ScheduleTimer(DEBOUNCE_TIMER, settings.debounce_seconds, DebounceElapsed()),),
        )

    if isinstance(event, ModeChanged):
        new_state = replace(state, mode=event.mode)
        if not _is_searchable(state.term, settings):
            return Transition(new_state)
        new_state = replace(new_state, debounce_pending=True, selected_index=-1)
        return Transition(
            new_state,
            (ScheduleTimer(DEBOUNCE_TIMER, settings.debounce_seconds, DebounceElapsed()),),
        )

    if isinstance(event, DebounceElapsed):
        if not state.debounce_pending or not _is_searchable(state.term, settings):
            return Transition(replace(state, debounce_pending=False))
        seq = state.last_seq + 1
        query = SuggestionQuery(seq=seq, term=state.term.strip(), mode=state.mode)
        new_state = replace(
            state,
            last_seq=seq,
            awaiting_seq=seq,
            loading=True,
            debounce_pending=False,
        )
        return Transition(new_state, (DispatchSearch(query),))

    if isinstance(event, SearchSucceeded):
        if event.seq != state.awaiting_seq:
            logger.debug(f"Discarding stale search response seq={event.seq} (awaiting {state.awaiting_seq})")
            return Transition(state)
        return Transition(replace(
            state,
            suggestions=tuple(event.results),
            loading=False,
            awaiting_seq=None,
            selected_index=-1,
        ))

    if isinstance(event, SearchFailed):
        if event.seq != state.awaiting_seq:
            logger.debug(f"Discarding stale search failure seq={event.seq}")
            return Transition(state)
        return Transition(replace(
            state,
            suggestions=(),
            loading=False,
            awaiting_seq=None,
            selected_index=-1,
        ))

    if isinstance(event, KeyPressed):
        return _reduce_key(state, event.key, settings)

    if isinstance(event, SuggestionClicked):
        if not 0 <= event.index < len(state.suggestions):
            return Transition(state)
        url = state.suggestions[event.index].url
        return Transition(_cleared(state, ""), (CancelTimer(DEBOUNCE_TIMER), Navigate(url)))

    if isinstance(event, Submitted):
        if not _is_searchable(state.term, settings):
            return Transition(state)
        kind = smart_destination(state.suggestions)
        url = listing_url(kind, state.term, settings.destinations)
        return Transition(
            _closed_after_navigation(state),
            (CancelTimer(DEBOUNCE_TIMER), Navigate(url)),
        )

    if isinstance(event, Closed):
        return Transition(replace(state, is_open=False, selected_index=-1))

    if isinstance(event, TornDown):
        return Transition(
            replace(state, awaiting_seq=None, loading=False, debounce_pending=False),
            (CancelTimer(DEBOUNCE_TIMER),),
        )

    logger.warning(f"Unknown search box event: {event!r}")
    return Transition(state)


def _reduce_key(state: SuggestionState, key: Key, settings: SuggestionSettings) -> Transition:
    if key == Key.ARROW_DOWN:
        if not state.suggestions:
            return Transition(state)
        index = min(state.selected_index + 1, len(state.suggestions) - 1)
        return Transition(replace(state, selected_index=index))

    if key == Key.ARROW_UP:
        return Transition(replace(state, selected_index=max(state.selected_index - 1, -1)))

    if key == Key.ESCAPE:
        return Transition(_cleared(state, ""), (CancelTimer(DEBOUNCE_TIMER),))

    if key == Key.ENTER:
        selected = state.selected
        if selected is not None:
            return Transition(_cleared(state, ""), (CancelTimer(DEBOUNCE_TIMER), Navigate(selected.url)))

        if not _is_searchable(state.term, settings):
            return Transition(state)

        results = state.suggestions
        if not results:
            url = generic_search_url(state.term, settings.destinations)
        elif spans_both_kinds(results):
            url = listing_url(smart_destination(results), state.term, settings.destinations)
        else:
            url = best_match(results).url

        return Transition(
            _closed_after_navigation(state),
            (CancelTimer(DEBOUNCE_TIMER), Navigate(url)),
        )

    return Transition(state)
