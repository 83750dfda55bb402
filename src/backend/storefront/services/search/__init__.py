"""
Live search: debounced suggestions and search routing
"""

from .controller import SuggestionController
from .destination import (
    best_match,
    generic_search_url,
    listing_url,
    smart_destination,
    spans_both_kinds,
)
from .suggestions import (
    Closed,
    DebounceElapsed,
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

__all__ = [
    "SuggestionController",
    "SuggestionSettings",
    "SuggestionState",
    "reduce_suggestions",
    "best_match",
    "smart_destination",
    "spans_both_kinds",
    "listing_url",
    "generic_search_url",
    "Key",
    "InputChanged",
    "ModeChanged",
    "DebounceElapsed",
    "SearchSucceeded",
    "SearchFailed",
    "KeyPressed",
    "SuggestionClicked",
    "Submitted",
    "Closed",
    "TornDown",
    "DispatchSearch",
    "Navigate",
]
