"""
Search Data Models

Results returned by the storefront search endpoints and the query
envelope the live search box dispatches.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .catalog import ItemKind


class SearchMode(str, Enum):
    """Which catalogs a live search covers"""
    ALL = "all"
    PARTS = "parts"
    ACCESSORIES = "accessories"


class SearchResult(BaseModel):
    """
    Single live search hit.

    score is an opaque relevance value from the search backend; it is only
    compared, never interpreted. A missing score ranks as 0.
    """
    id: str
    title: str
    kind: ItemKind
    url: str
    category: Optional[str] = None
    price: Optional[float] = None
    score: Optional[float] = None
    description: Optional[str] = None
    device_type: Optional[str] = None
    image_url: Optional[str] = None

    class Config:
        frozen = True

    @property
    def relevance(self) -> float:
        return self.score if self.score is not None else 0.0


class SuggestionQuery(BaseModel):
    """A dispatched live search, tagged with its sequence number"""
    seq: int
    term: str
    mode: SearchMode = SearchMode.ALL

    class Config:
        frozen = True
