"""
Series grouping for the device navigator.

The models endpoint returns a flat list of {model, series}; the menu
shows them grouped by series, with every model lacking a series
collected under a catch-all bucket.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class ModelEntry:
    model: str
    series: Optional[str] = None


@dataclass(frozen=True)
class SeriesGroup:
    name: str
    models: Tuple[str, ...]


def group_models_by_series(
    entries: Iterable[ModelEntry],
    other_label: str = "Other",
) -> List[SeriesGroup]:
    """
    Group models by series in first-seen order.

    Blank and missing series land in the other_label bucket, which takes
    the position of the first model that fell into it.
    """
    order: List[str] = []
    buckets = {}
    for entry in entries:
        series = (entry.series or "").strip() or other_label
        if series not in buckets:
            buckets[series] = []
            order.append(series)
        if entry.model not in buckets[series]:
            buckets[series].append(entry.model)

    return [SeriesGroup(name=name, models=tuple(buckets[name])) for name in order]


def series_of(entries: Iterable[ModelEntry], model: str, other_label: str = "Other") -> Optional[str]:
    """Group name a model is listed under, None if the model is unknown"""
    for entry in entries:
        if entry.model == model:
            return (entry.series or "").strip() or other_label
    return None
