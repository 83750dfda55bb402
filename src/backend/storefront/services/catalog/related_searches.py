"""
Related Search Suggestions

Shown under a listing search ("Also looking for: iphone 14 case,
iphone 16 case"). When the term names a device family with a model
number, the adjacent model numbers are proposed if the catalog holds
anything for them. Otherwise the names of a few items sharing a keyword
with the term are offered instead.
"""

import logging
import re
from typing import List, Optional, Sequence

from storefront.models.catalog import CatalogItem
from storefront.services.config.configuration_service import get_config_service

logger = logging.getLogger(__name__)

DEVICE_FAMILY_PATTERN = re.compile(
    r"(iphone|ipad|galaxy|samsung|pixel|oneplus|huawei|xiaomi|sony|nokia|lg|motorola|htc|"
    r"asus|acer|dell|hp|lenovo|surface|chromebook|airpods|watch|macbook)\s*(\d{1,3})",
    re.IGNORECASE,
)


def _searchable_text(item: CatalogItem) -> str:
    return " ".join([item.name, item.description or "", item.compatibility or ""]).lower()


def _append_unique(target: List[str], value: str) -> None:
    if value not in target:
        target.append(value)


def related_searches(
    term: str,
    items: Sequence[CatalogItem],
    limit: Optional[int] = None,
) -> List[str]:
    """
    Generate related search terms for term from the catalog snapshot.

    Args:
        term: Current search term
        items: Catalog snapshot (read only)
        limit: Maximum number of suggestions (config default: 4)

    Returns:
        Related terms, lower-cased when derived from the original term
    """
    settings = get_config_service().get_related_search_settings()
    if limit is None:
        limit = settings.get("limit", 4)

    term = (term or "").strip()
    if not term or not items:
        return []

    match = DEVICE_FAMILY_PATTERN.search(term)
    if not match:
        return _keyword_fallback(
            term,
            items,
            settings.get("fallback_limit", 3),
            settings.get("name_words", 4),
        )[:limit]

    family, model_number = match.group(1), match.group(2)
    current = int(model_number)
    family_lower = family.lower()
    words = term.lower().split(" ")
    related: List[str] = []

    for candidate in (current - 1, current + 1):
        if candidate <= 0:
            continue

        candidate_str = str(candidate)
        found = next(
            (
                item for item in items
                if family_lower in _searchable_text(item)
                and candidate_str in _searchable_text(item)
            ),
            None,
        )
        if found is None:
            logger.debug(f"No catalog items for {family} {candidate}")
            continue

        family_index = next(
            (index for index, word in enumerate(words) if family_lower in word),
            -1,
        )
        if family_index != -1 and family_index + 1 < len(words) and words[family_index + 1] == model_number:
            rewritten = list(words)
            rewritten[family_index + 1] = candidate_str
            _append_unique(related, " ".join(rewritten))
        else:
            _append_unique(related, f"{family} {candidate}")

    return related[:limit]


def _keyword_fallback(
    term: str,
    items: Sequence[CatalogItem],
    fallback_limit: int,
    name_words: int,
) -> List[str]:
    keywords = [word for word in term.lower().split(" ") if word]
    related: List[str] = []
    for item in items:
        if len(related) >= fallback_limit:
            break
        text = _searchable_text(item)
        if any(keyword in text for keyword in keywords):
            _append_unique(related, " ".join(item.name.split(" ")[:name_words]))
    return related
