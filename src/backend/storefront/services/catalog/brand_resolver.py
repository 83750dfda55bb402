"""
Brand Resolution

Parts rarely carry an explicit brand; the admin catalog infers it from
the leading word of the device model or description ("Samsung Galaxy
S24 Ultra screen" -> "Samsung"). The match is anchored at the start of
the string and must be followed by whitespace or a dash.

This is a best-effort heuristic over a fixed vocabulary. Records that
start with a model name ("iPhone 15 battery") resolve to no brand and
are therefore excluded from brand-filtered listings.
"""

import re
from functools import lru_cache
from typing import Iterable, Optional, Pattern, Tuple

from storefront.models.catalog import CatalogItem
from storefront.services.config.configuration_service import get_config_service


@lru_cache(maxsize=8)
def _compile_brand_pattern(vocabulary: Tuple[str, ...]) -> Pattern[str]:
    alternatives = "|".join(re.escape(brand) for brand in vocabulary)
    return re.compile(rf"^({alternatives})[\s-]", re.IGNORECASE)


class BrandResolver:
    """Resolves the brand of a catalog item from its fields"""

    def __init__(self, vocabulary: Optional[Iterable[str]] = None):
        if vocabulary is None:
            vocabulary = get_config_service().get_brand_vocabulary()
        self.vocabulary: Tuple[str, ...] = tuple(vocabulary)
        self._pattern = _compile_brand_pattern(self.vocabulary)

    def extract(self, text: Optional[str]) -> Optional[str]:
        """Return the leading brand token of text, as written, or None"""
        if not text:
            return None
        match = self._pattern.match(text)
        return match.group(1) if match else None

    def resolve(self, item: CatalogItem) -> Optional[str]:
        """
        Resolve brand: explicit field, then device_model, then description.

        Returns:
            Brand string or None when nothing resolves
        """
        if item.brand and item.brand.strip():
            return item.brand.strip()
        return self.extract(item.device_model) or self.extract(item.description)
