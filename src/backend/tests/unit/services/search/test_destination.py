"""
Unit tests for search routing heuristics (best match, smart destination)
"""

import pytest

from storefront.models.catalog import ItemKind
from storefront.services.search import (
    best_match,
    generic_search_url,
    listing_url,
    smart_destination,
    spans_both_kinds,
)

PART = ItemKind.PART
ACC = ItemKind.ACCESSORY


@pytest.mark.unit
class TestSmartDestination:

    def test_count_tie_broken_by_best_score(self, result_factory):
        results = [
            result_factory("p1", PART, 0.8),
            result_factory("p2", PART, 0.5),
            result_factory("a1", ACC, 0.9),
            result_factory("a2", ACC, 0.1),
        ]
        assert smart_destination(results) == ACC

    def test_more_results_wins_regardless_of_score(self, result_factory):
        results = [
            result_factory("p1", PART, 0.1),
            result_factory("p2", PART, 0.1),
            result_factory("a1", ACC, 0.99),
        ]
        assert smart_destination(results) == PART

    def test_full_tie_defaults_to_parts(self, result_factory):
        results = [result_factory("p1", PART, 0.5), result_factory("a1", ACC, 0.5)]
        assert smart_destination(results) == PART

    def test_missing_scores_count_as_zero(self, result_factory):
        results = [result_factory("p1", PART), result_factory("a1", ACC, 0.2)]
        assert smart_destination(results) == ACC

    def test_no_results_defaults_to_parts(self):
        assert smart_destination([]) == PART


@pytest.mark.unit
class TestBestMatch:

    def test_highest_score(self, result_factory):
        results = [result_factory("a", ACC, 0.3), result_factory("b", PART, 0.9), result_factory("c", ACC, 0.5)]
        assert best_match(results).id == "b"

    def test_first_seen_wins_ties(self, result_factory):
        results = [result_factory("a", ACC, 0.7), result_factory("b", PART, 0.7)]
        assert best_match(results).id == "a"

    def test_empty(self):
        assert best_match([]) is None


@pytest.mark.unit
class TestUrls:

    def test_listing_urls(self):
        assert listing_url(PART, "iphone 15") == "/repairs?search=iphone+15"
        assert listing_url(ACC, " case ") == "/accessories?search=case"

    def test_custom_destinations(self):
        destinations = {"parts": "/p", "accessories": "/a", "generic": "/s"}
        assert listing_url(ACC, "x", destinations) == "/a?search=x"
        assert generic_search_url("x y", destinations) == "/s?q=x+y"

    def test_generic_url_escapes_term(self):
        assert generic_search_url("usb-c & lightning") == "/search?q=usb-c+%26+lightning"

    def test_spans_both_kinds(self, result_factory):
        assert spans_both_kinds([result_factory("p", PART), result_factory("a", ACC)])
        assert not spans_both_kinds([result_factory("p", PART), result_factory("q", PART)])
        assert not spans_both_kinds([])
