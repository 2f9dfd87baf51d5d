"""Tests for the bounded Top-N selector."""

import math

import pytest

from tetris_search.evaluation.top_n import TopNSelector


class TestTopNSelector:
    """Tests for TopNSelector."""

    def test_keeps_best_sorted(self):
        selector = TopNSelector(3)
        for i, score in enumerate([3, 1, 4, 1, 5, 9, 2, 6]):
            selector.push(float(score), i)
        assert selector.results() == [5, 7, 4]

    def test_length_bounded_by_capacity(self):
        selector = TopNSelector(5)
        for i in range(3):
            selector.push(float(i), i)
        assert len(selector) == 3
        for i in range(10):
            selector.push(float(i), i)
        assert len(selector) == 5
        assert selector.pushed == 13

    def test_zero_capacity_keeps_nothing(self):
        selector = TopNSelector(0)
        assert selector.push(1.0, "a") is False
        assert selector.results() == []

    def test_negative_capacity_rejected(self):
        with pytest.raises(ValueError):
            TopNSelector(-1)

    def test_equal_scores_keep_discovery_order(self):
        selector = TopNSelector(2)
        for item in "abc":
            selector.push(1.0, item)
        assert selector.results() == ["a", "b"]

    def test_equal_to_worst_is_rejected(self):
        selector = TopNSelector(2)
        selector.push(1.0, "a")
        selector.push(2.0, "b")
        assert selector.push(1.0, "c") is False
        assert selector.results() == ["b", "a"]

    def test_ties_rank_earlier_first(self):
        selector = TopNSelector(4)
        selector.push(1.0, "a")
        selector.push(2.0, "b")
        selector.push(1.0, "c")
        selector.push(2.0, "d")
        assert selector.results() == ["b", "d", "a", "c"]

    def test_nan_rejected(self):
        selector = TopNSelector(2)
        with pytest.raises(ValueError, match="NaN"):
            selector.push(float("nan"), "a")

    def test_items_are_never_compared(self):
        selector = TopNSelector(3)
        for i in range(5):
            selector.push(0.0, {"index": i})
        assert [item["index"] for item in selector.results()] == [0, 1, 2]

    def test_negative_infinity_is_rankable(self):
        selector = TopNSelector(2)
        selector.push(-math.inf, "a")
        selector.push(0.0, "b")
        assert selector.results() == ["b", "a"]
