"""Board evaluation and two-ply placement search."""

from tetris_search.evaluation.evaluator import (
    FEATURE_NAMES,
    default_weights,
    standard_context,
    dig_context,
    killscreen_context,
    extract_features,
    describe_features,
    fast_eval,
)

from tetris_search.evaluation.top_n import TopNSelector

from tetris_search.evaluation.search import (
    search_depth2,
    cached_search_depth2,
    SearchCache,
)

__all__ = [
    # Evaluator
    "FEATURE_NAMES",
    "default_weights",
    "standard_context",
    "dig_context",
    "killscreen_context",
    "extract_features",
    "describe_features",
    "fast_eval",
    # Selection
    "TopNSelector",
    # Search
    "search_depth2",
    "cached_search_depth2",
    "SearchCache",
]
