"""Bounded ranked collection of scored candidates.

Candidates are ranked by score, highest first. Equal scores rank by
discovery order: the candidate pushed earlier wins. With a deterministic
insertion order the output is therefore fully deterministic.
"""

import heapq
import math
from typing import Generic, List, Tuple, TypeVar

T = TypeVar("T")


class TopNSelector(Generic[T]):
    """Keep the best ``capacity`` candidates of a stream.

    Internally a min-heap of (score, -sequence, item) whose root is the
    current worst-ranked member. Sequence numbers are unique, so items are
    never compared.

    Args:
        capacity: Maximum number of candidates retained (0 keeps nothing)
    """

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError(f"Capacity must be non-negative, got {capacity}")
        self.capacity = capacity
        self._heap: List[Tuple[float, int, T]] = []
        self._pushed = 0

    def __len__(self) -> int:
        return len(self._heap)

    @property
    def pushed(self) -> int:
        """Number of candidates offered so far, admitted or not."""
        return self._pushed

    def push(self, score: float, item: T) -> bool:
        """Offer a candidate.

        Args:
            score: Candidate score (higher is better)
            item: Candidate payload

        Returns:
            True if the candidate was admitted

        Raises:
            ValueError: If the score is NaN
        """
        if math.isnan(score):
            raise ValueError("Cannot rank a NaN score")
        entry = (score, -self._pushed, item)
        self._pushed += 1

        if self.capacity == 0:
            return False
        if len(self._heap) < self.capacity:
            heapq.heappush(self._heap, entry)
            return True
        # A later candidate with an equal score never outranks the worst member
        if score > self._heap[0][0]:
            heapq.heapreplace(self._heap, entry)
            return True
        return False

    def results(self) -> List[T]:
        """Retained items, best first."""
        ranked = sorted(self._heap, key=lambda e: (e[0], e[1]), reverse=True)
        return [item for _, _, item in ranked]
