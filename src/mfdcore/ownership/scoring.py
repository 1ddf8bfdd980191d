"""Score accumulation for the heuristic ownership passes."""

from typing import Dict, Hashable, Iterator, Optional, Sequence


class ScoreBoard:
    """
    Per-target component scores.

    Scores are kept in insertion order, which makes "first inserted wins"
    the natural tie-break of best().
    """

    def __init__(self):
        self._scores: Dict[Hashable, Dict[str, int]] = {}

    def add(self, target: Hashable, component: str, points: int) -> None:
        per_target = self._scores.setdefault(target, {})
        per_target[component] = per_target.get(component, 0) + points

    def merge(self, target: Hashable, scores: Dict[str, int]) -> None:
        for component, points in scores.items():
            self.add(target, component, points)

    def scores(self, target: Hashable) -> Dict[str, int]:
        return dict(self._scores.get(target, {}))

    def best(self, target: Hashable, order: Optional[Sequence[str]] = None) -> Optional[str]:
        """
        Highest-scoring component for target, None if it was never scored.

        Ties go to the component listed first in ``order`` when given,
        otherwise to the component that was scored first.
        """
        per_target = self._scores.get(target)
        if not per_target:
            return None

        top = max(per_target.values())
        tied = [comp for comp, score in per_target.items() if score == top]
        if order is None or len(tied) == 1:
            return tied[0]

        rank = {comp: i for i, comp in enumerate(order)}
        return min(tied, key=lambda comp: rank.get(comp, len(rank)))

    def __contains__(self, target: Hashable) -> bool:
        return target in self._scores

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._scores)

    def __len__(self) -> int:
        return len(self._scores)
