"""Result types produced by ranking algorithms."""

from dataclasses import dataclass, field
from typing import NamedTuple


class RankedTerm(NamedTuple):
    """A feature and its final score."""

    feature: str
    score: float


@dataclass
class RankingResult:
    """
    Outcome of one ranking run.

    Attributes:
        scores: Node -> score, ordered by descending score (ties keep
            first-seen insertion order).
        iterations: Number of full sweeps performed.
        converged: False when the iteration cap was hit before the score
            delta fell under the convergence threshold.
    """

    scores: dict[str, float] = field(default_factory=dict)
    iterations: int = 0
    converged: bool = True

    def ranked(self) -> list[RankedTerm]:
        """Scores as an ordered list of (feature, score) pairs."""
        return [RankedTerm(feature, score) for feature, score in self.scores.items()]

    def __len__(self) -> int:
        return len(self.scores)
