"""Ranking engine for co-occurrence graphs.

Components:
- RankingAlgorithm: Interface every ranking strategy implements
- PageRank: Default damped iterative diffusion solver
- RankingResult: Scores plus iteration count and convergence flag
- RankedTerm: (feature, score) pair returned to callers
"""

from src.ranking.base import RankingAlgorithm
from src.ranking.pagerank import PageRank
from src.ranking.schemas import RankedTerm, RankingResult

__all__ = [
    "PageRank",
    "RankedTerm",
    "RankingAlgorithm",
    "RankingResult",
]
