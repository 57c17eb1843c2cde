"""
Abstract base class for ranking algorithms.

A ranking algorithm owns the graph for a single text: the graph builder feeds
it edges through ``add_connection()`` and the pipeline reads the scores back
from ``calculate()``. Instances are built fresh for every text and discarded
afterwards.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping

from src.ranking.schemas import RankingResult


class RankingAlgorithm(ABC):
    """
    Interface every ranking implementation must satisfy.

    The object returned by the ``ranking_class`` extension point is checked
    against this class before the graph is built.
    """

    @abstractmethod
    def add_connection(self, source: str, dest: str) -> bool:
        """
        Insert a directed edge source -> dest.

        Returns:
            False if the edge was rejected (e.g. a self-loop), True otherwise.
        """

    @abstractmethod
    def calculate(self) -> RankingResult:
        """Rank every node of the graph."""

    @property
    @abstractmethod
    def nodes(self) -> Mapping[str, float]:
        """Current score of every node touched by an edge."""

    @property
    @abstractmethod
    def incoming(self) -> Mapping[str, list[str]]:
        """Destination -> list of sources, one entry per edge."""

    @property
    @abstractmethod
    def out_degree(self) -> Mapping[str, int]:
        """Source -> number of edges inserted with it as source."""

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return sum(self.out_degree.values())
