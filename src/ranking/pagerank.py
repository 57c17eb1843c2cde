"""
Damped iterative diffusion (PageRank) over a directed co-occurrence multigraph.

One sweep over N nodes updates every node with incoming edges:

    new(v) = (1 - d) / N + d * sum(score(u) / out_degree(u) for u in In(v))

Nodes with no incoming edges keep their previous score. Parallel edges are
not collapsed: a source listed k times in In(v) contributes k times. After
each sweep the run stops once ``||new - old||_2 / N < convergence``; the
``max_iterations`` cap guarantees termination and is reported through
``RankingResult.converged``.

Example:
    ranking = PageRank(damping=0.85, convergence=0.001)
    ranking.add_connection("gpu", "memory")
    ranking.add_connection("memory", "gpu")
    result = ranking.calculate()
    # → RankingResult(scores={"gpu": 0.5, "memory": 0.5}, ...)
"""

from __future__ import annotations

import numbers
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

import numpy as np
import structlog

from src.errors import ValidationError
from src.ranking.base import RankingAlgorithm
from src.ranking.schemas import RankingResult

if TYPE_CHECKING:
    from src.pipeline.config import TextRankConfig

logger = structlog.get_logger(__name__)

DEFAULT_DAMPING = 0.85
DEFAULT_CONVERGENCE = 0.001
DEFAULT_MAX_ITERATIONS = 100


def _as_float(name: str, value: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid {name} {value!r}: must be a number") from e


class PageRank(RankingAlgorithm):
    """
    Default ranking algorithm.

    Sources whose out-degree is zero contribute nothing to their
    destinations. Edges inserted through ``add_connection()`` always give
    their source an out-degree of at least one, so this only matters for
    subclasses that manipulate the adjacency directly.
    """

    def __init__(
        self,
        damping: float = DEFAULT_DAMPING,
        convergence: float = DEFAULT_CONVERGENCE,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ) -> None:
        self.set_damping(damping)
        self.set_convergence(convergence)
        self.set_max_iterations(max_iterations)

        self._nodes: dict[str, float] = {}
        self._incoming: dict[str, list[str]] = {}
        self._out_degree: dict[str, int] = {}

    @classmethod
    def from_config(cls, config: TextRankConfig) -> PageRank:
        """Build from a TextRankConfig."""
        return cls(
            damping=config.damping,
            convergence=config.convergence,
            max_iterations=config.max_iterations,
        )

    # ── Parameters ──────────────────────────────────────

    @property
    def damping(self) -> float:
        return self._damping

    @property
    def convergence(self) -> float:
        return self._convergence

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    def set_damping(self, damping: float) -> None:
        """Set the damping factor. Must satisfy 0 < damping <= 1."""
        damping = _as_float("damping factor", damping)
        # NaN fails this comparison too
        if not 0.0 < damping <= 1.0:
            raise ValidationError(f"Invalid damping factor {damping!r}: must be in (0, 1]")
        self._damping = damping

    def set_convergence(self, convergence: float) -> None:
        """Set the convergence threshold. Must satisfy 0 < convergence <= 1."""
        convergence = _as_float("convergence factor", convergence)
        # a non-positive (or NaN) threshold is unreachable and would always hit the cap
        if not 0.0 < convergence <= 1.0:
            raise ValidationError(f"Invalid convergence factor {convergence!r}: must be in (0, 1]")
        self._convergence = convergence

    def set_max_iterations(self, max_iterations: int) -> None:
        """Set the sweep cap. Must be an integer of at least 1."""
        if isinstance(max_iterations, bool) or not isinstance(max_iterations, numbers.Integral):
            raise ValidationError(f"Invalid max_iterations {max_iterations!r}: must be an integer")
        if max_iterations < 1:
            raise ValidationError(f"Invalid max_iterations {max_iterations!r}: must be >= 1")
        self._max_iterations = int(max_iterations)

    # ── Graph ───────────────────────────────────────────

    @property
    def nodes(self) -> Mapping[str, float]:
        return MappingProxyType(self._nodes)

    @property
    def incoming(self) -> Mapping[str, list[str]]:
        return MappingProxyType(self._incoming)

    @property
    def out_degree(self) -> Mapping[str, int]:
        return MappingProxyType(self._out_degree)

    def add_connection(self, source: str, dest: str) -> bool:
        """
        Add a directed edge to the graph.

        Self-loops are rejected without touching the graph.

        Returns:
            True if the edge was inserted.
        """
        if source == dest:
            return False

        self._out_degree[source] = self._out_degree.get(source, 0) + 1
        self._incoming.setdefault(dest, []).append(source)

        initial = 1.0 - self._damping
        self._nodes.setdefault(source, initial)
        self._nodes.setdefault(dest, initial)
        return True

    # ── Ranking ─────────────────────────────────────────

    def calculate(self) -> RankingResult:
        """
        Iterate to convergence (or the sweep cap) and rank the nodes.

        Returns:
            RankingResult with scores sorted by descending score.
        """
        if not self._nodes:
            return RankingResult(scores={}, iterations=0, converged=True)

        names = list(self._nodes)
        index = {name: i for i, name in enumerate(names)}
        n = len(names)

        # One entry per edge, so parallel edges keep their multiplicity.
        src_idx = np.array(
            [index[u] for sources in self._incoming.values() for u in sources],
            dtype=np.intp,
        )
        dst_idx = np.array(
            [index[v] for v, sources in self._incoming.items() for _ in sources],
            dtype=np.intp,
        )
        out_degree = np.array(
            [self._out_degree.get(name, 0) for name in names], dtype=np.float64
        )
        has_incoming = np.zeros(n, dtype=bool)
        has_incoming[[index[v] for v in self._incoming]] = True

        scores = np.array([self._nodes[name] for name in names], dtype=np.float64)
        base = (1.0 - self._damping) / n

        converged = False
        iterations = 0
        while iterations < self._max_iterations:
            iterations += 1
            new_scores = self._iteration(
                scores, src_idx, dst_idx, out_degree, has_incoming, base
            )
            delta = float(np.linalg.norm(new_scores - scores)) / n
            scores = new_scores
            if delta < self._convergence:
                converged = True
                break

        if not converged:
            logger.warning(
                "PageRank did not converge",
                nodes=n,
                iterations=iterations,
                damping=self._damping,
                convergence=self._convergence,
            )

        self._nodes = {name: float(scores[i]) for i, name in enumerate(names)}
        ordered = sorted(self._nodes.items(), key=lambda item: item[1], reverse=True)

        logger.debug(
            "PageRank complete",
            nodes=n,
            edges=int(src_idx.size),
            iterations=iterations,
            converged=converged,
        )
        return RankingResult(scores=dict(ordered), iterations=iterations, converged=converged)

    def _iteration(
        self,
        scores: np.ndarray,
        src_idx: np.ndarray,
        dst_idx: np.ndarray,
        out_degree: np.ndarray,
        has_incoming: np.ndarray,
        base: float,
    ) -> np.ndarray:
        """One sweep; nodes without incoming edges keep their score."""
        per_source = np.divide(
            scores,
            out_degree,
            out=np.zeros_like(scores),
            where=out_degree > 0,
        )
        inflow = np.bincount(dst_idx, weights=per_source[src_idx], minlength=scores.size)
        return np.where(has_incoming, base + self._damping * inflow, scores)
