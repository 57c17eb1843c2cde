"""Stage payloads passed through the extension registry.

Each extension point receives one mutable payload. Handlers rewrite its
fields in place; the orchestrator reads them back once dispatch finishes.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from src.ranking.base import RankingAlgorithm
from src.ranking.schemas import RankedTerm


@dataclass
class TextPayload:
    """Payload for new_text and clean_text."""

    text: str
    lang: str | None = None


@dataclass
class FeaturesPayload:
    """
    Payload for get_features and filter_features.

    ``text`` is the cleaned text. Filters may drop entries or replace them
    with None; the orchestrator compacts the sequence afterwards.
    """

    text: str
    features: Any = field(default_factory=list)
    lang: str | None = None


@dataclass
class GraphPayload:
    """Payload for build_graph: dense features plus the edge-insertion callback."""

    features: list[str]
    connect: Callable[[str, str], bool]
    window_size: int
    lang: str | None = None


@dataclass
class RankingFactoryPayload:
    """Payload for ranking_class: handlers set ``ranking`` to a RankingAlgorithm."""

    ranking: RankingAlgorithm | None = None
    lang: str | None = None


@dataclass
class RankedPayload:
    """Payload for post_ranking."""

    ranked: Any
    lang: str | None = None

    @classmethod
    def from_terms(cls, terms: list[RankedTerm], lang: str | None = None) -> "RankedPayload":
        return cls(ranked=list(terms), lang=lang)
