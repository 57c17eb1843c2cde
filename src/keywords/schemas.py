"""Schema definitions for extracted keywords.

Provides a lightweight dataclass for ranked keywords, with serialization
methods for storage and API responses.
"""

from dataclasses import dataclass, field
from typing import Any

from src.ranking.schemas import RankedTerm


@dataclass
class ExtractedKeyword:
    """
    A single keyword ranked by the TextRank pipeline.

    Attributes:
        text: Keyword as it appears after cleaning.
        score: PageRank score of the keyword's graph node (higher = more important).
        rank: 1-based ranking position (1 = most important).
        lemma: Normalized form used for equality and deduplication.
        count: Occurrences of the keyword in the filtered feature sequence.
        metadata: Run metadata (algorithm, iterations, converged).

    Example:
        >>> keyword = ExtractedKeyword(
        ...     text="petroleo",
        ...     score=0.021,
        ...     rank=1,
        ...     lemma="petroleo",
        ...     count=4,
        ...     metadata={"algorithm": "pagerank"},
        ... )
        >>> keyword.to_dict()
        {'text': 'petroleo', 'score': 0.021, 'rank': 1, ...}
    """

    text: str
    score: float
    rank: int
    lemma: str
    count: int = 1
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_ranked(
        cls,
        term: RankedTerm,
        rank: int,
        count: int = 1,
        metadata: dict[str, Any] | None = None,
    ) -> "ExtractedKeyword":
        """Build from a pipeline (feature, score) pair."""
        return cls(
            text=term.feature,
            score=term.score,
            rank=rank,
            lemma=term.feature.lower(),
            count=count,
            metadata=dict(metadata or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert keyword to dictionary for JSON serialization.

        Returns:
            Dictionary representation suitable for storage or API response.
        """
        return {
            "text": self.text,
            "score": self.score,
            "rank": self.rank,
            "lemma": self.lemma,
            "count": self.count,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExtractedKeyword":
        """
        Create keyword from dictionary.

        Raises:
            KeyError: If required fields are missing.
        """
        return cls(
            text=data["text"],
            score=data["score"],
            rank=data["rank"],
            lemma=data.get("lemma", data["text"]),
            count=data.get("count", 1),
            metadata=data.get("metadata", {}),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExtractedKeyword):
            return NotImplemented
        return self.lemma == other.lemma

    def __hash__(self) -> int:
        return hash(self.lemma)
