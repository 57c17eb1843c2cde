"""
Graph-ranked keyword extraction pipeline.

Turns raw text into features, links features that co-occur within a
window, and ranks them with an iterative damped-diffusion algorithm.
Every stage can be overridden through an ExtensionRegistry.

Components:
- TextRank: Pipeline orchestrator (add_text)
- TextRankConfig: Pydantic settings (TEXTRANK_* env vars)
- Stage strategies: AlphabetCleaner, WhitespaceTokenizer, StopwordFilter,
  MinLengthFilter, FeatureFilterChain
- StopwordStore: Load-once per-language stopword lists
- Errors: ConfigurationError, ValidationError, ShapeError
"""

from src.errors import ConfigurationError, ShapeError, TextRankError, ValidationError
from src.pipeline.config import TextRankConfig
from src.pipeline.orchestrator import TextRank, compact_features
from src.pipeline.schemas import (
    FeaturesPayload,
    GraphPayload,
    RankedPayload,
    RankingFactoryPayload,
    TextPayload,
)
from src.pipeline.stages import (
    AlphabetCleaner,
    FeatureFilterChain,
    MinLengthFilter,
    StopwordFilter,
    WhitespaceTokenizer,
)
from src.pipeline.stopwords import StopwordStore, get_stopword_store

__all__ = [
    "AlphabetCleaner",
    "ConfigurationError",
    "FeatureFilterChain",
    "FeaturesPayload",
    "GraphPayload",
    "MinLengthFilter",
    "RankedPayload",
    "RankingFactoryPayload",
    "ShapeError",
    "StopwordFilter",
    "StopwordStore",
    "TextPayload",
    "TextRank",
    "TextRankConfig",
    "TextRankError",
    "ValidationError",
    "WhitespaceTokenizer",
    "compact_features",
    "get_stopword_store",
]
