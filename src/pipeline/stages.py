"""
Stage strategies for the TextRank pipeline.

Each pipeline stage has a small protocol and a default implementation. The
orchestrator runs the configured strategy as the stage default, after any
handlers registered in the ExtensionRegistry for that stage.

Components:
- Cleaner / AlphabetCleaner: text normalization (clean_text)
- Tokenizer / WhitespaceTokenizer: feature extraction (get_features)
- FeatureFilter / StopwordFilter / MinLengthFilter / FeatureFilterChain
  (filter_features)
- GraphBuilder: see src.graph.CooccurrenceGraphBuilder (build_graph)
- PostProcessor: optional transformation of the ranked list (post_ranking)
- RankingFactory: builds the RankingAlgorithm for a text (ranking_class)
"""

import re
from collections.abc import Callable, Sequence
from typing import Protocol

from src.pipeline.stopwords import StopwordStore
from src.ranking.base import RankingAlgorithm
from src.ranking.schemas import RankedTerm

DEFAULT_ALPHABET = "a-z"

_SPACE_RUN = re.compile(r" +")


class Cleaner(Protocol):
    """Normalize raw text before tokenization."""

    def clean(self, text: str) -> str: ...


class Tokenizer(Protocol):
    """Split cleaned text into an ordered feature sequence."""

    def tokenize(self, text: str) -> Sequence[str]: ...


class FeatureFilter(Protocol):
    """
    Drop unwanted features.

    Implementations may return a shorter sequence or replace dropped
    entries with None; the pipeline compacts either form.
    """

    def filter(self, features: Sequence[str], lang: str | None = None) -> Sequence[str | None]: ...


class GraphBuilder(Protocol):
    """Feed co-occurrence edges for a dense feature sequence to ``connect``."""

    def build(self, features: Sequence[str], connect: Callable[[str, str], bool]) -> int: ...


class PostProcessor(Protocol):
    """Transform the final ranked list."""

    def process(self, ranked: list[RankedTerm], lang: str | None = None) -> list[RankedTerm]: ...


RankingFactory = Callable[[], RankingAlgorithm]


class AlphabetCleaner:
    """
    Lowercase, blank out characters outside the alphabet, collapse spaces.

    The default alphabet is a-z. Pass ``extra`` to accept more letters, e.g.
    ``AlphabetCleaner(extra="áéíóúüñ")`` for Spanish text.
    """

    def __init__(self, extra: str = ""):
        self.extra = extra
        self._reject = re.compile(f"[^{DEFAULT_ALPHABET}{re.escape(extra)} ]")

    def clean(self, text: str) -> str:
        text = text.lower()
        text = self._reject.sub(" ", text)
        return _SPACE_RUN.sub(" ", text).strip()


class WhitespaceTokenizer:
    """Split on single spaces."""

    def tokenize(self, text: str) -> list[str]:
        return text.split(" ")


class StopwordFilter:
    """Drop stopwords of the call's language. Does nothing when lang is None."""

    def __init__(self, store: StopwordStore):
        self.store = store

    def filter(self, features: Sequence[str], lang: str | None = None) -> list[str]:
        if not lang:
            return list(features)
        stopwords = self.store.load(lang)
        return [f for f in features if f not in stopwords]


class MinLengthFilter:
    """Drop features shorter than ``min_length`` characters."""

    def __init__(self, min_length: int):
        self.min_length = min_length

    def filter(self, features: Sequence[str], lang: str | None = None) -> list[str]:
        return [f for f in features if len(f) >= self.min_length]


class FeatureFilterChain:
    """Apply several filters in order, compacting between them."""

    def __init__(self, *filters: FeatureFilter):
        self.filters = filters

    def filter(self, features: Sequence[str], lang: str | None = None) -> list[str]:
        current = list(features)
        for feature_filter in self.filters:
            current = [f for f in feature_filter.filter(current, lang) if f is not None]
        return current
