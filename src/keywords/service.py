"""
Keyword Extraction Service built on the TextRank pipeline.

Wraps ``TextRank.add_text`` with the service conventions used elsewhere in
the project: a prefixed settings object, empty-input short-circuit, input
truncation, top-N / min-score selection and serializable result records.

Architecture:
- One TextRank pipeline per service (shared registry, fresh graph per text)
- Language defaults to KeywordsConfig.language, overridable per call
- Pipeline errors propagate to the caller
- Configurable via environment variables (KEYWORDS_*, TEXTRANK_*)
"""

from collections import Counter

import structlog

from src.keywords.config import KeywordsConfig
from src.keywords.schemas import ExtractedKeyword
from src.pipeline.orchestrator import TextRank

logger = structlog.get_logger(__name__)


class KeywordsService:
    """
    Keyword extraction service using the TextRank algorithm.

    Usage:
        >>> service = KeywordsService()
        >>> keywords = service.extract_sync("Ingenieros de British Petroleum ...", lang="es")
        >>> for kw in keywords:
        ...     print(f"{kw.rank}. {kw.text} (score: {kw.score:.3f})")
        1. petroleo (score: 0.021)
        2. golfo (score: 0.017)
    """

    def __init__(
        self,
        config: KeywordsConfig | None = None,
        textrank: TextRank | None = None,
    ):
        """
        Initialize keywords service.

        Args:
            config: Keywords configuration. If None, uses default config.
            textrank: Pipeline to run. If None, a default TextRank is built.
        """
        self.config = config or KeywordsConfig()
        self.textrank = textrank or TextRank()

    def extract_sync(self, text: str, lang: str | None = None) -> list[ExtractedKeyword]:
        """
        Extract keywords from text.

        Args:
            text: Text to extract keywords from.
            lang: Language tag; defaults to config.language.

        Returns:
            Up to top_n ExtractedKeyword objects, sorted by score descending.
        """
        if not text or (isinstance(text, str) and not text.strip()):
            return []

        if len(text) > self.config.max_text_length:
            text = text[: self.config.max_text_length]
            logger.debug("Text truncated", max_text_length=self.config.max_text_length)

        lang = lang if lang is not None else self.config.language
        ranked = self.textrank.add_text(text, lang=lang)

        counts = Counter(self.textrank.features)
        result = self.textrank.last_result
        metadata = {
            "algorithm": "pagerank",
            "iterations": result.iterations if result else 0,
            "converged": result.converged if result else True,
        }

        keywords: list[ExtractedKeyword] = []
        for term in ranked:
            if len(keywords) >= self.config.top_n:
                break
            if term.score < self.config.min_score:
                continue
            keywords.append(
                ExtractedKeyword.from_ranked(
                    term,
                    rank=len(keywords) + 1,
                    count=counts.get(term.feature, 1),
                    metadata=metadata,
                )
            )

        logger.debug("Keywords extracted", keywords=len(keywords), lang=lang)
        return keywords

    def extract_batch(
        self, texts: list[str], lang: str | None = None
    ) -> list[list[ExtractedKeyword]]:
        """
        Extract keywords from multiple texts.

        Args:
            texts: List of texts to process.
            lang: Language tag applied to every text.

        Returns:
            List of keyword lists, one per input text.
        """
        return [self.extract_sync(text, lang=lang) for text in texts]
