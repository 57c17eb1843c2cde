"""
TextRank pipeline orchestrator.

Drives one text through the fixed stage sequence:

    new_text → clean_text → get_features → filter_features → (compact)
      → ranking_class → build_graph → calculate → post_ranking

Every stage is dispatched through an ExtensionRegistry. Registered handlers
run first and may stop dispatch; otherwise the stage's default strategy
runs. ``get_features`` and ``build_graph`` are required: if nothing is bound
to them the call fails with ConfigurationError.

Architecture:
- Explicit registry instance (no global handler table)
- Typed per-stage strategies supplied through the constructor
- Fresh graph and ranking object per call, discarded afterwards
- Instance state (raw_text, features, ...) only updated after success
"""

from __future__ import annotations

import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager, nullcontext
from typing import Any

import structlog

from src.errors import ConfigurationError, ShapeError, TextRankError
from src.extensions.registry import ExtensionRegistry, Stage
from src.graph.cooccurrence import CooccurrenceGraphBuilder
from src.observability.metrics import MetricsCollector, get_metrics
from src.observability.tracing import get_tracer, traced
from src.pipeline.config import TextRankConfig
from src.pipeline.schemas import (
    FeaturesPayload,
    GraphPayload,
    RankedPayload,
    RankingFactoryPayload,
    TextPayload,
)
from src.pipeline.stages import (
    AlphabetCleaner,
    Cleaner,
    FeatureFilter,
    FeatureFilterChain,
    GraphBuilder,
    MinLengthFilter,
    PostProcessor,
    RankingFactory,
    StopwordFilter,
    Tokenizer,
    WhitespaceTokenizer,
)
from src.pipeline.stopwords import StopwordStore, get_stopword_store
from src.ranking.base import RankingAlgorithm
from src.ranking.pagerank import PageRank
from src.ranking.schemas import RankedTerm, RankingResult

logger = structlog.get_logger(__name__)


class _Unset:
    """Marker for "use the built-in default strategy"."""

    def __repr__(self) -> str:
        return "<default>"


_DEFAULT: Any = _Unset()


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def compact_features(features: Sequence[str | None]) -> list[str]:
    """Drop None placeholders and reassign contiguous positions."""
    return [f for f in features if f is not None]


class TextRank:
    """
    Keyword ranking pipeline.

    Usage:
        >>> textrank = TextRank()
        >>> textrank.add_text("GPU memory bandwidth limits GPU training", lang="en")
        [RankedTerm(feature='gpu', score=...), ...]

    Overriding a stage without subclassing:
        >>> registry = ExtensionRegistry()
        >>> registry.register(Stage.CLEAN_TEXT, spanish_cleaner, replace=True)
        >>> textrank = TextRank(registry=registry)

    Strategy arguments left unset use the built-in defaults; passing None
    disables the default for that stage, leaving only registered handlers.
    """

    def __init__(
        self,
        config: TextRankConfig | None = None,
        registry: ExtensionRegistry | None = None,
        *,
        cleaner: Cleaner | None = _DEFAULT,
        tokenizer: Tokenizer | None = _DEFAULT,
        feature_filter: FeatureFilter | None = _DEFAULT,
        graph_builder: GraphBuilder | None = _DEFAULT,
        post_processor: PostProcessor | None = None,
        ranking_factory: RankingFactory | None = _DEFAULT,
        stopwords: StopwordStore | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Pipeline configuration. If None, uses default config.
            registry: Extension registry. If None, an empty one is created.
            cleaner: clean_text default strategy.
            tokenizer: get_features default strategy.
            feature_filter: filter_features default strategy.
            graph_builder: build_graph default strategy.
            post_processor: post_ranking default strategy (none by default).
            ranking_factory: ranking_class default; returns a RankingAlgorithm.
            stopwords: Stopword store for the default filter.
            metrics: Metrics collector; defaults to the global one when
                config.metrics_enabled is set.

        Note:
            Out-of-range values given to TextRankConfig fail when the config is
            constructed, with pydantic.ValidationError. That is not a
            TextRankError; only values checked by PageRank's setters raise
            src.errors.ValidationError.
        """
        self.config = config or TextRankConfig()
        self.registry = registry if registry is not None else ExtensionRegistry()
        self.stopwords = stopwords or get_stopword_store(self.config.stopwords_dir)

        self.cleaner = AlphabetCleaner() if cleaner is _DEFAULT else cleaner
        self.tokenizer = WhitespaceTokenizer() if tokenizer is _DEFAULT else tokenizer
        self.feature_filter = (
            FeatureFilterChain(
                StopwordFilter(self.stopwords),
                MinLengthFilter(self.config.min_feature_length),
            )
            if feature_filter is _DEFAULT
            else feature_filter
        )
        self.graph_builder = (
            CooccurrenceGraphBuilder(self.config.window_size)
            if graph_builder is _DEFAULT
            else graph_builder
        )
        self.post_processor = post_processor
        self.ranking_factory = (
            (lambda: PageRank.from_config(self.config))
            if ranking_factory is _DEFAULT
            else ranking_factory
        )

        if metrics is None and self.config.metrics_enabled:
            metrics = get_metrics()
        self.metrics = metrics
        self._tracer = get_tracer(__name__) if self.config.tracing_enabled else None

        # State of the last successful add_text() call
        self.raw_text: str | None = None
        self.text: str | None = None
        self.features: list[str] = []
        self.lang: str | None = None
        self.last_result: RankingResult | None = None

    # ── Public API ──────────────────────────────────────

    def add_text(self, text: str, lang: str | None = None) -> list[RankedTerm]:
        """
        Rank the features of a text.

        Args:
            text: Raw input text.
            lang: Optional language tag (selects stopwords, passed to handlers).

        Returns:
            (feature, score) pairs, highest score first.

        Raises:
            ConfigurationError: A required stage is unbound, a handler returned
                an invalid outcome, or the ranking object is unusable.
            ShapeError: A stage produced a non-sequence.
            ValidationError: Ranking parameters out of contract.
        """
        started = time.monotonic()
        span = (
            traced(
                self._tracer,
                "textrank.add_text",
                {"text_length": len(text) if isinstance(text, str) else 0, "lang": lang},
            )
            if self._tracer is not None
            else nullcontext()
        )

        try:
            with span:
                ranked = self._run(text, lang)
        except TextRankError as e:
            if self.metrics is not None:
                self.metrics.record_text("error")
            logger.error("Ranking pipeline failed", error=str(e), error_type=type(e).__name__)
            raise

        if self.metrics is not None:
            self.metrics.record_text("success")
        logger.debug(
            "Text ranked",
            lang=lang,
            features=len(self.features),
            terms=len(ranked),
            took_ms=int((time.monotonic() - started) * 1000),
        )
        return ranked

    def extract(self, text: str, lang: str | None = None, top_n: int | None = None) -> list[RankedTerm]:
        """Rank a text and keep the first ``top_n`` terms (all when None)."""
        ranked = self.add_text(text, lang)
        return ranked if top_n is None else ranked[:top_n]

    # ── Stage sequence ──────────────────────────────────

    def _run(self, text: str, lang: str | None) -> list[RankedTerm]:
        incoming = TextPayload(text=text, lang=lang)
        with self._timed(Stage.NEW_TEXT):
            self.registry.invoke(Stage.NEW_TEXT, incoming)
        if not isinstance(incoming.text, str):
            raise ShapeError(f"Stage {Stage.NEW_TEXT!r} produced {type(incoming.text).__name__}, expected str")
        raw_text = incoming.text

        working = TextPayload(text=raw_text, lang=lang)
        with self._timed(Stage.CLEAN_TEXT):
            self.registry.invoke(Stage.CLEAN_TEXT, working, default=self._default(self.cleaner, self._clean))
        if not isinstance(working.text, str):
            raise ShapeError(f"Stage {Stage.CLEAN_TEXT!r} produced {type(working.text).__name__}, expected str")

        payload = FeaturesPayload(text=working.text, lang=lang)
        with self._timed(Stage.GET_FEATURES):
            self.registry.invoke(
                Stage.GET_FEATURES, payload, default=self._default(self.tokenizer, self._tokenize), required=True
            )
        payload.features = list(self._require_sequence(Stage.GET_FEATURES, payload.features))

        with self._timed(Stage.FILTER_FEATURES):
            self.registry.invoke(Stage.FILTER_FEATURES, payload, default=self._default(self.feature_filter, self._filter))
        features = compact_features(self._require_sequence(Stage.FILTER_FEATURES, payload.features))

        ranking = self._new_ranking(lang)

        graph = GraphPayload(
            features=features,
            connect=ranking.add_connection,
            window_size=self.config.window_size,
            lang=lang,
        )
        with self._timed(Stage.BUILD_GRAPH):
            self.registry.invoke(Stage.BUILD_GRAPH, graph, default=self._default(self.graph_builder, self._build), required=True)

        with self._timed("rank"):
            result = ranking.calculate()
        if self.metrics is not None:
            self.metrics.record_ranking(result.iterations, result.converged, len(result))

        post = RankedPayload.from_terms(result.ranked(), lang=lang)
        with self._timed(Stage.POST_RANKING):
            self.registry.invoke(Stage.POST_RANKING, post, default=self._default(self.post_processor, self._post_process))
        ranked = list(self._require_sequence(Stage.POST_RANKING, post.ranked))

        self.raw_text = raw_text
        self.text = working.text
        self.features = features
        self.lang = lang
        self.last_result = result
        return ranked

    def _new_ranking(self, lang: str | None) -> RankingAlgorithm:
        payload = RankingFactoryPayload(lang=lang)
        self.registry.invoke(Stage.RANKING_CLASS, payload, default=self._default(self.ranking_factory, self._create_ranking))
        if not isinstance(payload.ranking, RankingAlgorithm):
            raise ConfigurationError(
                f"Invalid ranking object {payload.ranking!r}: must be a RankingAlgorithm"
            )
        return payload.ranking

    # ── Default stage handlers ──────────────────────────

    @staticmethod
    def _default(strategy: Any, handler: Any) -> Any:
        """The stage default, or None when the strategy was disabled."""
        return handler if strategy is not None else None

    def _clean(self, payload: TextPayload) -> None:
        payload.text = self.cleaner.clean(payload.text)

    def _tokenize(self, payload: FeaturesPayload) -> None:
        payload.features = self.tokenizer.tokenize(payload.text)

    def _filter(self, payload: FeaturesPayload) -> None:
        payload.features = self.feature_filter.filter(payload.features, payload.lang)

    def _build(self, payload: GraphPayload) -> None:
        self.graph_builder.build(payload.features, payload.connect)

    def _post_process(self, payload: RankedPayload) -> None:
        payload.ranked = self.post_processor.process(payload.ranked, payload.lang)

    def _create_ranking(self, payload: RankingFactoryPayload) -> None:
        # A registered handler that already chose a ranking object wins
        if payload.ranking is None:
            payload.ranking = self.ranking_factory()

    # ── Helpers ─────────────────────────────────────────

    @staticmethod
    def _require_sequence(stage: str, value: Any) -> Sequence[Any]:
        if not _is_sequence(value):
            raise ShapeError(
                f"Stage {stage!r} produced {type(value).__name__}, expected a sequence"
            )
        return value

    @contextmanager
    def _timed(self, stage: str) -> Iterator[None]:
        if self.metrics is None:
            yield
            return
        started = time.monotonic()
        try:
            yield
        finally:
            self.metrics.record_stage_latency(stage, time.monotonic() - started)
