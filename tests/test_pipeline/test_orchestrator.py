"""Tests for the TextRank pipeline orchestrator."""

import pytest

from src.errors import ConfigurationError, ShapeError
from src.extensions.registry import ExtensionRegistry, HandlerOutcome, Stage
from src.pipeline.config import TextRankConfig
from src.pipeline.orchestrator import TextRank, compact_features
from src.pipeline.stages import AlphabetCleaner
from src.ranking.pagerank import PageRank
from src.ranking.schemas import RankedTerm


class CountingPageRank(PageRank):
    """PageRank that records how many edges it was offered."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.offered = 0

    def add_connection(self, source: str, dest: str) -> bool:
        self.offered += 1
        return super().add_connection(source, dest)


@pytest.fixture
def textrank(textrank_config, registry, stopword_store) -> TextRank:
    return TextRank(textrank_config, registry, stopwords=stopword_store)


class TestCompactFeatures:
    def test_drops_none_and_keeps_order(self):
        assert compact_features(["a", None, "c", None, "d"]) == ["a", "c", "d"]

    def test_dense_input_unchanged(self):
        assert compact_features(["a", "b"]) == ["a", "b"]


class TestAddText:
    """End-to-end runs through the default stages."""

    def test_symmetric_pair(self, textrank):
        ranked = textrank.add_text("a b a b")

        assert [term.feature for term in ranked] == ["a", "b"]
        assert ranked[0].score == pytest.approx(0.5, abs=0.01)
        assert ranked[0].score == pytest.approx(ranked[1].score)
        assert isinstance(ranked[0], RankedTerm)

    def test_state_recorded_after_success(self, textrank):
        textrank.add_text("GPU  memory, GPU!", lang="xx")

        assert textrank.raw_text == "GPU  memory, GPU!"
        assert textrank.text == "gpu memory gpu"
        assert textrank.features == ["gpu", "memory", "gpu"]
        assert textrank.lang == "xx"
        assert textrank.last_result is not None
        assert textrank.last_result.converged is True

    def test_empty_text_ranks_nothing(self, textrank):
        assert textrank.add_text("") == []
        assert textrank.features == []

    def test_single_feature_has_no_edges(self, textrank):
        assert textrank.add_text("lonely") == []

    def test_stopwords_removed_for_language(self, textrank):
        textrank.add_text("The cat of the house and a dog", lang="en")

        assert textrank.features == ["cat", "house", "dog"]

    def test_stopwords_ignored_without_language(self, textrank):
        textrank.add_text("the cat of the house")

        assert "the" in textrank.features

    def test_unknown_language_has_no_stopwords(self, textrank):
        textrank.add_text("the cat", lang="fr")

        assert textrank.features == ["the", "cat"]

    def test_min_length_filter_compacts(self, registry, stopword_store):
        config = TextRankConfig(min_feature_length=3)
        textrank = TextRank(config, registry, stopwords=stopword_store)

        textrank.add_text("El gato corre")

        assert textrank.features == ["gato", "corre"]

    def test_bundled_english_stopwords(self, registry):
        textrank = TextRank(TextRankConfig(stopwords_dir=None), registry)

        textrank.add_text("the history of the language", lang="english")

        assert textrank.features == ["history", "language"]

    def test_every_feature_is_ranked(self, textrank, english_text):
        ranked = textrank.add_text(english_text, lang="en")

        assert {term.feature for term in ranked} == set(textrank.features)
        scores = [term.score for term in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_window_from_config(self, registry, stopword_store):
        config = TextRankConfig(window_size=1)
        ranking = CountingPageRank()
        textrank = TextRank(config, registry, stopwords=stopword_store, ranking_factory=lambda: ranking)

        textrank.add_text("a b c d")

        # positions 0 and 3 contribute one edge each, 1 and 2 two each
        assert ranking.offered == 6

    def test_fresh_graph_per_call(self, textrank):
        textrank.add_text("alpha beta")
        ranked = textrank.add_text("gamma delta")

        assert {term.feature for term in ranked} == {"gamma", "delta"}

    def test_extract_top_n(self, textrank, english_text):
        everything = textrank.extract(english_text, lang="en")
        top = textrank.extract(english_text, lang="en", top_n=3)

        assert top == everything[:3]
        assert len(top) == 3


class TestStageOverrides:
    """Handlers registered on the extension registry."""

    def test_spanish_cleaner_replaces_default(self, registry, textrank_config, stopword_store, spanish_text):
        spanish = AlphabetCleaner(extra="áéíóúüñ")

        def clean_spanish(payload):
            payload.text = spanish.clean(payload.text)
            return HandlerOutcome.STOP

        registry.register(Stage.CLEAN_TEXT, clean_spanish, replace=True)
        textrank = TextRank(textrank_config, registry, stopwords=stopword_store)

        textrank.add_text(spanish_text, lang="es")

        assert "energía" in textrank.features
        assert "petróleo" in textrank.features
        assert "el" not in textrank.features
        assert "de" not in textrank.features

    def test_default_cleaner_splits_accented_words(self, textrank):
        textrank.add_text("energía")

        assert textrank.features == ["energ", "a"]

    def test_new_text_handler_transforms_input(self, registry, textrank_config):
        def expand(payload):
            payload.text = payload.text.replace("GPU", "graphics processor")

        registry.register(Stage.NEW_TEXT, expand)
        textrank = TextRank(textrank_config, registry)

        textrank.add_text("GPU memory")

        assert textrank.raw_text == "graphics processor memory"
        assert textrank.features == ["graphics", "processor", "memory"]

    def test_handler_runs_before_default_filter(self, registry, textrank_config, stopword_store):
        def drop_cat(payload):
            payload.features = [f for f in payload.features if f != "cat"]

        registry.register(Stage.FILTER_FEATURES, drop_cat)
        textrank = TextRank(textrank_config, registry, stopwords=stopword_store)

        textrank.add_text("the cat and the dog bark", lang="en")

        assert textrank.features == ["dog", "bark"]

    def test_sparse_filter_output_is_compacted(self, registry, stopword_store):
        def blank_b(payload):
            payload.features = [None if f == "b" else f for f in payload.features]
            return HandlerOutcome.STOP

        registry.register(Stage.FILTER_FEATURES, blank_b)
        ranking = CountingPageRank()
        textrank = TextRank(
            TextRankConfig(window_size=1),
            registry,
            stopwords=stopword_store,
            ranking_factory=lambda: ranking,
        )

        ranked = textrank.add_text("a b c")

        assert textrank.features == ["a", "c"]
        # a and c are adjacent once b's slot is removed
        assert ranking.incoming["c"] == ["a"]
        assert {term.feature for term in ranked} == {"a", "c"}

    def test_custom_tokenizer_handler(self, registry, textrank_config):
        def bigrams(payload):
            words = payload.text.split(" ")
            payload.features = [f"{a}_{b}" for a, b in zip(words, words[1:])]
            return HandlerOutcome.STOP

        registry.register(Stage.GET_FEATURES, bigrams)
        textrank = TextRank(textrank_config, registry)

        textrank.add_text("deep neural network training")

        assert textrank.features == ["deep_neural", "neural_network", "network_training"]

    def test_custom_graph_builder_handler(self, registry, textrank_config):
        def chain(payload):
            for left, right in zip(payload.features, payload.features[1:]):
                payload.connect(left, right)
            return HandlerOutcome.STOP

        registry.register(Stage.BUILD_GRAPH, chain)
        textrank = TextRank(textrank_config, registry)

        ranked = textrank.add_text("a b c")

        assert [term.feature for term in ranked][-1] == "a"

    def test_post_ranking_truncates(self, registry, textrank_config):
        def keep_two(payload):
            payload.ranked = payload.ranked[:2]

        registry.register(Stage.POST_RANKING, keep_two)
        textrank = TextRank(textrank_config, registry)

        ranked = textrank.add_text("one two three four five")

        assert len(ranked) == 2

    def test_post_processor_strategy(self, textrank_config, registry):
        class Uppercase:
            def process(self, ranked, lang=None):
                return [RankedTerm(term.feature.upper(), term.score) for term in ranked]

        textrank = TextRank(textrank_config, registry, post_processor=Uppercase())

        ranked = textrank.add_text("a b a b")

        assert [term.feature for term in ranked] == ["A", "B"]

    def test_ranking_class_handler(self, registry, textrank_config):
        chosen = CountingPageRank(damping=0.5)

        def choose(payload):
            payload.ranking = chosen

        registry.register(Stage.RANKING_CLASS, choose)
        textrank = TextRank(textrank_config, registry)

        textrank.add_text("a b a b")

        assert chosen.offered > 0

    def test_ranking_factory_strategy(self, textrank_config, registry):
        created = []

        def factory():
            ranking = CountingPageRank()
            created.append(ranking)
            return ranking

        textrank = TextRank(textrank_config, registry, ranking_factory=factory)
        textrank.add_text("a b")
        textrank.add_text("c d")

        assert len(created) == 2
        assert created[0] is not created[1]


class TestFailures:
    """Configuration and shape errors."""

    def test_missing_tokenizer_raises(self, textrank_config, registry):
        textrank = TextRank(textrank_config, registry, tokenizer=None)

        with pytest.raises(ConfigurationError, match="get_features"):
            textrank.add_text("a b c")

        assert textrank.last_result is None
        assert textrank.raw_text is None

    def test_missing_graph_builder_raises(self, textrank_config, registry):
        textrank = TextRank(textrank_config, registry, graph_builder=None)

        with pytest.raises(ConfigurationError, match="build_graph"):
            textrank.add_text("a b c")

    def test_disabled_filter_keeps_everything(self, textrank_config, registry, stopword_store):
        textrank = TextRank(textrank_config, registry, stopwords=stopword_store, feature_filter=None)

        textrank.add_text("the cat", lang="en")

        assert textrank.features == ["the", "cat"]

    def test_new_text_must_stay_text(self, registry, textrank_config):
        def to_bytes(payload):
            payload.text = payload.text.encode()

        registry.register(Stage.NEW_TEXT, to_bytes)

        with pytest.raises(ShapeError, match="new_text"):
            TextRank(textrank_config, registry).add_text("a b")

    def test_features_must_be_sequence(self, registry, textrank_config):
        def as_string(payload):
            payload.features = payload.text
            return HandlerOutcome.STOP

        registry.register(Stage.GET_FEATURES, as_string)

        with pytest.raises(ShapeError, match="get_features"):
            TextRank(textrank_config, registry).add_text("a b")

    def test_filter_output_must_be_sequence(self, registry, textrank_config):
        def broken(payload):
            payload.features = 42
            return HandlerOutcome.STOP

        registry.register(Stage.FILTER_FEATURES, broken)

        with pytest.raises(ShapeError, match="filter_features"):
            TextRank(textrank_config, registry).add_text("a b")

    def test_post_ranking_output_must_be_sequence(self, registry, textrank_config):
        def broken(payload):
            payload.ranked = None

        registry.register(Stage.POST_RANKING, broken)

        with pytest.raises(ShapeError):
            TextRank(textrank_config, registry).add_text("a b")

    def test_ranking_class_must_be_ranking_algorithm(self, registry, textrank_config):
        def wrong(payload):
            payload.ranking = object()

        registry.register(Stage.RANKING_CLASS, wrong)

        with pytest.raises(ConfigurationError, match="RankingAlgorithm"):
            TextRank(textrank_config, registry).add_text("a b")

    def test_invalid_handler_outcome(self, registry, textrank_config):
        registry.register(Stage.CLEAN_TEXT, lambda payload: "stop")

        with pytest.raises(ConfigurationError):
            TextRank(textrank_config, registry).add_text("a b")

    def test_failure_keeps_previous_state(self, textrank_config):
        registry = ExtensionRegistry()
        textrank = TextRank(textrank_config, registry)
        textrank.add_text("first text here")
        previous = textrank.last_result

        def broken(payload):
            payload.features = None
            return HandlerOutcome.STOP

        registry.register(Stage.GET_FEATURES, broken)

        with pytest.raises(ShapeError):
            textrank.add_text("second text")

        assert textrank.raw_text == "first text here"
        assert textrank.features == ["first", "text", "here"]
        assert textrank.last_result is previous


class TestMetrics:
    """Prometheus metrics recorded by add_text()."""

    def test_success_recorded(self, textrank_config, registry, metrics):
        textrank = TextRank(textrank_config, registry, metrics=metrics)

        textrank.add_text("a b a b")

        samples = metrics.registry
        assert samples.get_sample_value("textrank_texts_ranked_total", {"status": "success"}) == 1.0
        assert samples.get_sample_value("textrank_ranking_iterations_count") == 1.0
        assert samples.get_sample_value("textrank_ranking_iterations_sum") == 24.0
        assert samples.get_sample_value("textrank_graph_nodes_sum") == 2.0
        for stage in (Stage.NEW_TEXT, Stage.CLEAN_TEXT, Stage.GET_FEATURES, Stage.BUILD_GRAPH, "rank"):
            assert samples.get_sample_value("textrank_stage_latency_seconds_count", {"stage": stage}) == 1.0

    def test_not_converged_recorded(self, registry, metrics):
        textrank = TextRank(TextRankConfig(max_iterations=1), registry, metrics=metrics)

        textrank.add_text("a b a b")

        assert textrank.last_result.converged is False
        assert metrics.registry.get_sample_value("textrank_not_converged_total") == 1.0

    def test_error_recorded(self, textrank_config, registry, metrics):
        textrank = TextRank(textrank_config, registry, tokenizer=None, metrics=metrics)

        with pytest.raises(ConfigurationError):
            textrank.add_text("a b")

        assert metrics.registry.get_sample_value("textrank_texts_ranked_total", {"status": "error"}) == 1.0

    def test_no_metrics_by_default(self, textrank_config, registry):
        assert TextRank(textrank_config, registry).metrics is None
