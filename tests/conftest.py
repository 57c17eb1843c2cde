"""Pytest fixtures for textrank tests."""

from pathlib import Path

import pytest
from prometheus_client import CollectorRegistry

from src.config.settings import Settings
from src.extensions.registry import ExtensionRegistry
from src.observability.metrics import MetricsCollector
from src.pipeline.config import TextRankConfig
from src.pipeline.stopwords import StopwordStore


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing."""
    return Settings(
        environment="development",
        log_level="DEBUG",
    )


@pytest.fixture
def textrank_config() -> TextRankConfig:
    """Default pipeline config, isolated from TEXTRANK_* env vars."""
    return TextRankConfig(
        damping=0.85,
        convergence=0.001,
        max_iterations=100,
        window_size=3,
        min_feature_length=1,
    )


@pytest.fixture
def registry() -> ExtensionRegistry:
    """Empty extension registry."""
    return ExtensionRegistry()


@pytest.fixture
def metrics() -> MetricsCollector:
    """Metrics collector on a private Prometheus registry."""
    return MetricsCollector(registry=CollectorRegistry())


@pytest.fixture
def stopwords_dir(tmp_path: Path) -> Path:
    """Directory with small en/es stopword lists."""
    (tmp_path / "en.txt").write_text("# english\nthe\nof\nand\n\nA\n", encoding="utf-8")
    (tmp_path / "es.txt").write_text("el\nla\nde\nen\nque\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def stopword_store(stopwords_dir: Path) -> StopwordStore:
    """Fresh (uncached) stopword store over the temporary lists."""
    return StopwordStore(stopwords_dir)


@pytest.fixture
def english_text() -> str:
    """Short English text with repeated terms."""
    return (
        "Compatibility of systems of linear constraints over the set of natural numbers. "
        "Criteria of compatibility of a system of linear Diophantine equations, strict "
        "inequations, and nonstrict inequations are considered."
    )


@pytest.fixture
def spanish_text() -> str:
    """Spanish news excerpt with accented characters."""
    return (
        "Ingenieros de la firma de energía de British Petroleum, utilizando robots "
        "submarinos, luchaban por implementar su táctica más reciente para contener "
        "el derrame a 1.600 metros bajo la superficie del mar. El plan es conectar un "
        "tubo de inserción al oleoducto para canalizar el petróleo derramado a un "
        "buque contenedor en la superficie. El tubo de inserción se considera más "
        "efectivo que un plan anterior."
    )
