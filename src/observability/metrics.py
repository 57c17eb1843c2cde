"""
Prometheus metrics for monitoring the keyword-ranking pipeline.

Defines and exposes metrics for:
- Texts ranked (by outcome)
- Per-stage latency
- Ranking iterations and non-converged runs
- Graph size

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Histogram,
    start_http_server,
)

from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for latency histograms (in seconds)
LATENCY_BUCKETS = (0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)

# Buckets for iteration counts
ITERATION_BUCKETS = (1, 2, 5, 10, 20, 35, 50, 75, 100, 250)

# Buckets for graph sizes (nodes)
GRAPH_SIZE_BUCKETS = (1, 5, 10, 25, 50, 100, 250, 500, 1000, 5000)


class MetricsCollector:
    """
    Prometheus metrics collector for the keyword-ranking pipeline.

    Usage:
        metrics = MetricsCollector()
        metrics.start_server()

        metrics.record_stage_latency("clean_text", 0.0004)
        metrics.record_ranking(iterations=17, converged=True, nodes=42)
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize Prometheus metrics.

        Args:
            registry: Registry to register on (default: the global REGISTRY).
                Tests pass a fresh CollectorRegistry to avoid duplicates.
        """
        self.registry = registry or REGISTRY

        self.texts_ranked = Counter(
            "textrank_texts_ranked_total",
            "Total number of texts run through the ranking pipeline",
            ["status"],  # status: success, error
            registry=self.registry,
        )

        self.not_converged = Counter(
            "textrank_not_converged_total",
            "Total ranking runs that hit the iteration cap",
            registry=self.registry,
        )

        self.stage_latency = Histogram(
            "textrank_stage_latency_seconds",
            "Time spent in each pipeline stage",
            ["stage"],  # clean_text, get_features, build_graph, rank, ...
            buckets=LATENCY_BUCKETS,
            registry=self.registry,
        )

        self.ranking_iterations = Histogram(
            "textrank_ranking_iterations",
            "Sweeps performed per ranking run",
            buckets=ITERATION_BUCKETS,
            registry=self.registry,
        )

        self.graph_nodes = Histogram(
            "textrank_graph_nodes",
            "Number of nodes in the co-occurrence graph",
            buckets=GRAPH_SIZE_BUCKETS,
            registry=self.registry,
        )

        logger.info("Prometheus metrics initialized")

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus metrics HTTP server.

        Args:
            port: Port to expose metrics on (default from settings)
        """
        settings = get_settings()
        port = port or settings.metrics_port

        start_http_server(port, registry=self.registry)
        logger.info(f"Prometheus metrics server started on port {port}")

    # Convenience methods

    def record_text(self, status: str) -> None:
        """
        Record a pipeline run outcome.

        Args:
            status: success or error
        """
        self.texts_ranked.labels(status=status).inc()

    def record_stage_latency(self, stage: str, latency: float) -> None:
        """
        Record pipeline stage latency.

        Args:
            stage: Stage name (clean_text, build_graph, rank, etc.)
            latency: Latency in seconds
        """
        self.stage_latency.labels(stage=stage).observe(latency)

    def record_ranking(self, iterations: int, converged: bool, nodes: int) -> None:
        """
        Record a ranking run.

        Args:
            iterations: Sweeps performed
            converged: Whether the threshold was reached before the cap
            nodes: Graph node count
        """
        self.ranking_iterations.observe(iterations)
        self.graph_nodes.observe(nodes)
        if not converged:
            self.not_converged.inc()


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
