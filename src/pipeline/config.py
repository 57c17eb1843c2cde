"""Configuration for the TextRank pipeline.

All settings can be overridden via environment variables with TEXTRANK_ prefix.
Example: TEXTRANK_DAMPING=0.9
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TextRankConfig(BaseSettings):
    """
    Configuration for the graph-ranking pipeline.

    Invalid values fail at construction (pydantic ValidationError), before
    any text is ranked.

    Attributes:
        damping: Fraction of score mass propagated through edges per sweep.
        convergence: Threshold on ||new - old||_2 / N that ends iteration.
        max_iterations: Hard cap on sweeps per ranking run.
        window_size: Co-occurrence radius in positions.
        min_feature_length: Features shorter than this are filtered out.
        stopwords_dir: Directory of <lang>.txt stopword lists (None = bundled).
        metrics_enabled: Record Prometheus metrics for each run.
        tracing_enabled: Wrap each run in an OpenTelemetry span.
    """

    model_config = SettingsConfigDict(
        env_prefix="TEXTRANK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Ranking
    damping: float = Field(
        default=0.85,
        gt=0.0,
        le=1.0,
        description="PageRank damping factor, 0 < d <= 1.",
    )
    convergence: float = Field(
        default=0.001,
        gt=0.0,
        le=1.0,
        description="Convergence threshold on the per-node score delta norm.",
    )
    max_iterations: int = Field(
        default=100,
        ge=1,
        description="Maximum sweeps before a run is reported as not converged.",
    )

    # Graph
    window_size: int = Field(
        default=3,
        ge=1,
        le=50,
        description="Co-occurrence window radius.",
    )

    # Filtering
    min_feature_length: int = Field(
        default=1,
        ge=0,
        description="Minimum feature length kept by the default filter.",
    )
    stopwords_dir: Path | None = Field(
        default=None,
        description="Directory containing <lang>.txt stopword lists.",
    )

    # Observability
    metrics_enabled: bool = Field(
        default=False,
        description="Record Prometheus metrics for each ranking run.",
    )
    tracing_enabled: bool = Field(
        default=False,
        description="Create an OpenTelemetry span for each ranking run.",
    )
