"""Co-occurrence graph construction for keyword ranking.

Components:
- build_cooccurrence_graph: Windowed edge generation over a feature sequence
- CooccurrenceGraphBuilder: Default build_graph strategy wrapping it
"""

from src.graph.cooccurrence import (
    DEFAULT_WINDOW_SIZE,
    CooccurrenceGraphBuilder,
    build_cooccurrence_graph,
)

__all__ = [
    "DEFAULT_WINDOW_SIZE",
    "CooccurrenceGraphBuilder",
    "build_cooccurrence_graph",
]
