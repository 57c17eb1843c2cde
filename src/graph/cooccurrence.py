"""Co-occurrence graph construction.

Turns an ordered, already-filtered feature sequence into directed edges:
every feature is linked to each neighbour at most ``window_size`` positions
away, in both directions. Because every position takes a turn as source,
each neighbouring pair is inserted twice (once from each side) and the
edge set is symmetric in aggregate. Repeated co-occurrence is never merged;
it shows up as edge multiplicity.

The radius is inclusive on both sides: position i links to every j with
0 < |i - j| <= window_size, so with the default radius of 3 the first
feature reaches the fourth (t0 → t3).

Example:
    ranking = PageRank()
    build_cooccurrence_graph(["gpu", "memory", "bandwidth"], ranking.add_connection)
    # gpu→memory, gpu→bandwidth, memory→gpu, memory→bandwidth, ...
"""

from collections.abc import Callable, Sequence

from src.errors import ValidationError

DEFAULT_WINDOW_SIZE = 3

Connect = Callable[[str, str], bool]


def build_cooccurrence_graph(
    features: Sequence[str],
    connect: Connect,
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> int:
    """
    Feed windowed co-occurrence edges to ``connect``.

    Args:
        features: Dense feature sequence (position matters).
        connect: Edge-insertion callback, e.g. ``RankingAlgorithm.add_connection``.
        window_size: Maximum distance between linked positions.

    Returns:
        Number of edges the callback accepted. Equal features at different
        positions produce self-loops, which the callback rejects.
    """
    if window_size < 1:
        raise ValidationError(f"Invalid window size {window_size!r}: must be >= 1")

    size = len(features)
    accepted = 0
    for i in range(size):
        lo = max(0, i - window_size)
        hi = min(size, i + window_size + 1)
        for j in range(lo, hi):
            if j != i and connect(features[i], features[j]):
                accepted += 1
    return accepted


class CooccurrenceGraphBuilder:
    """Default ``build_graph`` strategy: windowed co-occurrence edges."""

    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE):
        if window_size < 1:
            raise ValidationError(f"Invalid window size {window_size!r}: must be >= 1")
        self.window_size = window_size

    def build(self, features: Sequence[str], connect: Connect) -> int:
        return build_cooccurrence_graph(features, connect, self.window_size)

    def __call__(self, features: Sequence[str], connect: Connect) -> int:
        return self.build(features, connect)
