"""Exception taxonomy shared by the extension registry, ranking engine and pipeline.

All three concrete errors abort the current ``add_text`` call. None of them
are retried. A handler returning ``HandlerOutcome.STOP`` is not an error.
"""


class TextRankError(Exception):
    """Base class for keyword-ranking failures."""


class ConfigurationError(TextRankError):
    """A required extension point is unbound or a bound object is unusable."""


class ValidationError(TextRankError, ValueError):
    """A numeric parameter (damping, convergence, window...) is out of contract."""


class ShapeError(TextRankError, TypeError):
    """A stage produced a value that is not a sequence."""
