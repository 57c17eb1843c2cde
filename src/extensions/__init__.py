"""
Extension points for the keyword-ranking pipeline.

Components:
- ExtensionRegistry: Named, ordered handler lists with override support
- HandlerOutcome: CONTINUE / STOP result returned by handlers
- Stage: Fixed extension-point names
"""

from src.extensions.registry import ExtensionRegistry, HandlerOutcome, Stage

__all__ = [
    "ExtensionRegistry",
    "HandlerOutcome",
    "Stage",
]
