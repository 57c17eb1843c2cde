"""
Extension registry for the keyword-ranking pipeline.

Holds named, ordered lists of stage handlers. Every pipeline stage is
dispatched through ``invoke()``: registered handlers run first, in
registration order, and any of them may end the dispatch early by returning
``HandlerOutcome.STOP``. When nobody stopped, the stage's default strategy
(supplied by the caller) runs last.

A registry is a plain object injected into the orchestrator; there is no
process-wide instance. Registration is not thread-safe: register handlers
once at startup, or serialize registration yourself.

Usage:
    registry = ExtensionRegistry()
    registry.register(Stage.CLEAN_TEXT, spanish_cleaner, replace=True)
    ran = registry.invoke(Stage.CLEAN_TEXT, payload, default=default_cleaner)
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

import structlog

from src.errors import ConfigurationError

logger = structlog.get_logger(__name__)


class HandlerOutcome(str, Enum):
    """What a handler wants the registry to do after it returns."""

    CONTINUE = "continue"
    STOP = "stop"


class Stage:
    """Fixed extension-point names. Custom handlers must bind to these exactly."""

    NEW_TEXT = "new_text"
    CLEAN_TEXT = "clean_text"
    GET_FEATURES = "get_features"
    FILTER_FEATURES = "filter_features"
    BUILD_GRAPH = "build_graph"
    POST_RANKING = "post_ranking"
    RANKING_CLASS = "ranking_class"

    ALL = (
        NEW_TEXT,
        CLEAN_TEXT,
        GET_FEATURES,
        FILTER_FEATURES,
        BUILD_GRAPH,
        POST_RANKING,
        RANKING_CLASS,
    )


Handler = Callable[[Any], "HandlerOutcome | None"]


class ExtensionRegistry:
    """
    Ordered handler lists keyed by stage name.

    Handlers receive the stage payload and may mutate it in place. They
    return ``None`` or ``HandlerOutcome.CONTINUE`` to let dispatch proceed,
    or ``HandlerOutcome.STOP`` to suppress every later handler and the
    default for that call.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    def register(self, stage: str, handler: Handler, replace: bool = False) -> None:
        """
        Append a handler to a stage.

        Args:
            stage: Extension-point name (see ``Stage``).
            handler: Callable taking the stage payload.
            replace: Drop previously registered handlers for the stage first.

        Raises:
            ConfigurationError: If handler is not callable.
        """
        if not callable(handler):
            raise ConfigurationError(f"Invalid handler for stage {stage!r}: {handler!r}")

        if replace:
            self._handlers[stage] = []
        self._handlers.setdefault(stage, []).append(handler)
        logger.debug(
            "Handler registered",
            stage=stage,
            handler=getattr(handler, "__qualname__", repr(handler)),
            replace=replace,
        )

    def unregister(self, stage: str, handler: Handler) -> bool:
        """Remove one handler. Returns False if it was not registered."""
        handlers = self._handlers.get(stage, [])
        if handler not in handlers:
            return False
        handlers.remove(handler)
        return True

    def clear(self, stage: str | None = None) -> None:
        """Drop handlers for one stage, or for every stage when stage is None."""
        if stage is None:
            self._handlers.clear()
        else:
            self._handlers.pop(stage, None)

    def handlers(self, stage: str) -> list[Handler]:
        """Registered handlers for a stage, in invocation order."""
        return list(self._handlers.get(stage, []))

    def copy(self) -> ExtensionRegistry:
        """
        Derive an independent registry with the same handlers.

        Useful to layer per-language overrides on top of a shared base
        registry without mutating the base.
        """
        clone = ExtensionRegistry()
        clone._handlers = {stage: list(hs) for stage, hs in self._handlers.items()}
        return clone

    def __contains__(self, stage: object) -> bool:
        return bool(self._handlers.get(stage))  # type: ignore[arg-type]

    def invoke(
        self,
        stage: str,
        payload: Any,
        default: Handler | None = None,
        required: bool = False,
    ) -> bool:
        """
        Dispatch a stage.

        Args:
            stage: Extension-point name.
            payload: Mutable stage payload passed to every handler.
            default: Strategy run after the handlers unless one stopped.
            required: Fail when nothing at all ran for the stage.

        Returns:
            True if at least one handler (or the default) ran.

        Raises:
            ConfigurationError: If required and nothing ran, or a handler
                returned something other than None/HandlerOutcome.
        """
        called = False

        for handler in self._handlers.get(stage, []):
            called = True
            if self._outcome(stage, handler(payload)) is HandlerOutcome.STOP:
                logger.debug("Stage dispatch stopped by handler", stage=stage)
                return True

        if default is not None:
            called = True
            self._outcome(stage, default(payload))

        if required and not called:
            raise ConfigurationError(f"There is no handler for required stage {stage!r}")

        return called

    @staticmethod
    def _outcome(stage: str, value: Any) -> HandlerOutcome:
        if value is None:
            return HandlerOutcome.CONTINUE
        if isinstance(value, HandlerOutcome):
            return value
        raise ConfigurationError(
            f"Handler for stage {stage!r} returned {value!r}; "
            "expected None or a HandlerOutcome"
        )
