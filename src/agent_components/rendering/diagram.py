"""Asynchronous diagram rendering with last-write-wins semantics.

The diagram engine itself is external; `DiagramRenderTarget` owns the state of
one render site: every render gets a fresh process-unique id, results of
renders superseded by newer input are dropped, and engine errors become a
`RenderFailure` value shown in place of the diagram.
"""

from __future__ import annotations

import dataclasses
import itertools
import logging
import time
import typing
from typing import Protocol, runtime_checkable

from agent_components.rendering.engine import EngineInitializer

log = logging.getLogger(__name__)

_render_counter = itertools.count(1)


def next_render_id(prefix: str = "diagram") -> str:
    """Return an identifier unique within this process."""
    return f"{prefix}-{time.time_ns()}-{next(_render_counter)}"


@runtime_checkable
class DiagramEngine(Protocol):
    """External diagram engine."""

    async def render(self, render_id: str, source: str) -> str:
        """Render `source` into SVG markup for the target `render_id`."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class RenderedDiagram:
    """Successful diagram render."""

    render_id: str
    svg: str
    source: str
    kind: typing.Literal["rendered"] = "rendered"


@dataclasses.dataclass(frozen=True, slots=True)
class RenderFailure:
    """Engine error shown inline, with the source kept for inspection."""

    message: str
    source: str
    kind: typing.Literal["failure"] = "failure"


type DiagramResult = RenderedDiagram | RenderFailure


class DiagramRenderTarget:
    """State of one diagram render site.

    Attributes:
        source: The most recent input passed to `render()`.
        current: Result for `source`, or None before the first completion.
    """

    def __init__(
        self,
        engine: DiagramEngine,
        initializer: EngineInitializer | None = None,
    ) -> None:
        """Initialize with an engine and its shared one-time initializer."""
        self.engine = engine
        self.initializer = initializer
        self.source: str | None = None
        self.current: DiagramResult | None = None
        self._generation = 0

    async def render(self, source: str) -> DiagramResult | None:
        """Render `source` and make it the current result.

        Returns:
            The result, or None when `source` is empty or when a newer
            `render()` call started before this one finished (stale result,
            discarded).
        """
        self._generation += 1
        generation = self._generation
        self.source = source
        if not source:
            self.current = None
            return None

        render_id = next_render_id()
        try:
            if self.initializer is not None:
                self.initializer.ensure_initialized()
            svg = await self.engine.render(render_id, source)
            result: DiagramResult = RenderedDiagram(
                render_id=render_id, svg=svg, source=source
            )
        except Exception as e:
            log.error("Diagram rendering error: %s", e)
            result = RenderFailure(message=str(e) or type(e).__name__, source=source)

        if generation != self._generation:
            log.debug("Discarding stale diagram render %s", render_id)
            return None
        self.current = result
        return result
