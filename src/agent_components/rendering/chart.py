"""Chart engine handle lifecycle for one mounted visual region."""

from __future__ import annotations

from collections.abc import Mapping
import json
import logging
from types import TracebackType
from typing import Any, Protocol, Self
import uuid

from agent_components.core.obligations import ChartObligation
from agent_components.rendering.diagram import RenderFailure

log = logging.getLogger(__name__)


class ChartHandle(Protocol):
    """Native chart instance created by the charting engine."""

    def set_option(self, option: Mapping[str, Any]) -> None: ...  # noqa: D102
    def resize(self) -> None: ...  # noqa: D102
    def dispose(self) -> None: ...  # noqa: D102


class ChartEngine(Protocol):
    """Charting engine able to create handles bound to a region."""

    def init(self, region_id: str) -> ChartHandle: ...  # noqa: D102


class ChartRegion:
    """Owns at most one chart handle for a visual region.

    Showing new content disposes the previous handle before creating the next
    one, and closing the region disposes whatever is left.
    """

    def __init__(self, engine: ChartEngine, region_id: str = "") -> None:
        """Initialize an unmounted region."""
        self.engine = engine
        self.region_id = region_id or f"chart-{uuid.uuid4().hex[:12]}"
        self._handle: ChartHandle | None = None

    @property
    def mounted(self) -> bool:
        """Whether a live handle exists."""
        return self._handle is not None

    def show(self, chart: ChartObligation | Mapping[str, Any]) -> RenderFailure | None:
        """Draw a chart obligation or a bare option object.

        Returns:
            None on success or when there is no option to draw, otherwise a
            `RenderFailure` describing the engine error.
        """
        option = chart.option if isinstance(chart, ChartObligation) else chart
        self.reset()
        if not option:
            return None
        try:
            self._handle = self.engine.init(self.region_id)
            self._handle.set_option(option)
        except Exception as e:
            log.error("Chart rendering error in %s: %s", self.region_id, e)
            self.reset()
            return RenderFailure(
                message=str(e) or type(e).__name__,
                source=json.dumps(option, default=str, ensure_ascii=False),
            )
        return None

    def resize(self) -> None:
        """Forward a container resize to the live handle."""
        if self._handle is not None:
            self._handle.resize()

    def reset(self) -> None:
        """Dispose the live handle, if any."""
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.dispose()
        except Exception as e:
            log.warning("Disposing chart handle in %s failed: %s", self.region_id, e)

    close = reset

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
