"""Contracts and lifecycle helpers for external renderers.

Pixel rendering is delegated to external diagram, charting and typesetting
engines. This package defines the interfaces they are driven through and the
state each render site keeps.
"""

from .blocks import (
    BlockError,
    BlockRoute,
    CodeBlock,
    ComponentBlock,
    DiagramBlock,
    InlineCode,
    classify_code_block,
)
from .chart import ChartEngine, ChartHandle, ChartRegion
from .diagram import (
    DiagramEngine,
    DiagramRenderTarget,
    DiagramResult,
    RenderedDiagram,
    RenderFailure,
    next_render_id,
)
from .engine import DIAGRAM_ENGINE_DEFAULTS, EngineInitializer, default_diagram_options

__all__ = [  # noqa: RUF022
    # Code block routing
    "classify_code_block",
    "BlockRoute",
    "InlineCode",
    "CodeBlock",
    "DiagramBlock",
    "ComponentBlock",
    "BlockError",
    # Diagrams
    "DiagramEngine",
    "DiagramRenderTarget",
    "DiagramResult",
    "RenderedDiagram",
    "RenderFailure",
    "next_render_id",
    # Charts
    "ChartEngine",
    "ChartHandle",
    "ChartRegion",
    # Engine setup
    "EngineInitializer",
    "DIAGRAM_ENGINE_DEFAULTS",
    "default_diagram_options",
]
