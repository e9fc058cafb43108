"""Renderable component extraction and dispatch for chat-agent messages.

Typical flow:

    text = rewrite_directives(text)               # ":::chart{...}:::" -> fenced marker
    descriptor = extract_component(message)       # one descriptor or None
    if descriptor is not None:
        obligation = resolve_render_obligation(descriptor)
"""

import importlib.metadata
import logging

from agent_components.config import (
    FrozenConfig,
    ResolvedConfig,
    config_scope,
    resolve_config,
    resolve_frozen,
)
from agent_components.core.obligations import (
    ChartObligation,
    FileObligation,
    ImageLayout,
    ImageObligation,
    ImageRecord,
    RenderObligation,
    TableObligation,
    UnknownObligation,
    format_file_size,
)
from agent_components.core.types import (
    ComponentDescriptor,
    ComponentType,
    Message,
    ToolCall,
    Violation,
)
from agent_components.directives import DirectivePreprocessor, rewrite_directives
from agent_components.dispatch import ComponentDispatcher, resolve_render_obligation
from agent_components.exceptions import AgentComponentsError, ConfigurationError
from agent_components.extraction import (
    ComponentConfigExtractor,
    ExtractionDiagnostics,
    ExtractionOutcome,
    StrategySpec,
    default_strategies,
    extract_component,
)
from agent_components.telemetry import (
    InMemoryReporter,
    TelemetryContext,
    TelemetryReporter,
)

try:
    __version__ = importlib.metadata.version("agent-components")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Null handler so consuming apps without logging config see no warnings
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Pipeline
    "DirectivePreprocessor",
    "rewrite_directives",
    "ComponentConfigExtractor",
    "extract_component",
    "ComponentDispatcher",
    "resolve_render_obligation",
    # Extraction customization
    "StrategySpec",
    "default_strategies",
    "ExtractionDiagnostics",
    "ExtractionOutcome",
    # Core types
    "Message",
    "ToolCall",
    "ComponentDescriptor",
    "ComponentType",
    "Violation",
    # Obligations
    "RenderObligation",
    "ChartObligation",
    "TableObligation",
    "ImageObligation",
    "ImageRecord",
    "ImageLayout",
    "FileObligation",
    "UnknownObligation",
    "format_file_size",
    # Configuration
    "resolve_config",
    "resolve_frozen",
    "config_scope",
    "ResolvedConfig",
    "FrozenConfig",
    # Telemetry
    "TelemetryContext",
    "TelemetryReporter",
    "InMemoryReporter",
    # Exceptions
    "AgentComponentsError",
    "ConfigurationError",
]
