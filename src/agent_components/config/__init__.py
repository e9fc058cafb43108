"""Configuration management for agent components.

Resolve-once, freeze-then-flow:
- ResolvedConfig: post-resolution configuration with audit metadata
- FrozenConfig: immutable configuration consumed by extractor and dispatcher
- SourceMap: origin of every configuration value
"""

from .api import config_scope, resolve_config, resolve_frozen
from .audit import SourceTracker
from .file_loader import ConfigFileError, FileConfigLoader
from .resolver import ConfigResolver
from .schema import DEFAULT_CHART_TOOL_NAMES, ComponentSettings
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

__all__ = [  # noqa: RUF022
    # Main API
    "resolve_config",
    "resolve_frozen",
    "config_scope",
    # Core types
    "ResolvedConfig",
    "FrozenConfig",
    "SourceMap",
    "ConfigOrigin",
    # Advanced usage
    "ComponentSettings",
    "DEFAULT_CHART_TOOL_NAMES",
    "ConfigResolver",
    "FileConfigLoader",
    "ConfigFileError",
    "SourceTracker",
]
