"""Public API for the configuration system.

Entry points: `resolve_config()` and the `config_scope()` context manager that
swaps the resolved configuration for code running inside it.
"""

from collections.abc import Generator, Mapping
from contextlib import contextmanager
import contextvars
from pathlib import Path
from typing import Any

from .resolver import ConfigResolver
from .types import FrozenConfig, ResolvedConfig

# Global resolver instance for efficient reuse
_resolver = ConfigResolver()

# Context variable for ambient configuration during resolution
_ambient_resolved_config: contextvars.ContextVar[ResolvedConfig] = (
    contextvars.ContextVar("agent_components_resolved_config")
)


def resolve_config(
    programmatic: Mapping[str, Any] | None = None,
    *,
    project_root: Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Precedence: Programmatic > Environment > Project file > Defaults. Inside a
    `config_scope()`, the scoped configuration replaces source resolution and
    only programmatic overrides are applied on top of it.

    Args:
        programmatic: Programmatic overrides (highest precedence).
        project_root: Directory to search for pyproject.toml. If None,
            searches current directory and parents.

    Returns:
        ResolvedConfig with merged values and source tracking for audit.

    Raises:
        ConfigurationError: If validation fails.
        ConfigFileError: If pyproject.toml exists but is malformed.

    Example:
        config = resolve_config({"chart_tool_names": ["plot"]})
        extractor = ComponentConfigExtractor(config.to_frozen())
    """
    try:
        ambient_config = _ambient_resolved_config.get()
    except LookupError:
        return _resolver.resolve(programmatic, project_root=project_root)

    if programmatic:
        return ambient_config.with_overrides(**programmatic)
    return ambient_config


def resolve_frozen(
    programmatic: Mapping[str, Any] | None = None,
    *,
    project_root: Path | None = None,
) -> FrozenConfig:
    """Shorthand for `resolve_config(...).to_frozen()`."""
    return resolve_config(programmatic, project_root=project_root).to_frozen()


@contextmanager
def config_scope(config: ResolvedConfig) -> Generator[None]:
    """Temporarily use a different resolved configuration.

    Only `resolve_config()` calls made within the scope are affected; objects
    already holding a FrozenConfig keep it.

    Example:
        with config_scope(resolve_config().with_overrides(max_text_size=10)):
            extractor = ComponentConfigExtractor()
    """
    token = _ambient_resolved_config.set(config)
    try:
        yield
    finally:
        _ambient_resolved_config.reset(token)
