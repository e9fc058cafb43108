"""Configuration resolution with precedence handling.

Merges configuration from multiple sources in this order:
Programmatic > Environment > Project file > Defaults
"""

from collections.abc import Mapping
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from agent_components.exceptions import ConfigurationError

from .audit import SourceTracker
from .env_loader import EnvironmentConfigLoader
from .file_loader import FileConfigLoader
from .schema import ComponentSettings
from .types import FIELD_ORDER, ConfigOrigin, ResolvedConfig

log = logging.getLogger(__name__)


class ConfigResolver:
    """Resolves configuration from multiple sources with proper precedence."""

    def __init__(self) -> None:
        """Initialize the configuration resolver."""
        self.file_loader = FileConfigLoader()
        self.env_loader = EnvironmentConfigLoader()

    def resolve(
        self,
        programmatic: Mapping[str, Any] | None = None,
        *,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources with proper precedence.

        Args:
            programmatic: Programmatic overrides (highest precedence)
            project_root: Directory to search for pyproject.toml

        Returns:
            ResolvedConfig with merged values and source tracking.

        Raises:
            ConfigurationError: If validation fails.
            ConfigFileError: If pyproject.toml is malformed.
        """
        source_tracker = SourceTracker()
        merged_config: dict[str, Any] = {}

        def apply(values: Mapping[str, Any], origin: ConfigOrigin) -> None:
            for field, value in values.items():
                if field in merged_config:  # Only override known fields
                    merged_config[field] = value
                    source_tracker.set_origin(field, origin)
                else:
                    log.debug("Ignoring unknown config field %r from %s", field, origin)

        # Step 1: Start with schema defaults (model_construct skips env reading)
        defaults = ComponentSettings.model_construct().to_dict()
        merged_config.update(defaults)
        source_tracker.set_multiple(defaults, "default")

        # Step 2: Project file
        apply(self.file_loader.load_project_config(project_root=project_root), "file")

        # Step 3: Environment variables
        apply(self.env_loader.load_env_config(), "env")

        # Step 4: Programmatic overrides
        if programmatic:
            apply(programmatic, "programmatic")

        # Step 5: Validate the merged result
        try:
            validated = ComponentSettings(**merged_config).to_dict()
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

        return ResolvedConfig(
            **{field: validated[field] for field in FIELD_ORDER},
            origin=source_tracker.get_source_map(),
        )
