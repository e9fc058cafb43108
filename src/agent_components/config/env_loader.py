"""Environment variable configuration loading.

Reads AGENT_COMPONENTS_* variables and coerces them through the settings
schema.
"""

import os
from typing import Any

from pydantic import ValidationError

from agent_components.exceptions import ConfigurationError

from .schema import ComponentSettings
from .types import FIELD_ORDER

ENV_PREFIX = "AGENT_COMPONENTS_"


class EnvironmentConfigLoader:
    """Loads configuration from AGENT_COMPONENTS_* environment variables."""

    def load_env_config(self) -> dict[str, Any]:
        """Load configuration values that are explicitly set in the environment.

        Returns:
            Dictionary of coerced values; only fields actually set are included.

        Raises:
            ConfigurationError: If environment variables contain invalid values.
        """
        env_values = {
            field: os.environ[f"{ENV_PREFIX}{field.upper()}"]
            for field in FIELD_ORDER
            if f"{ENV_PREFIX}{field.upper()}" in os.environ
        }
        if not env_values:
            return {}

        try:
            settings = ComponentSettings(**env_values)
        except ValidationError as e:
            env_var_list = [
                f"{ENV_PREFIX}{field.upper()}={value}"
                for field, value in env_values.items()
            ]
            raise ConfigurationError(
                f"Invalid environment variable values: {', '.join(env_var_list)}. "
                f"Error: {e}"
            ) from e

        return {field: getattr(settings, field) for field in env_values}
