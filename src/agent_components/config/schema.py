"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces configuration
values from various sources (environment, files, programmatic) into the correct
types with proper defaults.
"""

from typing import Annotated, Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_CHART_TOOL_NAMES: tuple[str, ...] = ("render_chart", "create_visualization")


class ComponentSettings(BaseSettings):
    """Pydantic settings schema for component extraction and dispatch.

    Integrates with environment variables using the AGENT_COMPONENTS_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="AGENT_COMPONENTS_",
        env_file=None,
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars for forward compatibility
    )

    component_key: str = Field(
        default="component",
        description="Metadata key holding a nested component descriptor",
        min_length=1,
    )

    # NoDecode: env values arrive as raw comma separated strings, not JSON
    chart_tool_names: Annotated[tuple[str, ...], NoDecode] = Field(
        default=DEFAULT_CHART_TOOL_NAMES,
        description="Tool call names whose arguments are chart data",
    )

    tool_call_id_key: str = Field(
        default="tool_call_id",
        description="Descriptor metadata key for the originating tool call id",
        min_length=1,
    )

    default_image_layout: Literal["grid", "carousel"] = Field(
        default="grid",
        description="Layout for multi-image sets that do not request one",
    )

    max_text_size: int = Field(
        default=1_000_000,
        description="Maximum message text length scanned for fenced markers",
        ge=1,
    )

    enable_diagnostics: bool = Field(
        default=False,
        description="Log extraction diagnostics for every message",
    )

    @field_validator("chart_tool_names", mode="before")
    @classmethod
    def parse_tool_names(cls, v: Any) -> tuple[str, ...]:
        """Accept a comma separated string or any sequence of names."""
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, list | tuple | set | frozenset):
            names = tuple(str(name).strip() for name in v if str(name).strip())
            if names:
                return names
        raise ValueError(
            f"Invalid chart_tool_names: {v!r}. Expected a non-empty list of names"
        )

    @field_validator("default_image_layout", mode="before")
    @classmethod
    def normalize_layout(cls, v: Any) -> Any:
        """Lower-case layout names so `GRID` and `grid` are equivalent."""
        return v.strip().lower() if isinstance(v, str) else v

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary suitable for SourceMap annotation.

        Returns:
            Dictionary with field names as keys and resolved values.
        """
        return {
            "component_key": self.component_key,
            "chart_tool_names": self.chart_tool_names,
            "tool_call_id_key": self.tool_call_id_key,
            "default_image_layout": self.default_image_layout,
            "max_text_size": self.max_text_size,
            "enable_diagnostics": self.enable_diagnostics,
        }
