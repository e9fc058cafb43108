"""Core configuration data types.

Follows the resolve-once, freeze-then-flow pattern: `ResolvedConfig` carries
audit metadata, `FrozenConfig` is what the extractor and dispatcher consume.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

# --- Source Tracking Types ---

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]

FIELD_ORDER: tuple[str, ...] = (
    "component_key",
    "chart_tool_names",
    "tool_call_id_key",
    "default_image_layout",
    "max_text_size",
    "enable_diagnostics",
)


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources, before freezing.

    This represents the validated, merged result of combining programmatic
    overrides, environment variables, files, and defaults.
    """

    component_key: str
    chart_tool_names: tuple[str, ...]
    tool_call_id_key: str
    default_image_layout: Literal["grid", "carousel"]
    max_text_size: int
    enable_diagnostics: bool

    # Audit metadata - tracks where each field value came from
    origin: SourceMap

    def to_frozen(self) -> "FrozenConfig":
        """Convert to the immutable configuration used by the pipeline."""
        return FrozenConfig(
            component_key=self.component_key,
            chart_tool_names=self.chart_tool_names,
            tool_call_id_key=self.tool_call_id_key,
            default_image_layout=self.default_image_layout,
            max_text_size=self.max_text_size,
            enable_diagnostics=self.enable_diagnostics,
        )

    def with_overrides(self, **overrides: object) -> "ResolvedConfig":
        """Create a new ResolvedConfig with programmatic overrides applied.

        Unknown fields are ignored. Values are not re-validated; use
        `resolve_config(programmatic=...)` when validation matters.
        """
        new_values = self._asdict()
        new_origin = dict(self.origin)

        for field, value in overrides.items():
            if field in FIELD_ORDER:
                new_values[field] = value
                new_origin[field] = "programmatic"

        new_values["origin"] = new_origin
        return ResolvedConfig(**new_values)

    def audit(self) -> str:
        """Return a report showing the origin of each field."""
        lines = []
        for field in FIELD_ORDER:
            if field not in self.origin:
                continue
            origin = self.origin[field]
            value = getattr(self, field)
            if isinstance(value, tuple):
                value = ",".join(value)
            if origin == "env":
                lines.append(f"{field}: env:AGENT_COMPONENTS_{field.upper()}={value}")
            else:
                lines.append(f"{field}: {origin}:{value}")
        return "\n".join(lines)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration handed to the extractor and dispatcher.

    Any attempt to modify this object will raise an exception.
    """

    component_key: str = "component"
    chart_tool_names: tuple[str, ...] = ("render_chart", "create_visualization")
    tool_call_id_key: str = "tool_call_id"
    default_image_layout: Literal["grid", "carousel"] = "grid"
    max_text_size: int = 1_000_000
    enable_diagnostics: bool = False
