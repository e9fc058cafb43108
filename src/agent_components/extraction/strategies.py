"""Built-in extraction strategies.

Each strategy is a `StrategySpec`: a cheap `matcher` deciding whether the
strategy applies to a message and an `extractor` producing a descriptor or
None ("nothing found"). The extractor tries specs by descending priority, so
the defaults below encode the fixed precedence:

1. ``direct_descriptor`` - a nested descriptor under the component metadata key
2. ``flat_type_data``    - sibling ``type``/``data`` metadata keys
3. ``tool_call``         - arguments of the first recognized chart tool call
4. ``fenced_marker``     - first ``chart`` (then ``table``) fenced block in text
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
import copy
import dataclasses
import json
import logging

from agent_components.config.types import FrozenConfig
from agent_components.core.types import ComponentDescriptor, ComponentType, Message
from agent_components.extraction.fenced import decode_fenced_body, find_fenced_body

log = logging.getLogger(__name__)

type Matcher = Callable[[Message], bool]
type Extractor = Callable[[Message, FrozenConfig], ComponentDescriptor | None]


@dataclasses.dataclass(frozen=True, slots=True)
class StrategySpec:
    """A named, prioritized extraction strategy.

    Attributes:
        name: Unique name, reported in diagnostics.
        matcher: Returns True when the strategy is worth running.
        extractor: Produces a descriptor or None. May raise; the extractor
            records the error and moves on.
        priority: Higher runs first; ties are broken by name.
    """

    name: str
    matcher: Matcher
    extractor: Extractor
    priority: int = 0

    def __post_init__(self) -> None:
        """Validate fields at construction time."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("StrategySpec.name must be a non-empty string")
        if not callable(self.matcher) or not callable(self.extractor):
            raise TypeError("StrategySpec.matcher and extractor must be callable")


# --- 1. Direct descriptor ---


def _is_descriptor_shaped(value: object) -> bool:
    return (
        isinstance(value, Mapping)
        and isinstance(value.get("type"), str)
        and "data" in value
    )


def _match_direct(message: Message) -> bool:
    return bool(message.additional_kwargs)


def _extract_direct(
    message: Message, config: FrozenConfig
) -> ComponentDescriptor | None:
    candidate = message.additional_kwargs.get(config.component_key)
    if not _is_descriptor_shaped(candidate):
        return None
    return ComponentDescriptor.from_mapping(candidate)


# --- 2. Flat type/data pair ---


def _match_flat(message: Message) -> bool:
    kwargs = message.additional_kwargs
    return "type" in kwargs and "data" in kwargs


def _extract_flat(
    message: Message,
    config: FrozenConfig,  # noqa: ARG001
) -> ComponentDescriptor | None:
    kwargs = message.additional_kwargs
    component_type = kwargs.get("type")
    data = kwargs.get("data")
    if not isinstance(component_type, str) or not component_type or data is None:
        return None
    return ComponentDescriptor(type=component_type, data=copy.deepcopy(data))


# --- 3. Tool-call payload ---


def _match_tool_call(message: Message) -> bool:
    return bool(message.tool_calls)


def _extract_tool_call(
    message: Message, config: FrozenConfig
) -> ComponentDescriptor | None:
    call = next(
        (c for c in message.tool_calls if c.name in config.chart_tool_names),
        None,
    )
    # First recognized call decides; a call without args yields nothing
    if call is None or call.args is None:
        return None
    return ComponentDescriptor(
        type=ComponentType.CHART.value,
        data=copy.deepcopy(call.args),
        metadata={config.tool_call_id_key: call.id},
    )


# --- 4. Fenced marker in text ---


def _match_fenced(message: Message) -> bool:
    return message.text is not None and "```" in message.text


def _extract_fenced(
    message: Message,
    config: FrozenConfig,  # noqa: ARG001
) -> ComponentDescriptor | None:
    text = message.text
    if text is None:
        return None

    for component_type in (ComponentType.CHART, ComponentType.TABLE):
        body = find_fenced_body(text, component_type.value)
        if body is None:
            continue
        try:
            data = decode_fenced_body(body)
        except (json.JSONDecodeError, RecursionError) as e:
            log.warning("Failed to parse %s data: %s", component_type.value, e)
            continue
        return ComponentDescriptor(type=component_type.value, data=data)
    return None


def default_strategies() -> list[StrategySpec]:
    """Return the built-in strategies in precedence order."""
    return [
        StrategySpec(
            name="direct_descriptor",
            matcher=_match_direct,
            extractor=_extract_direct,
            priority=40,
        ),
        StrategySpec(
            name="flat_type_data",
            matcher=_match_flat,
            extractor=_extract_flat,
            priority=30,
        ),
        StrategySpec(
            name="tool_call",
            matcher=_match_tool_call,
            extractor=_extract_tool_call,
            priority=20,
        ),
        StrategySpec(
            name="fenced_marker",
            matcher=_match_fenced,
            extractor=_extract_fenced,
            priority=10,
        ),
    ]
