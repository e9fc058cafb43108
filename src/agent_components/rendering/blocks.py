"""Routing of the document renderer's code blocks.

Markdown renderers hand every code element to a single handler. This module
decides what each one becomes: a diagram, a chart/table component, a
syntax-highlighted block, or inline code.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
import json
import logging
import typing

from agent_components.core.obligations import RenderObligation
from agent_components.core.types import ComponentDescriptor, ComponentType
from agent_components.dispatch import (
    CHART_OPTION_KEY,
    ComponentDispatcher,
    resolve_render_obligation,
)

log = logging.getLogger(__name__)

DIAGRAM_LANGUAGE = "mermaid"


@dataclasses.dataclass(frozen=True, slots=True)
class InlineCode:
    code: str
    kind: typing.Literal["inline"] = "inline"


@dataclasses.dataclass(frozen=True, slots=True)
class CodeBlock:
    language: str
    code: str
    kind: typing.Literal["code"] = "code"


@dataclasses.dataclass(frozen=True, slots=True)
class DiagramBlock:
    source: str
    kind: typing.Literal["diagram"] = "diagram"


@dataclasses.dataclass(frozen=True, slots=True)
class ComponentBlock:
    descriptor: ComponentDescriptor
    obligation: RenderObligation | None
    kind: typing.Literal["component"] = "component"


@dataclasses.dataclass(frozen=True, slots=True)
class BlockError:
    """A component block whose payload could not be used."""

    message: str
    source: str
    kind: typing.Literal["error"] = "error"


type BlockRoute = InlineCode | CodeBlock | DiagramBlock | ComponentBlock | BlockError


def _strip_final_newline(code: str) -> str:
    return code[:-1] if code.endswith("\n") else code


def _is_empty(value: object) -> bool:
    return not isinstance(value, dict | list) and not value


def classify_code_block(
    language: str | None,
    code: str,
    *,
    inline: bool = False,
    dispatcher: ComponentDispatcher | None = None,
) -> BlockRoute:
    """Decide how a code element is rendered.

    Args:
        language: Fence language tag, if any.
        code: Raw element text.
        inline: True for inline code spans.
        dispatcher: Dispatcher for component blocks; the default when omitted.
    """
    code = _strip_final_newline(code)
    language = (language or "").strip().lower()
    if inline or not language:
        return InlineCode(code=code)
    if language == DIAGRAM_LANGUAGE:
        return DiagramBlock(source=code)
    if language == ComponentType.CHART:
        return _component_block(ComponentType.CHART, code, dispatcher)
    if language == ComponentType.TABLE:
        return _component_block(ComponentType.TABLE, code, dispatcher)
    return CodeBlock(language=language, code=code)


def _component_block(
    component_type: ComponentType,
    code: str,
    dispatcher: ComponentDispatcher | None,
) -> ComponentBlock | BlockError:
    try:
        payload = json.loads(code)
    except (json.JSONDecodeError, RecursionError) as e:
        log.warning("Failed to parse %s block: %s", component_type.value, e)
        return BlockError(
            message=f"Failed to parse {component_type.value} config: {e}", source=code
        )

    if component_type is ComponentType.CHART:
        if _is_empty(payload):
            return BlockError(message="Invalid chart config", source=code)
        data: typing.Any = {CHART_OPTION_KEY: payload}
    else:
        if not (
            isinstance(payload, Mapping)
            and payload.get("headers")
            and payload.get("rows")
        ):
            return BlockError(message="Invalid table data", source=code)
        data = payload

    descriptor = ComponentDescriptor(type=component_type.value, data=data)
    if dispatcher is None:
        obligation = resolve_render_obligation(descriptor)
    else:
        obligation = dispatcher.resolve_render_obligation(descriptor)
    return ComponentBlock(descriptor=descriptor, obligation=obligation)
