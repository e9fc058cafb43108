"""Core data types read and produced by the component pipeline.

`Message` is a read-only view over whatever message object the caller holds
(plain mappings or SDK message objects). `ComponentDescriptor` is the
immutable, normalized output of extraction and the input of dispatch.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import copy
import dataclasses
from enum import StrEnum
from types import MappingProxyType
import typing

# --- Minimal guard helpers ---

T = typing.TypeVar("T")


def _freeze_mapping(
    m: dict[str, T] | Mapping[str, T] | None,
) -> Mapping[str, T] | None:
    """Return an immutable mapping view or None.

    Accepts dict or Mapping; wraps dicts in MappingProxyType.
    """
    if m is None or isinstance(m, MappingProxyType):
        return m
    return MappingProxyType(dict(m))


def _field(obj: typing.Any, name: str, default: typing.Any = None) -> typing.Any:
    """Read `name` from a mapping key or an attribute, whichever exists."""
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


class ComponentType(StrEnum):
    """Component types known to the dispatcher, plus the open `custom` value."""

    CHART = "chart"
    TABLE = "table"
    IMAGE = "image"
    FILE = "file"
    CUSTOM = "custom"


@dataclasses.dataclass(frozen=True, slots=True)
class Violation:
    """A record-only shape problem found while normalizing a descriptor."""

    message: str
    severity: typing.Literal["info", "warning"] = "warning"


# --- Message view ---


@dataclasses.dataclass(frozen=True, slots=True)
class ToolCall:
    """A single tool invocation attached to a message."""

    name: str | None
    args: typing.Any = None
    id: str | None = None

    @classmethod
    def from_any(cls, raw: typing.Any) -> ToolCall | None:
        """Normalize a mapping or attribute-bearing object; None if neither."""
        if raw is None or isinstance(raw, str | bytes | int | float | bool):
            return None
        name = _field(raw, "name")
        return cls(
            name=name if isinstance(name, str) else None,
            args=_field(raw, "args"),
            id=_field(raw, "id"),
        )


@dataclasses.dataclass(frozen=True, slots=True)
class Message:
    """Read-only view of a chat message.

    Attributes:
        content: Text content, or any non-string payload (multimodal parts).
        additional_kwargs: Arbitrary metadata mapping.
        tool_calls: Tool invocations in their original order.
    """

    content: typing.Any = ""
    additional_kwargs: Mapping[str, typing.Any] = dataclasses.field(
        default_factory=lambda: MappingProxyType({})
    )
    tool_calls: tuple[ToolCall, ...] = ()

    @classmethod
    def from_any(cls, raw: typing.Any) -> Message:
        """Build a view from a mapping, an SDK message object, or a Message.

        The source object is only read. Missing fields fall back to defaults.
        """
        if isinstance(raw, Message):
            return raw

        kwargs = _field(raw, "additional_kwargs")
        metadata = _freeze_mapping(kwargs if isinstance(kwargs, Mapping) else {})

        raw_calls = _field(raw, "tool_calls")
        calls: tuple[ToolCall, ...] = ()
        if isinstance(raw_calls, Sequence) and not isinstance(raw_calls, str):
            calls = tuple(
                call
                for call in (ToolCall.from_any(item) for item in raw_calls)
                if call is not None
            )

        content = _field(raw, "content", "")
        return cls(
            content="" if content is None else content,
            additional_kwargs=metadata or MappingProxyType({}),
            tool_calls=calls,
        )

    @property
    def text(self) -> str | None:
        """The content when it is a string, otherwise None."""
        return self.content if isinstance(self.content, str) else None


# --- Component descriptor ---


@dataclasses.dataclass(frozen=True, slots=True)
class ComponentDescriptor:
    """Normalized description of one renderable component.

    Attributes:
        type: Declared component type, kept verbatim so that types unknown to
            the dispatcher survive for diagnostic display.
        data: Type-dependent payload.
        metadata: Optional auxiliary values, e.g. the originating tool call id.
    """

    type: str
    data: typing.Any = None
    metadata: Mapping[str, typing.Any] | None = None

    def __post_init__(self) -> None:
        """Freeze metadata so the descriptor stays a pure value."""
        if not isinstance(self.type, str):
            raise TypeError("type: must be str")
        object.__setattr__(self, "metadata", _freeze_mapping(self.metadata))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, typing.Any]) -> ComponentDescriptor:
        """Build a descriptor from its JSON shape `{type, data, metadata?}`.

        `data` is deep-copied so the descriptor never aliases caller state.

        Raises:
            KeyError: If `type` is missing.
            TypeError: If `type` is not a string.
        """
        metadata = raw.get("metadata")
        return cls(
            type=raw["type"],
            data=copy.deepcopy(raw.get("data")),
            metadata=dict(metadata) if isinstance(metadata, Mapping) else None,
        )

    @property
    def component_type(self) -> ComponentType | None:
        """The known `ComponentType` for `type`, or None."""
        try:
            return ComponentType(self.type)
        except ValueError:
            return None

    def to_dict(self) -> dict[str, typing.Any]:
        """Render the JSON shape; `metadata` is omitted when absent."""
        out: dict[str, typing.Any] = {"type": self.type, "data": self.data}
        if self.metadata is not None:
            out["metadata"] = dict(self.metadata)
        return out
