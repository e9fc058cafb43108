"""Render obligations: what an external renderer must draw, per component type.

A closed variant over chart, table, image, file and unknown. Every arm is a
frozen dataclass carrying a `kind` tag and the record-only `violations` found
while normalizing the descriptor data.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
from enum import StrEnum
import json
import typing

from agent_components.core.types import ComponentDescriptor, Violation


def format_file_size(size: int | float) -> str:
    """Format a byte count as B, KB or MB with one decimal above bytes."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


class ImageLayout(StrEnum):
    """Presentation of an image set."""

    SINGLE = "single"
    GRID = "grid"
    CAROUSEL = "carousel"


@dataclasses.dataclass(frozen=True, slots=True)
class ImageRecord:
    """One image to display."""

    url: str
    alt: str | None = None
    caption: str | None = None

    def label(self, index: int = 0) -> str:
        """Accessible label, falling back to a positional name."""
        return self.alt or f"Image {index + 1}"


@dataclasses.dataclass(frozen=True, slots=True)
class ChartObligation:
    """Chart to hand to the charting engine.

    Attributes:
        option: Engine option object found under the `option` key, if any.
        data: The raw descriptor data, untouched.
    """

    option: Mapping[str, typing.Any] | None
    data: typing.Any = None
    violations: tuple[Violation, ...] = ()
    kind: typing.Literal["chart"] = "chart"


@dataclasses.dataclass(frozen=True, slots=True)
class TableObligation:
    """Table with display headers and rows of cell values."""

    headers: tuple[str, ...] = ()
    rows: tuple[tuple[typing.Any, ...], ...] = ()
    violations: tuple[Violation, ...] = ()
    kind: typing.Literal["table"] = "table"


@dataclasses.dataclass(frozen=True, slots=True)
class ImageObligation:
    """One or more images with a resolved layout."""

    images: tuple[ImageRecord, ...]
    layout: ImageLayout = ImageLayout.SINGLE
    caption: str | None = None
    violations: tuple[Violation, ...] = ()
    kind: typing.Literal["image"] = "image"

    @property
    def grid_columns(self) -> int:
        """Column count used for the grid layout."""
        count = len(self.images)
        if count <= 1:
            return 1
        if count == 2 or count == 4:
            return 2
        return 3


@dataclasses.dataclass(frozen=True, slots=True)
class FileObligation:
    """Downloadable file card."""

    name: str
    size: int | float | None = None
    url: str | None = None
    violations: tuple[Violation, ...] = ()
    kind: typing.Literal["file"] = "file"

    @property
    def display_size(self) -> str | None:
        """Human readable size, or None when no size was given."""
        if self.size is None:
            return None
        return format_file_size(self.size)


@dataclasses.dataclass(frozen=True, slots=True)
class UnknownObligation:
    """Terminal state for descriptor types the dispatcher does not know."""

    descriptor: ComponentDescriptor
    violations: tuple[Violation, ...] = ()
    kind: typing.Literal["unknown"] = "unknown"

    def describe(self) -> str:
        """Diagnostic text shown in place of the component."""
        try:
            body = json.dumps(self.descriptor.data, indent=2, ensure_ascii=False)
        except (TypeError, ValueError):
            body = repr(self.descriptor.data)
        return f"Unknown component type: {self.descriptor.type}\n{body}"


type RenderObligation = (
    ChartObligation
    | TableObligation
    | ImageObligation
    | FileObligation
    | UnknownObligation
)
