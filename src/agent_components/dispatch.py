"""Dispatch of component descriptors to render obligations.

Maps a descriptor's declared type to the obligation an external renderer must
fulfil. Shape problems degrade the obligation and are recorded as
`Violation`s; unknown types become `UnknownObligation`. Nothing here raises.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
import logging
from typing import Any

from agent_components.config.types import FrozenConfig
from agent_components.core.obligations import (
    ChartObligation,
    FileObligation,
    ImageLayout,
    ImageObligation,
    ImageRecord,
    RenderObligation,
    TableObligation,
    UnknownObligation,
    format_file_size,
)
from agent_components.core.types import ComponentDescriptor, ComponentType, Violation
from agent_components.telemetry import TelemetryContext, TelemetryContextProtocol

log = logging.getLogger(__name__)

CHART_OPTION_KEY = "option"

__all__ = [
    "CHART_OPTION_KEY",
    "ComponentDispatcher",
    "format_file_size",
    "resolve_render_obligation",
]


def _is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes)


def _optional_str(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


def _coerce_descriptor(
    raw: object,
) -> tuple[ComponentDescriptor, Violation | None]:
    """Normalize dispatch input; a violation means it is not a descriptor."""
    if isinstance(raw, ComponentDescriptor):
        return raw, None
    if isinstance(raw, Mapping):
        try:
            return ComponentDescriptor.from_mapping(raw), None
        except (KeyError, TypeError) as e:
            declared = raw.get("type")
            return (
                ComponentDescriptor(
                    type=declared if isinstance(declared, str) else "",
                    data=raw.get("data"),
                ),
                Violation(f"Malformed component descriptor: {e!r}"),
            )
    return (
        ComponentDescriptor(type="", data=raw),
        Violation("Not a component descriptor"),
    )


class ComponentDispatcher:
    """Resolve descriptors into render obligations."""

    def __init__(
        self,
        config: FrozenConfig | None = None,
        *,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            config: Frozen configuration. Defaults to built-in defaults.
            telemetry: Optional telemetry context; no-op when omitted.
        """
        self.config = config if config is not None else FrozenConfig()
        self._tele = telemetry if telemetry is not None else TelemetryContext()
        self._handlers: dict[
            ComponentType, Callable[[ComponentDescriptor], RenderObligation | None]
        ] = {
            ComponentType.CHART: self._chart,
            ComponentType.TABLE: self._table,
            ComponentType.IMAGE: self._image,
            ComponentType.FILE: self._file,
        }

    def resolve_render_obligation(
        self, descriptor: ComponentDescriptor | Mapping[str, Any]
    ) -> RenderObligation | None:
        """Return the render obligation for `descriptor`.

        Accepts a `ComponentDescriptor` or its JSON shape `{type, data,
        metadata?}`.

        Returns:
            The obligation for the declared type, `UnknownObligation` for types
            outside chart/table/image/file or input that is not a descriptor,
            or None when an image descriptor holds no images (nothing to
            render).
        """
        with self._tele("dispatch"):
            obligation = self._resolve(descriptor)
            self._tele.count(obligation.kind if obligation is not None else "empty")
        return obligation

    def _resolve(
        self, raw: ComponentDescriptor | Mapping[str, Any]
    ) -> RenderObligation | None:
        descriptor, violation = _coerce_descriptor(raw)
        if violation is not None:
            log.warning("Cannot dispatch %s: %s", type(raw).__name__, violation.message)
            return UnknownObligation(descriptor=descriptor, violations=(violation,))

        handler = self._handlers.get(descriptor.component_type)  # type: ignore[arg-type]
        if handler is None:
            log.debug("Unknown component type %r", descriptor.type)
            return UnknownObligation(descriptor=descriptor)
        try:
            return handler(descriptor)
        except Exception as e:
            log.error(
                "Dispatch of '%s' descriptor failed: %s",
                descriptor.type,
                e,
                exc_info=True,
            )
            return UnknownObligation(
                descriptor=descriptor,
                violations=(Violation(f"Dispatch failed: {e}"),),
            )

    # --- Per-type handlers ---

    def _chart(self, descriptor: ComponentDescriptor) -> ChartObligation:
        data = descriptor.data
        if not isinstance(data, Mapping):
            return ChartObligation(
                option=None,
                data=data,
                violations=(Violation("Chart data is not an object"),),
            )
        # Wrapped `{"option": {...}}` or a bare option object (fenced markers)
        option = data.get(CHART_OPTION_KEY)
        return ChartObligation(
            option=option if isinstance(option, Mapping) else data,
            data=data,
        )

    def _table(self, descriptor: ComponentDescriptor) -> TableObligation:
        data = descriptor.data if isinstance(descriptor.data, Mapping) else {}
        violations: list[Violation] = []

        raw_headers = data.get("headers")
        headers: tuple[str, ...] = ()
        if _is_sequence(raw_headers):
            headers = tuple(str(h) for h in raw_headers)
        else:
            violations.append(Violation("Table is missing 'headers'"))

        raw_rows = data.get("rows")
        rows: list[tuple[Any, ...]] = []
        if _is_sequence(raw_rows):
            for index, row in enumerate(raw_rows):
                if _is_sequence(row):
                    rows.append(tuple(row))
                else:
                    violations.append(Violation(f"Table row {index} is not a sequence"))
        else:
            violations.append(Violation("Table is missing 'rows'"))

        return TableObligation(
            headers=headers, rows=tuple(rows), violations=tuple(violations)
        )

    def _image(self, descriptor: ComponentDescriptor) -> ImageObligation | None:
        data = descriptor.data if isinstance(descriptor.data, Mapping) else {}
        violations: list[Violation] = []

        raw_images = data.get("images")
        if _is_sequence(raw_images):
            candidates = list(raw_images)
            set_caption = _optional_str(data.get("caption"))
        elif data.get("url"):
            candidates = [
                {"url": data["url"], "alt": data.get("alt"), "caption": data.get("caption")}
            ]
            set_caption = None
        else:
            candidates = []
            set_caption = None

        images: list[ImageRecord] = []
        for index, item in enumerate(candidates):
            url = item.get("url") if isinstance(item, Mapping) else None
            if not isinstance(url, str) or not url:
                violations.append(Violation(f"Image {index} has no url"))
                continue
            images.append(
                ImageRecord(
                    url=url,
                    alt=_optional_str(item.get("alt")),
                    caption=_optional_str(item.get("caption")),
                )
            )

        if not images:
            log.debug("Image descriptor without images; nothing to render")
            return None

        if len(images) == 1:
            layout = ImageLayout.SINGLE
        else:
            requested = data.get("layout")
            try:
                layout = ImageLayout(requested or self.config.default_image_layout)
            except ValueError:
                violations.append(Violation(f"Unknown image layout {requested!r}"))
                layout = ImageLayout(self.config.default_image_layout)
            if layout is ImageLayout.SINGLE:
                layout = ImageLayout(self.config.default_image_layout)

        return ImageObligation(
            images=tuple(images),
            layout=layout,
            caption=set_caption,
            violations=tuple(violations),
        )

    def _file(self, descriptor: ComponentDescriptor) -> FileObligation:
        data = descriptor.data if isinstance(descriptor.data, Mapping) else {}
        violations: list[Violation] = []

        name = data.get("name")
        if not isinstance(name, str) or not name:
            violations.append(Violation("File is missing 'name'"))
            name = ""

        size = data.get("size")
        if isinstance(size, bool) or not isinstance(size, int | float) or size < 0:
            if size is not None:
                violations.append(Violation(f"Ignoring invalid file size {size!r}"))
            size = None

        return FileObligation(
            name=name,
            size=size,
            url=_optional_str(data.get("url")),
            violations=tuple(violations),
        )


_DEFAULT_DISPATCHER = ComponentDispatcher()


def resolve_render_obligation(
    descriptor: ComponentDescriptor | Mapping[str, Any],
) -> RenderObligation | None:
    """Resolve `descriptor` with the default dispatcher."""
    return _DEFAULT_DISPATCHER.resolve_render_obligation(descriptor)
