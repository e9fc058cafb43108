"""Component descriptor extraction from chat messages.

`ComponentConfigExtractor` applies its strategies in priority order and returns
the first descriptor found. Strategy failures are recorded and logged, never
raised, so a message always yields either one descriptor or None.
"""

from __future__ import annotations

from collections.abc import Iterable
import dataclasses
import logging
import time
from typing import Any

from agent_components.config.types import FrozenConfig
from agent_components.core.types import ComponentDescriptor, Message
from agent_components.extraction.strategies import StrategySpec, default_strategies
from agent_components.telemetry import TelemetryContext, TelemetryContextProtocol

log = logging.getLogger(__name__)


@dataclasses.dataclass(slots=True)
class ExtractionDiagnostics:
    """What happened while extracting one message."""

    attempted_strategies: list[str] = dataclasses.field(default_factory=list)
    skipped_strategies: list[str] = dataclasses.field(default_factory=list)
    successful_strategy: str | None = None
    strategy_errors: dict[str, str] = dataclasses.field(default_factory=dict)
    flags: set[str] = dataclasses.field(default_factory=set)
    extraction_duration_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Plain, JSON-serializable form."""
        out = dataclasses.asdict(self)
        out["flags"] = sorted(self.flags)
        return out


@dataclasses.dataclass(frozen=True, slots=True)
class ExtractionOutcome:
    """Descriptor (or None) together with its diagnostics."""

    descriptor: ComponentDescriptor | None
    diagnostics: ExtractionDiagnostics


class ComponentConfigExtractor:
    """Extract at most one `ComponentDescriptor` per message.

    Attributes:
        config: Frozen configuration (metadata key, tool names, limits).
        strategies: Strategies in the order they are tried.
    """

    def __init__(
        self,
        config: FrozenConfig | None = None,
        strategies: Iterable[StrategySpec] | None = None,
        *,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            config: Frozen configuration. Defaults to built-in defaults.
            strategies: Optional strategies replacing the built-ins.
            telemetry: Optional telemetry context; no-op when omitted.
        """
        self.config = config if config is not None else FrozenConfig()
        specs = list(strategies) if strategies is not None else default_strategies()
        # Deterministic order: higher priority first, name as tie-breaker
        self.strategies: tuple[StrategySpec, ...] = tuple(
            sorted(specs, key=lambda s: (-s.priority, s.name))
        )
        self._tele = telemetry if telemetry is not None else TelemetryContext()

    def extract(self, message: Any) -> ComponentDescriptor | None:
        """Return the first descriptor found in `message`, or None.

        None means the message carries no component and renders as-is.
        """
        outcome = self.explain(message)
        if self.config.enable_diagnostics:
            log.debug("Extraction diagnostics: %s", outcome.diagnostics.to_dict())
        return outcome.descriptor

    def explain(self, message: Any) -> ExtractionOutcome:
        """Extract a descriptor and report how it was (not) found."""
        start_time = time.perf_counter()
        diagnostics = ExtractionDiagnostics()
        descriptor: ComponentDescriptor | None = None

        with self._tele("extraction"):
            try:
                view = self._prepare(Message.from_any(message), diagnostics)
            except Exception as e:
                log.error("Unreadable message %r: %s", type(message).__name__, e)
                diagnostics.flags.add("unreadable_message")
                view = None

            if view is not None:
                descriptor = self._run_strategies(view, diagnostics)

        diagnostics.extraction_duration_ms = (time.perf_counter() - start_time) * 1000
        return ExtractionOutcome(descriptor=descriptor, diagnostics=diagnostics)

    def _prepare(self, message: Message, diagnostics: ExtractionDiagnostics) -> Message:
        """Truncate oversized text content before scanning."""
        text = message.text
        if text is not None and len(text) > self.config.max_text_size:
            diagnostics.flags.add("truncated_input")
            return dataclasses.replace(
                message, content=text[: self.config.max_text_size]
            )
        return message

    def _run_strategies(
        self, message: Message, diagnostics: ExtractionDiagnostics
    ) -> ComponentDescriptor | None:
        for strategy in self.strategies:
            try:
                if not strategy.matcher(message):
                    diagnostics.skipped_strategies.append(strategy.name)
                    continue
                diagnostics.attempted_strategies.append(strategy.name)
                descriptor = strategy.extractor(message, self.config)
            except Exception as e:
                log.error(
                    "Extraction strategy '%s' failed: %s",
                    strategy.name,
                    e,
                    exc_info=True,
                )
                diagnostics.strategy_errors[strategy.name] = str(e)
                continue

            if descriptor is not None:
                diagnostics.successful_strategy = strategy.name
                self._tele.count(strategy.name)
                log.debug(
                    "Strategy '%s' produced a '%s' descriptor",
                    strategy.name,
                    descriptor.type,
                )
                return descriptor
        return None


def extract_component(
    message: Any, config: FrozenConfig | None = None
) -> ComponentDescriptor | None:
    """Extract a descriptor with the built-in strategies."""
    return ComponentConfigExtractor(config).extract(message)
