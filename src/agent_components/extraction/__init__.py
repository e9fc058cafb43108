"""Component descriptor extraction."""

from .extractor import (
    ComponentConfigExtractor,
    ExtractionDiagnostics,
    ExtractionOutcome,
    extract_component,
)
from .fenced import decode_fenced_body, find_fenced_body
from .strategies import StrategySpec, default_strategies

__all__ = [  # noqa: RUF022
    "ComponentConfigExtractor",
    "ExtractionDiagnostics",
    "ExtractionOutcome",
    "extract_component",
    "StrategySpec",
    "default_strategies",
    "find_fenced_body",
    "decode_fenced_body",
]
