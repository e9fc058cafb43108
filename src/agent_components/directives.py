"""Block directive rewriting.

Turns the alternate directive syntax ``:::chart{...}:::`` and
``:::table{...}:::`` into fenced markers (a ``chart`` or ``table`` fenced code
block) that the document renderer's code-block handler and the extractor
understand. The payload is copied verbatim; it is never parsed here.
"""

from __future__ import annotations

import logging
import re
from typing import Any

log = logging.getLogger(__name__)

DIRECTIVE_KINDS: tuple[str, ...] = ("chart", "table")

_CLOSE_RE = re.compile(r"\}\s*:::")


def _skip_whitespace(text: str, index: int) -> int:
    while index < len(text) and text[index].isspace():
        index += 1
    return index


def _scan_payload(text: str, index: int) -> tuple[str, int] | None:
    """Locate the payload of a directive whose keyword ends at `index`.

    Returns ``(payload, end)`` where `end` is the index just past the closing
    ``:::``, or None when the text at `index` is not a complete directive.

    Braces are counted outside JSON string literals so nested objects and
    quoted ``}`` characters stay inside the payload. When the braces never
    balance into a closing ``:::``, the shortest span up to the first ``}``
    followed by ``:::`` is used instead.
    """
    brace = _skip_whitespace(text, index)
    if brace >= len(text) or text[brace] != "{":
        return None
    start = brace + 1

    depth = 1
    in_string = False
    escaped = False
    for pos in range(start, len(text)):
        char = text[pos]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                close = _skip_whitespace(text, pos + 1)
                if text.startswith(":::", close):
                    return text[start:pos], close + 3
                break

    match = _CLOSE_RE.search(text, start)
    if match is None:
        return None
    return text[start : match.start()], match.end()


def _token_pattern(kinds: tuple[str, ...]) -> re.Pattern[str]:
    """Match a directive opener or the header of an emitted fenced marker."""
    names = "|".join(re.escape(k) for k in sorted(kinds, key=len, reverse=True))
    return re.compile(rf":::(?P<directive>{names})|```(?P<fence>{names})\n")


def _rewrite(text: str, pattern: re.Pattern[str]) -> tuple[str, dict[str, int]]:
    """Single left-to-right pass over every directive kind at once.

    Fenced markers already in the text are copied through untouched, so
    directive-like text inside a payload is never rewritten.
    """
    parts: list[str] = []
    replaced: dict[str, int] = {}
    pos = 0
    while (match := pattern.search(text, pos)) is not None:
        if match.group("fence") is not None:
            close = text.find("\n```", match.end() - 1)
            end = len(text) if close == -1 else close + 4
            parts.append(text[pos:end])
            pos = end
            continue

        kind = match.group("directive")
        found = _scan_payload(text, match.end())
        if found is None:
            parts.append(text[pos : match.end()])
            pos = match.end()
            continue
        payload, end = found
        parts.append(text[pos : match.start()])
        parts.append(f"```{kind}\n{payload}\n```")
        replaced[kind] = replaced.get(kind, 0) + 1
        pos = end
    parts.append(text[pos:])
    return "".join(parts), replaced


class DirectivePreprocessor:
    """Rewrites block directives into fenced markers.

    Attributes:
        kinds: Directive keywords handled, all substituted in one scan.
    """

    def __init__(self, kinds: tuple[str, ...] = DIRECTIVE_KINDS) -> None:
        """Initialize with the directive keywords to rewrite."""
        self.kinds = kinds
        self._pattern = _token_pattern(kinds)

    def rewrite(self, text: Any) -> Any:
        """Return `text` with every complete directive replaced.

        Text without directives, and non-string input, is returned unchanged.
        Payloads are copied verbatim and fenced markers are skipped, so
        rewriting the output again is a no-op.
        """
        if not isinstance(text, str) or ":::" not in text or not self.kinds:
            return text

        text, replaced = _rewrite(text, self._pattern)
        for kind, count in replaced.items():
            log.debug("Rewrote %d '%s' directive(s)", count, kind)
        return text


_DEFAULT_PREPROCESSOR = DirectivePreprocessor()


def rewrite_directives(text: Any) -> Any:
    """Rewrite chart and table directives with the default preprocessor."""
    return _DEFAULT_PREPROCESSOR.rewrite(text)
