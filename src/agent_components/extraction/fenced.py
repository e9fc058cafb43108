"""Fenced marker scanning.

A fenced marker is a fenced code block tagged ``chart`` or ``table`` whose body
is a JSON document. Only the first block carrying a tag is ever considered.
"""

from __future__ import annotations

from functools import cache
import json
import re
from typing import Any


@cache
def _fence_pattern(tag: str) -> re.Pattern[str]:
    return re.compile(r"```" + re.escape(tag) + r"\n([\s\S]*?)\n```")


def find_fenced_body(text: str, tag: str) -> str | None:
    """Return the body of the first fenced block tagged `tag`, or None."""
    match = _fence_pattern(tag).search(text)
    return match.group(1) if match else None


def decode_fenced_body(body: str) -> Any:
    """Decode a fenced marker body as JSON.

    Raises:
        json.JSONDecodeError: If the body is not a JSON document.
        RecursionError: If the body nests deeper than the decoder allows.
    """
    return json.loads(body)
