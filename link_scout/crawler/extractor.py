# link_scout/crawler/extractor.py
"""
Endpoint extraction: quoted, path-like string literals found anywhere in a body.

This is a heuristic, not a parser. ``"/api/v1/users?id=1"`` inside a script,
an attribute value or a JSON blob all match the same way.
"""
from __future__ import annotations

import re
from typing import List, Optional, Union

__all__ = ("ENDPOINT_PATTERN", "Extractor", "extract")

# Opening and closing quotes are matched independently of each other.
ENDPOINT_PATTERN: re.Pattern[str] = re.compile(
    r"""(["'])(/[a-zA-Z0-9_?%&=/\-#.()]+)(["'])""",
    re.IGNORECASE,
)


def _as_text(body: Union[bytes, str]) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


def extract(body: Union[bytes, str], pattern: re.Pattern[str] = ENDPOINT_PATTERN) -> List[str]:
    """
    Return the path capture of every non-overlapping match, in order of appearance.

    Duplicates inside one body are kept; deduplication happens in the aggregator.
    """
    return [match.group(2) for match in pattern.finditer(_as_text(body))]


class Extractor:
    """Callable wrapper around one compiled pattern, shared by all workers."""

    def __init__(self, pattern: Optional[re.Pattern[str]] = None) -> None:
        self.pattern = pattern or ENDPOINT_PATTERN

    def __call__(self, body: Union[bytes, str]) -> List[str]:
        return extract(body, self.pattern)

    def __repr__(self) -> str:
        return f"<Extractor pattern={self.pattern.pattern!r}>"
