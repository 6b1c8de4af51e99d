# link_scout/crawler/models.py
"""
Data models passed between the fetcher, the worker pool and the aggregator.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from link_scout.errors import FetchError


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Outcome of a single GET: either the raw body or the classified error."""

    source_url: str
    body: Optional[bytes] = None
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class ScanResult:
    """One per input URL: the endpoints found in its body, or the error that stopped it."""

    source_url: str
    endpoints: Tuple[str, ...] = ()
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, source_url: str, error: Exception) -> ScanResult:
        return cls(source_url=source_url, endpoints=(), error=error)
