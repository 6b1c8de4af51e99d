# link_scout/crawler/fetcher.py
"""
Fetcher module: one GET per URL with a fixed User-Agent, a timeout and permissive TLS.

Every failure is raised as a :class:`~link_scout.errors.FetchError` subclass so the
worker pool can report it per URL without touching sibling jobs. There is no retry.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout, InvalidURL, TCPConnector
from yarl import URL

from link_scout.config import ScannerConfig
from link_scout.crawler.models import FetchResult
from link_scout.errors import (
    BodyReadError,
    FetchError,
    NonOKStatus,
    RequestConstructionError,
    TransportError,
)
from link_scout.logger import logger

__all__ = ("Fetcher",)

_SCHEMES = ("http", "https")


class Fetcher:
    """Shared HTTP client for the whole run. Safe to use from many worker tasks."""

    def __init__(self, config: ScannerConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                connector=TCPConnector(ssl=self.config.verify_tls),
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str) -> bytes:
        """
        Fetch *url* and return the raw body.

        Raises RequestConstructionError, TransportError, NonOKStatus or BodyReadError.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        target = self._build_url(url)
        try:
            async with self.session.get(target, allow_redirects=self.config.follow_redirects) as resp:
                if resp.status != 200:
                    raise NonOKStatus(url, resp.status)
                try:
                    body = await resp.read()
                except (ClientError, asyncio.TimeoutError) as exc:
                    raise BodyReadError(url, exc) from exc
        except InvalidURL as exc:
            raise RequestConstructionError(url, exc) from exc
        except (ClientError, asyncio.TimeoutError) as exc:
            raise TransportError(url, exc) from exc
        logger.debug("Fetched %s (%d bytes)", url, len(body))
        return body

    async def fetch_result(self, url: str) -> FetchResult:
        """Same as :meth:`fetch`, but per-URL failures come back inside the result."""
        try:
            body = await self.fetch(url)
        except FetchError as exc:
            logger.debug("Fetch failed for %s: %s", url, exc)
            return FetchResult(source_url=url, error=exc)
        return FetchResult(source_url=url, body=body)

    @staticmethod
    def _build_url(url: str) -> URL:
        try:
            target = URL(url)
        except (TypeError, ValueError) as exc:
            raise RequestConstructionError(url, exc) from exc
        if target.scheme not in _SCHEMES or not target.host:
            raise RequestConstructionError(url, f"unsupported URL {url!r}")
        return target
