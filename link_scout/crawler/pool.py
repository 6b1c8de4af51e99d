# link_scout/crawler/pool.py
"""
Bounded worker pool: N tasks drain a shared job queue and emit one ScanResult per job.
"""
from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence

from link_scout.config import DEFAULT_THREADS
from link_scout.crawler.extractor import Extractor
from link_scout.crawler.fetcher import Fetcher
from link_scout.crawler.models import ScanResult
from link_scout.logger import logger

__all__ = ("WorkerPool",)


class WorkerPool:
    """Fetch→extract workers sharing one fetcher and one compiled pattern."""

    def __init__(
        self,
        fetcher: Fetcher,
        workers: int = DEFAULT_THREADS,
        extractor: Optional[Extractor] = None,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self.fetcher = fetcher
        self.workers = workers
        self.extractor = extractor or Extractor()
        self._tasks: List[asyncio.Task[None]] = []

    def start(self, urls: Sequence[str]) -> asyncio.Queue[ScanResult]:
        """
        Enqueue every URL, then spawn the workers.

        All jobs are in the queue before any worker runs, so an empty queue means
        the work is drained and a worker can exit without waiting.
        """
        if self._tasks:
            raise RuntimeError("WorkerPool already started")
        jobs: asyncio.Queue[str] = asyncio.Queue(maxsize=len(urls))
        for url in urls:
            jobs.put_nowait(url)
        results: asyncio.Queue[ScanResult] = asyncio.Queue(maxsize=len(urls))
        self._tasks = [
            asyncio.create_task(self._worker(n, jobs, results), name=f"link-scout-worker-{n}")
            for n in range(self.workers)
        ]
        logger.debug("Started %d workers for %d jobs", self.workers, len(urls))
        return results

    async def join(self) -> None:
        """Wait until every worker has finished all of its sends."""
        await asyncio.gather(*self._tasks)

    async def cancel(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)

    @property
    def running(self) -> int:
        return sum(1 for t in self._tasks if not t.done())

    async def scan_one(self, url: str) -> ScanResult:
        """Fetch *url* and extract its endpoints. Per-URL failures are returned, not raised."""
        fetched = await self.fetcher.fetch_result(url)
        if not fetched.ok:
            return ScanResult.failed(url, fetched.error)
        return ScanResult(source_url=url, endpoints=tuple(self.extractor(fetched.body)))

    async def _worker(
        self,
        worker_id: int,
        jobs: asyncio.Queue[str],
        results: asyncio.Queue[ScanResult],
    ) -> None:
        while True:
            try:
                url = jobs.get_nowait()
            except asyncio.QueueEmpty:
                logger.debug("Worker %d: queue drained", worker_id)
                return
            try:
                result = await self.scan_one(url)
            except Exception as exc:
                # the aggregator counts results, so a job must never vanish
                logger.exception("Worker %d: unexpected error on %s", worker_id, url)
                result = ScanResult.failed(url, exc)
            await results.put(result)
            jobs.task_done()
