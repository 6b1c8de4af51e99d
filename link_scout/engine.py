# File: link_scout/engine.py
"""link_scout.engine: Orchestration layer: пул воркеров, агрегатор и состояние запуска."""

from __future__ import annotations

import asyncio
import time
from enum import Enum
from typing import List, Optional, Sequence

from link_scout.aggregator import Aggregator, ScanReport
from link_scout.config import ScannerConfig, load_config
from link_scout.crawler.extractor import Extractor
from link_scout.crawler.fetcher import Fetcher
from link_scout.crawler.pool import WorkerPool
from link_scout.logger import logger
from link_scout.report.console import ConsoleReporter

__all__ = ["Engine", "ScanState", "start_scan"]


class ScanState(str, Enum):
    """Состояния одного запуска. FINALIZED достигается ровно один раз."""

    COLLECTING_INPUT = "collecting_input"
    JOBS_ENQUEUED = "jobs_enqueued"
    WORKERS_RUNNING = "workers_running"
    ALL_RESULTS_CONSUMED = "all_results_consumed"
    WORKERS_JOINED = "workers_joined"
    FINALIZED = "finalized"


class Engine:
    """Фасад для CLI и тестов: запуск пула, потребление результатов и финализация отчёта."""

    @staticmethod
    def load_config(path: Optional[str]) -> ScannerConfig:
        """Загружает конфиг из YAML/JSON или использует значения по умолчанию."""
        return load_config(path)

    def __init__(
        self,
        config: ScannerConfig,
        reporter: Optional[ConsoleReporter] = None,
        extractor: Optional[Extractor] = None,
    ) -> None:
        self.config = config
        self.reporter = reporter
        self.extractor = extractor
        self.state = ScanState.COLLECTING_INPUT
        self.history: List[ScanState] = [self.state]

    def _advance(self, state: ScanState) -> None:
        logger.debug("Scan state: %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    async def scan(self, urls: Sequence[str]) -> ScanReport:
        """Сканирует все URL и возвращает отсортированный отчёт."""
        if self.state is not ScanState.COLLECTING_INPUT:
            raise RuntimeError(f"Engine already used (state={self.state.value})")
        jobs = tuple(urls)
        aggregator = Aggregator(resolve=self.config.resolve, reporter=self.reporter)
        start = time.monotonic()

        async with Fetcher(self.config) as fetcher:
            pool = WorkerPool(fetcher, workers=self.config.threads, extractor=self.extractor)
            results = pool.start(jobs)
            self._advance(ScanState.JOBS_ENQUEUED)
            if self.reporter is not None:
                self.reporter.scan_started(len(jobs), self.config.threads)
            self._advance(ScanState.WORKERS_RUNNING)
            try:
                for _ in range(len(jobs)):
                    aggregator.consume(await results.get())
                self._advance(ScanState.ALL_RESULTS_CONSUMED)
                await pool.join()
            except asyncio.CancelledError:
                logger.warning("Scan interrupted, stopping %d workers", pool.running)
                await pool.cancel()
                raise
            self._advance(ScanState.WORKERS_JOINED)

        report = aggregator.finalize()
        self._advance(ScanState.FINALIZED)
        logger.info("Scanned %d URL(s) in %.2f s", len(jobs), time.monotonic() - start)
        return report

    def start_scan(self, urls: Sequence[str]) -> ScanReport:
        """Синхронная обёртка над :meth:`scan`."""
        logger.info("Starting scan…")
        return asyncio.run(self.scan(urls))


async def start_scan(
    cfg: ScannerConfig,
    urls: Sequence[str],
    reporter: Optional[ConsoleReporter] = None,
) -> ScanReport:
    """
    Запускает Engine и возвращает ScanReport.

    Parameters
    ----------
    cfg : ScannerConfig
        Конфигурация сканирования.
    urls : Sequence[str]
        Список URL; дубликаты сканируются независимо.
    reporter : ConsoleReporter, optional
        Получает потоковые уведомления об ошибках и новых эндпоинтах.
    """
    return await Engine(cfg, reporter=reporter).scan(urls)
