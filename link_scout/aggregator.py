# File: link_scout/aggregator.py
"""link_scout.aggregator: сбор результатов воркеров в дедуплицированный набор эндпоинтов."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, List, Optional, Set

from link_scout.crawler.models import ScanResult
from link_scout.logger import logger
from link_scout.utils import resolve_endpoint

if TYPE_CHECKING:
    from link_scout.report.console import ConsoleReporter

__all__ = ["EndpointSet", "Aggregator", "ScanReport"]


class EndpointSet:
    """Потокобезопасное множество эндпоинтов. Только растёт."""

    def __init__(self) -> None:
        self._items: Set[str] = set()
        self._lock = threading.Lock()

    def add(self, endpoint: str, on_new: Optional[Callable[[str], Any]] = None) -> bool:
        """
        Добавляет эндпоинт; возвращает True, если он встречен впервые.

        Проверка, вставка и уведомление ``on_new`` выполняются в одной критической
        секции: два воркера с одной строкой не получат два уведомления.
        """
        with self._lock:
            if endpoint in self._items:
                return False
            self._items.add(endpoint)
            if on_new is not None:
                on_new(endpoint)
            return True

    def sorted(self) -> List[str]:
        with self._lock:
            return sorted(self._items)

    def __contains__(self, endpoint: object) -> bool:
        with self._lock:
            return endpoint in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self.sorted())


@dataclass(slots=True)
class ScanReport:
    """Итог запуска: отсортированные уникальные эндпоинты и результаты по каждому URL."""

    endpoints: List[str] = field(default_factory=list)
    results: List[ScanResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.endpoints)

    @property
    def failed(self) -> List[ScanResult]:
        return [r for r in self.results if not r.ok]

    @property
    def succeeded(self) -> List[ScanResult]:
        return [r for r in self.results if r.ok]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "endpoints": list(self.endpoints),
            "sources": [
                {
                    "url": r.source_url,
                    "endpoints": list(r.endpoints),
                    "error": str(r.error) if r.error is not None else None,
                }
                for r in self.results
            ],
        }

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление отчёта."""
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2 if pretty else None)


class Aggregator:
    """Потребляет ScanResult, при необходимости разрешает пути и копит уникальные эндпоинты."""

    def __init__(self, resolve: bool = False, reporter: Optional[ConsoleReporter] = None) -> None:
        self.resolve = resolve
        self.reporter = reporter
        self.endpoints = EndpointSet()
        self.results: List[ScanResult] = []
        self._finalized = False

    @property
    def consumed(self) -> int:
        return len(self.results)

    def consume(self, result: ScanResult) -> None:
        """Обрабатывает результат одного URL."""
        if self._finalized:
            raise RuntimeError("Aggregator already finalized")
        self.results.append(result)

        if not result.ok:
            logger.debug("Error scanning %s: %s", result.source_url, result.error)
            if self.reporter is not None:
                self.reporter.scan_failed(result)
            return

        if not result.endpoints:
            return

        if self.reporter is not None:
            self.reporter.source_started(result.source_url)
        on_new = self.reporter.endpoint_found if self.reporter is not None else None

        for raw in result.endpoints:
            endpoint = resolve_endpoint(result.source_url, raw) if self.resolve else raw
            self.endpoints.add(endpoint, on_new=on_new)

    def finalize(self) -> ScanReport:
        """Сортирует набор и возвращает ScanReport. Вызывается один раз."""
        if self._finalized:
            raise RuntimeError("Aggregator already finalized")
        self._finalized = True
        report = ScanReport(endpoints=self.endpoints.sorted(), results=list(self.results))
        logger.info(
            "Aggregated %d results: %d unique endpoints, %d failed",
            len(report.results),
            report.total,
            len(report.failed),
        )
        return report
