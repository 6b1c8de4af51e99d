"""link_scout.crawler: загрузка, извлечение эндпоинтов и пул воркеров."""

from .extractor import ENDPOINT_PATTERN, Extractor, extract
from .fetcher import Fetcher
from .models import FetchResult, ScanResult
from .pool import WorkerPool

__all__ = [
    "ENDPOINT_PATTERN",
    "Extractor",
    "extract",
    "Fetcher",
    "FetchResult",
    "ScanResult",
    "WorkerPool",
]
