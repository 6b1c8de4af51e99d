# File: link_scout/utils.py
"""link_scout.utils: чтение списков URL и разрешение найденных путей относительно источника."""

from __future__ import annotations

import re
from pathlib import Path
from typing import IO, Iterable, List, Optional, Sequence, Tuple, Union
from urllib.parse import urljoin

from link_scout.errors import InputFileMissing, InputUnavailable, ReferenceResolutionError
from link_scout.logger import logger

__all__: Sequence[str] = (
    "read_lines",
    "read_url_list",
    "collect_targets",
    "resolve_reference",
    "resolve_endpoint",
)

# "%" без двух hex-цифр следом
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _bad_escape(value: str) -> Optional[str]:
    """Первый некорректный escape в пути или фрагменте; query не проверяется."""
    rest, _, fragment = value.partition("#")
    path = rest.partition("?")[0]
    for part in (path, fragment):
        bad = _BAD_ESCAPE.search(part)
        if bad is not None:
            return part[bad.start():bad.start() + 3]
    return None


def read_lines(lines: Iterable[str]) -> List[str]:
    """Возвращает непустые строки без пробелов по краям, сохраняя порядок и дубликаты."""
    return [stripped for stripped in (line.strip() for line in lines) if stripped]


def read_url_list(path: Union[str, Path]) -> List[str]:
    """Читает файл со списком URL (по одному на строку). Пустые строки пропускаются."""
    p = Path(path).expanduser()
    try:
        with p.open("r", encoding="utf-8", errors="replace") as fh:
            urls = read_lines(fh)
    except OSError as exc:
        logger.error("URL list not readable: %s", p)
        raise InputFileMissing(str(path), exc) from exc
    logger.debug("Loaded %d URLs from %s", len(urls), p)
    return urls


def collect_targets(
    url: Optional[str] = None,
    list_path: Union[str, Path, None] = None,
    stdin: Optional[IO[str]] = None,
) -> Tuple[str, ...]:
    """
    Выбирает источник URL: сначала ``-u``, затем ``-l``, затем stdin.

    ``stdin`` передаётся только если это не терминал. Пустой итог: InputUnavailable.
    Дубликаты не удаляются: каждый URL сканируется столько раз, сколько указан.
    """
    if url:
        urls = [url.strip()] if url.strip() else []
    elif list_path is not None:
        urls = read_url_list(list_path)
    elif stdin is not None:
        urls = read_lines(stdin)
    else:
        urls = []

    if not urls:
        raise InputUnavailable()
    return tuple(urls)


def resolve_reference(base: str, reference: str) -> str:
    """
    Разрешает ссылку по правилам RFC 3986; абсолютные ссылки возвращаются без изменений.

    Некорректные percent-escape в пути или фрагменте (например ``/a%zz``) дают ReferenceResolutionError.
    """
    for value in (base, reference):
        escape = _bad_escape(value)
        if escape is not None:
            raise ReferenceResolutionError(base, reference, f"invalid URL escape {escape!r}")
    try:
        return urljoin(base, reference)
    except ValueError as exc:
        raise ReferenceResolutionError(base, reference, exc) from exc


def resolve_endpoint(base: str, endpoint: str) -> str:
    """Как :func:`resolve_reference`, но при ошибке возвращает исходную строку."""
    try:
        return resolve_reference(base, endpoint)
    except ReferenceResolutionError as exc:
        logger.debug("Resolution fallback: %s", exc)
        return endpoint
