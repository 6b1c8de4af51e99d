# File: link_scout/errors.py
"""Иерархия исключений LinkScout.

Фатальные ошибки (вход/выход) прерывают запуск до начала сканирования.
Ошибки загрузки (``FetchError``) относятся к одному URL и не влияют на остальные задания.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "LinkScoutError",
    "InputError",
    "InputUnavailable",
    "InputFileMissing",
    "OutputFileError",
    "FetchError",
    "RequestConstructionError",
    "TransportError",
    "NonOKStatus",
    "BodyReadError",
    "ReferenceResolutionError",
]


class LinkScoutError(Exception):
    """Базовое исключение проекта."""


class InputError(LinkScoutError):
    """Не удалось получить список URL для сканирования."""


class InputUnavailable(InputError):
    """Не указан ни один источник URL (или источник пуст)."""

    def __init__(self, message: str = "No input provided. Please use -u, -l, or pipe data from stdin.") -> None:
        super().__init__(message)


class InputFileMissing(InputError):
    """Файл из ``-l`` не удалось открыть."""

    def __init__(self, path: str, reason: object = None) -> None:
        self.path = path
        message = f"The file '{path}' was not found"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)


class OutputFileError(LinkScoutError):
    """Файл для ``-o`` не удалось создать."""

    def __init__(self, path: str, reason: object = None) -> None:
        self.path = path
        message = f"Error creating output file '{path}'"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)


class FetchError(LinkScoutError):
    """Ошибка загрузки одного URL. Никогда не прерывает остальные задания."""

    kind = "fetch"

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(message)


class RequestConstructionError(FetchError):
    """Запрос не удалось построить: некорректный или не-HTTP URL."""

    kind = "request"

    def __init__(self, url: str, reason: object) -> None:
        super().__init__(url, f"could not create request: {reason}")


class TransportError(FetchError):
    """Сетевая ошибка: DNS, отказ в соединении, таймаут."""

    kind = "transport"

    def __init__(self, url: str, reason: object) -> None:
        super().__init__(url, f"http request failed: {reason or 'timeout'}")


class NonOKStatus(FetchError):
    """Сервер ответил кодом, отличным от 200."""

    kind = "status"

    def __init__(self, url: str, status: int) -> None:
        self.status = status
        super().__init__(url, f"bad status code: {status}")


class BodyReadError(FetchError):
    """Тело ответа не удалось дочитать."""

    kind = "body"

    def __init__(self, url: str, reason: object) -> None:
        super().__init__(url, f"could not read response body: {reason or 'timeout'}")


class ReferenceResolutionError(LinkScoutError):
    """Относительный путь не удалось разрешить относительно исходного URL."""

    def __init__(self, base: str, reference: str, reason: Optional[object] = None) -> None:
        self.base = base
        self.reference = reference
        super().__init__(f"cannot resolve {reference!r} against {base!r}: {reason}")
