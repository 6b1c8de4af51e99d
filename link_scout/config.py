# === FILE: link_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации LinkScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = ["ScannerConfig", "load_config", "DEFAULT_USER_AGENT", "DEFAULT_THREADS", "DEFAULT_TIMEOUT"]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/115.0.0.0 Safari/537.36"
)
DEFAULT_THREADS = 20
DEFAULT_TIMEOUT = 10.0


class ScannerConfig(BaseModel):
    """Конфигурация для одного запуска сканирования."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    threads: int = Field(DEFAULT_THREADS, ge=1, description="Число параллельных воркеров.")
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    resolve: bool = Field(False, description="Разрешать найденные пути в абсолютные URL.")
    quiet: bool = Field(False, description="Печатать только итоговый список эндпоинтов.")
    color: bool = Field(True, description="Цветной вывод в консоль.")
    verify_tls: bool = Field(False, description="Проверять TLS-сертификаты.")
    follow_redirects: bool = Field(True, description="Следовать редиректам перед проверкой статуса.")

    @field_validator("user_agent", mode="before")
    def _strip_user_agent(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    def merged(self, **overrides: Any) -> ScannerConfig:
        """Возвращает проверенную копию с применёнными не-None значениями (флаги CLI)."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return ScannerConfig(**data)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None) -> ScannerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект ScannerConfig.
    Без пути возвращает значения по умолчанию; для отсутствующего файла FileNotFoundError.
    """
    if path is None:
        return ScannerConfig()

    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    try:
        return ScannerConfig(**data)
    except ValidationError:
        raise
