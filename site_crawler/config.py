# === FILE: site_crawler/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера SiteCrawler.
Используется Pydantic для описания схемы и проверки данных.

Две модели:
  * CrawlerConfig — настройки движка (пул воркеров, таймауты), читаются из YAML/JSON;
  * CrawlParams   — параметры одного запуска (seed, фильтр домена, глубина).
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from site_crawler.errors import CrawlValidationError

MAX_DEPTH_LIMIT = 10


class CrawlerConfig(BaseModel):
    """Настройки движка, общие для всех сессий обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    workers: int = Field(10, ge=1, description="Число параллельных воркеров.")
    poll_timeout: float = Field(1.0, gt=0, description="Таймаут ожидания задачи в очереди (секунд).")
    request_timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    progress_interval: float = Field(1.0, gt=0, description="Период отчёта о прогрессе (секунд).")
    stop_timeout: float = Field(5.0, gt=0, description="Сколько ждать завершения воркеров при остановке.")
    user_agent: str = Field("SiteCrawler/1.0", min_length=1, description="Заголовок User-Agent.")


class CrawlParams(BaseModel):
    """Параметры одного запуска обхода."""
    model_config = ConfigDict(frozen=True)

    seed_url: str = Field(..., min_length=1, description="Стартовый URL.")
    domain_filter: str = Field(..., min_length=1, description="Подстрока, обязательная в каждом URL.")
    max_depth: int = Field(3, ge=0, le=MAX_DEPTH_LIMIT, description="Максимальная глубина обхода ссылок.")

    @field_validator("seed_url", "domain_filter", mode="before")
    def _strip(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @classmethod
    def build(cls, seed_url: str, domain_filter: str, max_depth: int) -> CrawlParams:
        """Создаёт параметры, переводя ошибки Pydantic в CrawlValidationError."""
        try:
            return cls(seed_url=seed_url, domain_filter=domain_filter, max_depth=max_depth)
        except ValidationError as exc:
            fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
            raise CrawlValidationError(f"Invalid crawl parameters: {fields}") from exc


_DEFAULT_CFG = Path("configs/default.yaml")


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


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    Без явного пути берёт configs/default.yaml, а при его отсутствии — значения по умолчанию.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return CrawlerConfig()
        path_obj = _DEFAULT_CFG
    else:
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

    return CrawlerConfig(**data)


__all__ = ["CrawlerConfig", "CrawlParams", "load_config", "MAX_DEPTH_LIMIT"]
