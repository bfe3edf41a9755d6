# === FILE: url_inventory/config.py ===
"""
Модуль для загрузки и валидации конфигурации URL Inventory.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

DEFAULT_USER_AGENT = "Mozilla/5.0 (URL Inventory Tool)"


class InventoryConfig(BaseModel):
    """Конфигурация обхода домена и проверки статусов."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_depth: int = Field(2, ge=0, description="Максимальная глубина обхода ссылок.")
    max_urls: int = Field(200, ge=1, description="Жесткий лимит на число найденных URL.")
    timeout: float = Field(8.0, gt=0, description="Таймаут на загрузку одной страницы (секунд).")
    max_redirects: int = Field(5, ge=0, description="Максимальное число редиректов на запрос.")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    concurrency: int = Field(5, ge=1, description="Число параллельных воркеров краулера.")
    probe_concurrency: int = Field(10, ge=1, description="Число параллельных проверок статуса.")
    probe_timeout: float = Field(8.0, gt=0, description="Таймаут на одну проверку статуса (секунд).")
    crawl_timeout: Optional[float] = Field(
        None, gt=0, description="Общий таймаут обхода (секунд), None — без ограничения."
    )
    proxy_prefix: Optional[str] = Field(
        None, description="Префикс прокси, добавляемый к каждому проверяемому URL."
    )
    record_external: bool = Field(
        False, description="Сохранять ли внешние ссылки отдельным списком."
    )

    @field_validator("proxy_prefix", mode="before")
    def _empty_prefix_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _check_timeouts(self) -> InventoryConfig:
        if self.crawl_timeout is not None and self.crawl_timeout <= self.timeout:
            raise ValueError(
                f"crawl_timeout ({self.crawl_timeout}) должен быть больше timeout ({self.timeout})"
            )
        return self


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


def load_config(path: Union[str, Path, None] = None) -> InventoryConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект InventoryConfig.

    Без пути используется configs/default.yaml, а если его нет — значения по умолчанию.
    Явно указанный, но отсутствующий файл приводит к FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return InventoryConfig()
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

    return InventoryConfig(**data)


__all__ = ["InventoryConfig", "load_config", "DEFAULT_USER_AGENT"]
