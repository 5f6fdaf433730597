"""
Опции плагина и загрузчик конфигурации tachui.config.yaml.

Опции принимаются в двух формах: как PluginOptions или как словарь с
camelCase-ключами в духе JS-хоста (include, exclude, dev,
transform: {treeShaking, sourceMaps, target}).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "tachui.config.yaml"

DEFAULT_INCLUDE = (".tsx", ".ts")
DEFAULT_EXCLUDE = ("node_modules/**", "**/*.test.*", "**/*.bench.*")

_yaml = YAML(typ="safe")


@dataclass(frozen=True)
class TransformOptions:
    """
    Настройки генерации кода.

    source_maps=None означает «как dev».
    """
    tree_shaking: bool = False
    source_maps: Optional[bool] = None
    target: str = "es2022"

    _KEYS = {"treeShaking": "tree_shaking", "sourceMaps": "source_maps", "target": "target"}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TransformOptions":
        _warn_unknown(data, set(cls._KEYS) | set(cls._KEYS.values()), "transform")
        source_maps = _pick(data, "sourceMaps", "source_maps", None)
        return cls(
            tree_shaking=_flag(_pick(data, "treeShaking", "tree_shaking", False), "treeShaking"),
            source_maps=None if source_maps is None else _flag(source_maps, "sourceMaps"),
            target=str(_pick(data, "target", "target", "es2022")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "treeShaking": self.tree_shaking,
            "sourceMaps": self.source_maps,
            "target": self.target,
        }


@dataclass(frozen=True)
class PluginOptions:
    include: List[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    dev: bool = False
    transform: TransformOptions = field(default_factory=TransformOptions)

    @property
    def source_maps(self) -> bool:
        """Итоговый флаг source maps: явная настройка или dev."""
        if self.transform.source_maps is None:
            return self.dev
        return self.transform.source_maps

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PluginOptions":
        """Создание экземпляра из словаря (camelCase-ключи хоста или YAML)."""
        _warn_unknown(data, {"include", "exclude", "dev", "transform"}, "plugin options")
        transform_raw = data.get("transform") or {}
        if not isinstance(transform_raw, Mapping):
            raise ConfigError(f"'transform' must be a mapping, got {type(transform_raw).__name__}")
        return cls(
            include=_str_list(data.get("include", DEFAULT_INCLUDE), "include"),
            exclude=_str_list(data.get("exclude", DEFAULT_EXCLUDE), "exclude"),
            dev=_flag(data.get("dev", False), "dev"),
            transform=TransformOptions.from_dict(transform_raw),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "include": list(self.include),
            "exclude": list(self.exclude),
            "dev": self.dev,
            "transform": self.transform.to_dict(),
        }


def coerce_options(options: Union[PluginOptions, Mapping[str, Any], None]) -> PluginOptions:
    if options is None:
        return PluginOptions()
    if isinstance(options, PluginOptions):
        return options
    if isinstance(options, Mapping):
        return PluginOptions.from_dict(options)
    raise TypeError(f"Unsupported plugin options: {type(options).__name__}")


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    if not path.is_file():
        return {}
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def load_plugin_options(root: Path) -> PluginOptions:
    """
    Загружает опции плагина из tachui.config.yaml в корне проекта.

    Отсутствующий файл даёт значения по умолчанию.
    """
    path = Path(root) / CONFIG_FILENAME
    raw = _read_yaml_map(path)
    if not raw:
        logger.debug("No plugin config at %s; using defaults", path)
    return PluginOptions.from_dict(raw)


def _pick(data: Mapping[str, Any], camel: str, snake: str, default: Any) -> Any:
    if camel in data:
        return data[camel]
    return data.get(snake, default)


_TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
_FALSE_WORDS = frozenset({"false", "no", "off", "0"})


def _flag(value: Any, name: str) -> bool:
    """Булев флаг; строки вроде "false" из хост-конфигов разбираются по словам."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ConfigError(f"'{name}' must be a boolean, got {value!r}")


def _str_list(value: Any, name: str) -> List[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"'{name}' must be a list of strings")
    return [str(v) for v in value]


def _warn_unknown(data: Mapping[str, Any], known: set, where: str) -> None:
    for key in data:
        if key not in known:
            logger.warning("Ignoring unknown key '%s' in %s", key, where)


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_INCLUDE",
    "DEFAULT_EXCLUDE",
    "PluginOptions",
    "TransformOptions",
    "coerce_options",
    "load_plugin_options",
]
