"""Сборка PluginConfig из флагов, окружения, YAML-файла и файлов параметров.

Приоритет источников для каждой настройки:
  1. флаг CLI
  2. переменные окружения (первая непустая, это делает click)
  3. YAML-файл из --config
  4. файлы /vela/parameters/kaniko/<x> и /vela/secrets/kaniko/<x>
  5. значение по умолчанию из SETTINGS
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from vela_kaniko.models.config import SETTINGS, PluginConfig, RunOptions, Setting, SettingKind

logger = logging.getLogger(__name__)

_SETTINGS_BY_NAME = {s.name: s for s in SETTINGS}


def load_yaml_settings(path: Path) -> dict[str, Any]:
    """Прочитать YAML-файл и привести его к плоскому виду {имя настройки: значение}.

    Секции build/image/registry/repo/label превращаются в префиксы:
    repo: {tags: [...]} → {"repo_tags": [...]}
    """
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"config file {path} must contain a mapping at the top level")

    flat: dict[str, Any] = {}
    for key, value in raw.items():
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                flat[f"{key}_{sub_key}"] = sub_value
        else:
            flat[key] = value

    unknown = sorted(set(flat) - set(_SETTINGS_BY_NAME))
    if unknown:
        raise ValueError(f"unknown settings in config file {path}: {', '.join(unknown)}")
    return flat


def read_parameter_file(paths: list[str]) -> str | None:
    """Вернуть содержимое первого существующего и читаемого файла."""
    for path in paths:
        try:
            content = Path(path).read_text(encoding="utf-8")
        except OSError:
            continue
        logger.debug("read setting from %s", path)
        return content.strip()
    return None


def parse_value(setting: Setting, value: Any) -> Any:
    """Привести значение к виду, который ждёт модель.

    Из env и файлов всегда приходят строки, а YAML отдаёт числа и bool
    как есть: для строковых и списочных настроек они переводятся в str.
    Списки приходят строкой через запятую; bool и int разбирает pydantic.
    """
    if setting.kind == SettingKind.LIST:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        return [str(value)]
    if setting.kind == SettingKind.STRING and not isinstance(value, str):
        return str(value)
    return value


def resolve_settings(
    cli_values: dict[str, Any],
    yaml_values: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Выбрать значение каждой настройки по приоритету источников."""
    yaml_values = yaml_values or {}
    resolved: dict[str, Any] = {}

    for setting in SETTINGS:
        value = cli_values.get(setting.name)
        if value is None:
            value = yaml_values.get(setting.name)
        if value is None and setting.files:
            value = read_parameter_file(setting.files)
        if value is None:
            value = setting.default
        if value is None:
            continue
        resolved[setting.name] = parse_value(setting, value)

    return resolved


def build_plugin_config(values: dict[str, Any]) -> tuple[PluginConfig, RunOptions]:
    """Разложить значения по target-путям и провалидировать через pydantic."""
    tree: dict[str, Any] = {}
    for name, value in values.items():
        *parents, leaf = _SETTINGS_BY_NAME[name].target.split(".")
        node = tree
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value

    run = RunOptions.model_validate(tree.pop("run", {}))
    return PluginConfig.model_validate(tree), run


def load_plugin_config(
    cli_values: dict[str, Any],
    config_path: Path | None = None,
) -> tuple[PluginConfig, RunOptions]:
    yaml_values = load_yaml_settings(config_path) if config_path else {}
    return build_plugin_config(resolve_settings(cli_values, yaml_values))
