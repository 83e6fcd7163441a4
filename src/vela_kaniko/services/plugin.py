"""Запуск плагина целиком.

Шаги:
  1. автотег + валидация build → image → registry → repo
  2. сборка аргументов kaniko
  3. запись config.json с авторизацией
  4. вывод версии kaniko
  5. запуск kaniko

Любая ошибка прерывает следующие шаги: при невалидной конфигурации
config.json не пишется и kaniko не запускается.
"""

import logging
import subprocess
from pathlib import Path

from vela_kaniko.models.config import DOCKER_CONFIG_PATH, KANIKO_BIN, PluginConfig
from vela_kaniko.services.command_builder import build_plugin_command, validate_plugin
from vela_kaniko.services.credentials import write_credentials
from vela_kaniko.services.executor import print_version, run_executor
from vela_kaniko.services.log_level import LogLevel

logger = logging.getLogger(__name__)


def run_plugin(
    config: PluginConfig,
    verbosity: LogLevel = LogLevel.INFO,
    binary: str = KANIKO_BIN,
    docker_config: str | Path = DOCKER_CONFIG_PATH,
    show_version: bool = True,
) -> subprocess.CompletedProcess:
    """Провалидировать конфигурацию, записать config.json и запустить kaniko."""
    logger.debug("running plugin with provided configuration")

    resolved = validate_plugin(config)
    args = build_plugin_command(resolved, verbosity)

    written = write_credentials(resolved.registry, docker_config)
    if written:
        logger.info("registry credentials written to %s", written)

    if show_version:
        print_version(binary)

    return run_executor(args, binary=binary)
