"""Сборка аргументов командной строки kaniko из конфигурации плагина.

Берёт:
  - BuildInfo, ImageInfo, RegistryInfo, RepositoryInfo
  - уровень логирования (уходит в --verbosity)

И возвращает список аргументов для /kaniko/executor (без самого бинарника).

Порядок флагов фиксированный:
  1. флаги сборки (снапшоты, ignore-path, log-timestamp)
  2. --build-arg
  3. кэш
  4. --context
  5. сжатие
  6. --destination для каждого тега
  7. --label для каждой метки
  8. --dockerfile
  9. флаги реестра, target, платформа, insecure-*
 10. --verbosity — всегда последний

build_command ничего не проверяет: сначала validate_plugin().
"""

import logging

from vela_kaniko.models.build import BuildInfo
from vela_kaniko.models.config import PluginConfig
from vela_kaniko.models.image import ImageInfo
from vela_kaniko.models.registry import RegistryInfo
from vela_kaniko.models.repo import RepositoryInfo
from vela_kaniko.services.log_level import LogLevel

logger = logging.getLogger(__name__)


def validate_plugin(config: PluginConfig) -> PluginConfig:
    """Добавить автотег и проверить дескрипторы: build → image → registry → repo.

    Первая ошибка пробрасывается как есть. Возвращает копию конфигурации
    с итоговым списком тегов; исходный config не меняется.
    """
    logger.debug("validating plugin configuration")

    repo = config.repo.with_auto_tags(config.build)

    config.build.validate_config()
    config.image.validate_config()
    config.registry.validate_config()
    repo.validate_config()

    return config.model_copy(update={"repo": repo})


def build_command(
    build: BuildInfo,
    image: ImageInfo,
    registry: RegistryInfo,
    repo: RepositoryInfo,
    verbosity: LogLevel | str = LogLevel.INFO,
) -> list[str]:
    """Собрать аргументы kaniko. Теги берутся как есть — автотег уже применён."""
    logger.debug("creating kaniko command from plugin configuration")

    flags: list[str] = []
    flags.extend(_build_flags(build))

    for arg in image.build_args:
        flags.append(f"--build-arg={arg}")

    flags.extend(_cache_flags(repo))

    flags.append(f"--context={image.context}")

    if repo.compression:
        flags.append(f"--compression={repo.compression}")
    if repo.compression_level:
        flags.append(f"--compression-level={repo.compression_level}")

    for tag in repo.tags:
        flags.append(f"--destination={repo.name}:{tag}")

    for label in repo.render_labels():
        flags.append(f"--label={label}")

    flags.append(f"--dockerfile={image.dockerfile}")

    if registry.dry_run:
        flags.append("--no-push")
    if registry.mirror:
        flags.append(f"--registry-mirror={registry.mirror}")
    if registry.push_retry > 0:
        flags.append(f"--push-retry={registry.push_retry}")

    if image.target:
        flags.append(f"--target={image.target}")
    if image.custom_platform:
        flags.append(f"--customPlatform={image.custom_platform}")
    if image.force_build_metadata:
        flags.append("--force-build-metadata")

    for insecure in registry.insecure_registries:
        flags.append(f"--insecure-registry={insecure}")
    if registry.insecure_pull:
        flags.append("--insecure-pull")
    if registry.insecure_push:
        flags.append("--insecure")

    level = verbosity.value if isinstance(verbosity, LogLevel) else verbosity
    flags.append(f"--verbosity={level}")

    return flags


def build_plugin_command(config: PluginConfig, verbosity: LogLevel | str = LogLevel.INFO) -> list[str]:
    return build_command(config.build, config.image, config.registry, config.repo, verbosity)


def version_command() -> list[str]:
    return ["version"]


def _build_flags(build: BuildInfo) -> list[str]:
    flags = []
    if build.snapshot_mode:
        flags.append(f"--snapshot-mode={build.snapshot_mode}")
    if build.use_new_run:
        flags.append("--use-new-run")
    if build.tar_path:
        flags.append(f"--tar-path={build.tar_path}")
    if build.single_snapshot:
        flags.append("--single-snapshot")

    # --ignore-var-run передаётся всегда: true или false
    flags.append(f"--ignore-var-run={str(build.ignore_var_run).lower()}")

    for path in build.ignore_paths:
        flags.append(f"--ignore-path={path}")
    if build.log_timestamps:
        flags.append("--log-timestamp")
    return flags


def _cache_flags(repo: RepositoryInfo) -> list[str]:
    if not repo.cache:
        return []

    flags = ["--cache", f"--cache-repo={repo.cache_name or repo.name}"]
    if not repo.compressed_caching:
        flags.append("--compressed-caching=false")
    return flags
