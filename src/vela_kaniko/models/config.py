"""Модели конфигурации плагина.

PluginConfig — все дескрипторы одного запуска: build, image, registry, repo.
RunOptions — то, что нужно для запуска, но не попадает в дескрипторы.
Setting — описание одной настройки: флаг, переменные окружения и файлы,
из которых берётся значение (см. services/config_loader.py).

Пример YAML-файла для --config:
    log_level: debug
    build:
      snapshot_mode: redo
    registry:
      name: index.docker.io
      dry_run: true
    repo:
      name: index.docker.io/octocat/hello-world
      tags: [latest, "1.0.0"]
      cache: true
"""

from enum import Enum

from pydantic import BaseModel, Field

from vela_kaniko.models.build import BuildInfo
from vela_kaniko.models.image import ImageInfo
from vela_kaniko.models.registry import RegistryInfo
from vela_kaniko.models.repo import RepositoryInfo

KANIKO_BIN = "/kaniko/executor"
DOCKER_CONFIG_PATH = "/kaniko/.docker/config.json"


class SettingKind(str, Enum):
    """Тип значения настройки — от него зависит разбор строки из env/файла."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    LIST = "list"


class Setting(BaseModel):
    """Одна настройка плагина.

    name — имя в CLI (--build-event) и ключ в YAML (build: {event: ...})
    target — куда значение попадает: "build.commit_sha", "run.log_level"
    envvars — переменные окружения, первая непустая выигрывает
    files — файлы, первый существующий читаемый выигрывает
    """

    name: str
    target: str
    help: str
    kind: SettingKind = SettingKind.STRING
    envvars: list[str] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)
    default: str | bool | int | list[str] | None = None
    secret: bool = False

    @property
    def flag(self) -> str:
        return "--" + self.name.replace("_", "-")


def _env(key: str, *extra: str) -> list[str]:
    return [f"PARAMETER_{key}", f"KANIKO_{key}", *extra]


def _files(key: str) -> list[str]:
    name = key.lower()
    return [f"/vela/parameters/kaniko/{name}", f"/vela/secrets/kaniko/{name}"]


def _setting(name, target, key, help, *extra_env, **kwargs) -> Setting:
    return Setting(
        name=name,
        target=target,
        help=help,
        envvars=_env(key, *extra_env),
        files=_files(key),
        **kwargs,
    )


def _vela_setting(name, target, envvar, help, **kwargs) -> Setting:
    """Настройка, которую Vela заполняет сама — только из окружения."""
    return Setting(name=name, target=target, help=help, envvars=[envvar], **kwargs)


_BOOL = SettingKind.BOOL
_INT = SettingKind.INT
_LIST = SettingKind.LIST

SETTINGS: tuple[Setting, ...] = (
    _setting(
        "log_level", "run.log_level", "LOG_LEVEL",
        "set log level - options: (trace|debug|info|warn|error|fatal|panic)",
        default="info",
    ),
    Setting(
        name="executor", target="run.executor", help="path to the kaniko executor binary",
        envvars=["KANIKO_EXECUTOR"], default=KANIKO_BIN,
    ),
    Setting(
        name="docker_config", target="run.docker_config",
        help="path of the registry credential file read by the executor",
        envvars=["KANIKO_DOCKER_CONFIG"], default=DOCKER_CONFIG_PATH,
    ),
    # build
    _setting("build_event", "build.event", "EVENT", "event triggered for build", "VELA_BUILD_EVENT"),
    _setting("build_sha", "build.commit_sha", "SHA", "commit SHA-1 hash for build", "VELA_BUILD_COMMIT"),
    _setting(
        "build_tag", "build.tag_ref", "TAG",
        "full tag reference for build (only populated for tag events)", "VELA_BUILD_TAG",
    ),
    _setting(
        "build_snapshot_mode", "build.snapshot_mode", "SNAPSHOT_MODE",
        "control how to snapshot the filesystem - options (full|redo|time)",
    ),
    _setting("build_use_new_run", "build.use_new_run", "USE_NEW_RUN",
             "use the experimental run implementation", kind=_BOOL),
    _setting("build_tar_path", "build.tar_path", "TAR_PATH", "save the image as a tarball at this path"),
    _setting("build_single_snapshot", "build.single_snapshot", "SINGLE_SNAPSHOT",
             "take a single snapshot at the end of the build", kind=_BOOL),
    _setting("build_ignore_var_run", "build.ignore_var_run", "IGNORE_VAR_RUN",
             "ignore /var/run when taking snapshots", kind=_BOOL, default=True),
    _setting("build_ignore_path", "build.ignore_paths", "IGNORE_PATH",
             "paths to ignore when taking snapshots", kind=_LIST),
    _setting("build_log_timestamp", "build.log_timestamps", "LOG_TIMESTAMP",
             "add timestamps to the executor log output", kind=_BOOL),
    # image
    _setting("image_build_args", "image.build_args", "BUILD_ARGS",
             "variables passed to the image at build-time", kind=_LIST),
    _setting("image_context", "image.context", "CONTEXT",
             "path on local filesystem for building image from", default="."),
    _setting("image_dockerfile", "image.dockerfile", "DOCKERFILE",
             "path to text file with build instructions", default="Dockerfile"),
    _setting("image_target", "image.target", "TARGET", "build stage to target for image"),
    _setting("image_force_build_metadata", "image.force_build_metadata", "FORCE_BUILD_METADATA",
             "force adding metadata layers to the image", kind=_BOOL),
    _setting("image_custom_platform", "image.custom_platform", "CUSTOM_PLATFORM",
             "platform to build the image for, e.g. linux/arm64"),
    # registry
    _setting("registry_name", "registry.name", "REGISTRY",
             "Docker registry name to communicate with", default="index.docker.io"),
    _setting("registry_mirror", "registry.mirror", "MIRROR",
             "name of the mirror registry to use instead of index.docker.io"),
    _setting("registry_username", "registry.username", "USERNAME",
             "user name for communication with the registry", "DOCKER_USERNAME"),
    _setting("registry_password", "registry.password", "PASSWORD",
             "password for communication with the registry", "DOCKER_PASSWORD", secret=True),
    _setting("registry_dry_run", "registry.dry_run", "DRY_RUN",
             "enables building images without publishing to the registry", kind=_BOOL),
    _setting("registry_push_retry", "registry.push_retry", "PUSH_RETRY",
             "number of retries for pushing an image to a remote destination", kind=_INT),
    _setting("registry_insecure_registries", "registry.insecure_registries", "INSECURE_REGISTRIES",
             "insecure registries to push and pull from", kind=_LIST),
    _setting("registry_insecure_pull", "registry.insecure_pull", "INSECURE_PULL",
             "enable pulling from any insecure registry", kind=_BOOL),
    _setting("registry_insecure_push", "registry.insecure_push", "INSECURE_PUSH",
             "enable pushing to any insecure registry", kind=_BOOL),
    # repo
    _setting("repo_auto_tag", "repo.auto_tag", "AUTO_TAG",
             "enables automatically providing tags for the image", kind=_BOOL),
    _setting("repo_cache", "repo.cache", "CACHE", "enables caching of each layer for the image", kind=_BOOL),
    _setting("repo_cache_name", "repo.cache_name", "CACHE_REPO",
             "enables caching of each layer for a specific repo for the image"),
    _setting("repo_compression", "repo.compression", "COMPRESSION",
             "compression type for image layers - options (gzip|zstd)"),
    _setting("repo_compression_level", "repo.compression_level", "COMPRESSION_LEVEL",
             "compression level for image layers (1-9)", kind=_INT),
    _setting("repo_compressed_caching", "repo.compressed_caching", "COMPRESSED_CACHING",
             "compress cached layers", kind=_BOOL, default=True),
    _setting("repo_name", "repo.name", "REPO", "repository name for the image"),
    _setting("repo_tags", "repo.tags", "TAGS", "repository tags of the image", kind=_LIST,
             default=["latest"]),
    _setting("repo_topics_filter", "repo.topics_filter", "REPO_TOPICS_FILTER",
             "regular expression selecting repository topics for the topics label"),
    _setting("repo_labels", "repo.labels", "LABELS", "repository labels of the image", kind=_LIST),
    _setting("label_custom", "repo.label.custom_set", "CUSTOM_LABELS",
             "custom labels in the format KEY=VALUE", kind=_LIST),
    # open image specification labels, provided by Vela
    _vela_setting("label_author_email", "repo.label.author_email", "VELA_BUILD_AUTHOR_EMAIL",
                  "author from the source commit"),
    _vela_setting("label_commit", "repo.label.commit", "VELA_BUILD_COMMIT",
                  "commit sha from the source commit"),
    _vela_setting("label_number", "repo.label.number", "VELA_BUILD_NUMBER", "build number", kind=_INT),
    _vela_setting("label_full_name", "repo.label.full_name", "VELA_REPO_FULL_NAME",
                  "full name of the repository"),
    _vela_setting("label_url", "repo.label.url", "VELA_REPO_LINK", "direct url of the repository"),
    _vela_setting("label_build_url", "repo.label.build_url", "VELA_BUILD_LINK",
                  "direct url of the build"),
    _vela_setting("label_host", "repo.label.host", "VELA_BUILD_HOST", "host that ran the build"),
    _vela_setting("label_topics", "repo.label.topics", "VELA_REPO_TOPICS",
                  "topics of the repository", kind=_LIST),
)


class RunOptions(BaseModel):
    """Настройки запуска, которые не входят в дескрипторы."""

    log_level: str = "info"
    executor: str = KANIKO_BIN
    docker_config: str = DOCKER_CONFIG_PATH


class PluginConfig(BaseModel):
    """Вся конфигурация одного запуска плагина.

    Одна схема для обоих вариантов плагина: поля kaniko, которых не было
    в простом docker-плагине, по умолчанию не дают ни одного флага.
    """

    build: BuildInfo = Field(default_factory=BuildInfo)
    image: ImageInfo = Field(default_factory=ImageInfo)
    registry: RegistryInfo = Field(default_factory=RegistryInfo)
    repo: RepositoryInfo = Field(default_factory=RepositoryInfo)
