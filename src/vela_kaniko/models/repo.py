"""Модель репозитория образа: имя, теги, кэширование, сжатие, метки."""

import logging
import re

from pydantic import BaseModel, Field

from vela_kaniko.errors import (
    ConstraintViolationError,
    InvalidEnumError,
    InvalidFormatError,
    MissingFieldError,
    OutOfRangeError,
)
from vela_kaniko.models.build import BuildInfo
from vela_kaniko.models.label import LabelInfo

logger = logging.getLogger(__name__)

# Синтаксис тега docker:
#  - https://docs.docker.com/engine/reference/commandline/tag/#extended-description
#  - https://github.com/distribution/reference/blob/main/regexp.go
# re.ASCII: \w только латиница, цифры и "_", как в distribution.
TAG_PATTERN = re.compile(r"[\w][\w.-]{0,127}", re.ASCII)

COMPRESSION_TYPES = ("gzip", "zstd")
COMPRESSION_LEVEL_MIN = 1
COMPRESSION_LEVEL_MAX = 9

_TAG_ERROR = (
    "tag '{}' not allowed - see "
    "https://docs.docker.com/engine/reference/commandline/tag/#extended-description"
)


def is_tag_valid(tag: str) -> bool:
    return TAG_PATTERN.fullmatch(tag) is not None


class RepositoryInfo(BaseModel):
    """Репозиторий, в который публикуется образ.

    name — полное имя репозитория (index.docker.io/octocat/hello-world)
    tags — теги образа
    auto_tag — добавить тег из сборки (тег для события tag, иначе SHA коммита)
    cache / cache_name — кэширование слоёв и отдельный репозиторий для кэша
    compression / compression_level — сжатие слоёв (gzip|zstd, 1-9)
    topics_filter — регулярное выражение для тем в io.vela.build.topics
    label — данные для предопределённых меток
    labels — метки KEY=VALUE, переданные напрямую
    """

    auto_tag: bool = False
    cache: bool = False
    cache_name: str | None = None
    compression: str | None = None
    compression_level: int | None = None
    compressed_caching: bool = True
    name: str = ""
    tags: list[str] = Field(default_factory=list)
    topics_filter: str | None = None
    label: LabelInfo = Field(default_factory=LabelInfo)
    labels: list[str] = Field(default_factory=list)

    def with_auto_tags(self, build: BuildInfo) -> "RepositoryInfo":
        """Вернуть копию с тегом из сборки.

        Исходная модель не меняется, поэтому повторный вызов на
        оригинале не добавит тег дважды.
        """
        if not self.auto_tag:
            return self.model_copy(deep=True)

        tag = build.tag_ref if build.event == "tag" else build.commit_sha
        logger.debug("adding auto tag %s for %s event", tag, build.event)
        return self.model_copy(update={"tags": [*self.tags, tag]}, deep=True)

    def validate_config(self) -> None:
        logger.debug("validating repo plugin configuration")

        if self.cache_name and not self.cache:
            raise ConstraintViolationError(
                f"cache not set for cache repo: {self.cache_name}",
                field="repo.cache_name",
                value=self.cache_name,
            )

        if not self.name:
            raise MissingFieldError("no repo name provided", field="repo.name")

        if not self.auto_tag and not self.tags:
            raise MissingFieldError("no repo tags provided", field="repo.tags")

        for tag in self.tags:
            if not is_tag_valid(tag):
                raise InvalidFormatError(_TAG_ERROR.format(tag), field="repo.tags", value=tag)

        if self.topics_filter:
            try:
                re.compile(self.topics_filter)
            except re.error as e:
                raise InvalidFormatError(
                    f"topics filter '{self.topics_filter}' is not a valid regular expression: {e}",
                    field="repo.topics_filter",
                    value=self.topics_filter,
                ) from e

        if self.compression and self.compression not in COMPRESSION_TYPES:
            raise InvalidEnumError(
                f"compression '{self.compression}' was not a valid value "
                f"- valid options ({'|'.join(COMPRESSION_TYPES)})",
                field="repo.compression",
                value=self.compression,
            )

        if self.compression_level and not (
            COMPRESSION_LEVEL_MIN <= self.compression_level <= COMPRESSION_LEVEL_MAX
        ):
            raise OutOfRangeError(
                f"compression level {self.compression_level} out of range "
                f"- must be between {COMPRESSION_LEVEL_MIN} and {COMPRESSION_LEVEL_MAX}",
                field="repo.compression_level",
                value=self.compression_level,
            )

        self.label.validate_custom_labels()

    def render_labels(self) -> list[str]:
        """Метки из labels, затем предопределённые и пользовательские."""
        return [*self.labels, *self.label.render(self.topics_filter)]
