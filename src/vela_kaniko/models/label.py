"""Метки образа по Open Container spec.

https://github.com/opencontainers/image-spec/blob/main/annotations.md

Часть меток вычисляется из метаданных сборки Vela. Их ключи
зарезервированы: пользовательская метка с таким же ключом — ошибка
конфигурации, а не тихая перезапись.

Пример результата render():
    org.opencontainers.image.created=2024-01-01T00:00:00Z
    org.opencontainers.image.url=https://github.com/octocat/hello-world
    org.opencontainers.image.revision=7fd1a60b
    io.vela.build.author=octocat@github.com
    io.vela.build.number=1
    ...
    io.vela.build.topics=docker,kaniko
    team=platform
"""

import re
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from vela_kaniko.errors import ConstraintViolationError, InvalidFormatError

# Порядок ключей фиксированный: от него зависит порядок --label флагов.
RESERVED_LABEL_KEYS = (
    "org.opencontainers.image.created",
    "org.opencontainers.image.url",
    "org.opencontainers.image.revision",
    "io.vela.build.author",
    "io.vela.build.number",
    "io.vela.build.repo",
    "io.vela.build.commit",
    "io.vela.build.url",
    "io.vela.build.link",
    "io.vela.build.host",
    "io.vela.build.topics",
)

TOPICS_LABEL_KEY = "io.vela.build.topics"


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class LabelInfo(BaseModel):
    """Поля для предопределённых меток и пользовательские метки.

    url — ссылка на репозиторий, build_url — ссылка на сборку в Vela
    topics — темы репозитория (попадают в io.vela.build.topics)
    custom_set — пользовательские метки в формате KEY=VALUE
    """

    author_email: str = ""
    commit: str = ""
    created: str = Field(default_factory=_now)
    full_name: str = ""
    number: int = 0
    url: str = ""
    build_url: str = ""
    host: str = ""
    topics: list[str] = Field(default_factory=list)
    custom_set: list[str] = Field(default_factory=list)

    def effective_topics(self, topics_filter: str | None = None) -> list[str]:
        """Темы, прошедшие фильтр (re.search, не fullmatch)."""
        if not topics_filter:
            return list(self.topics)
        pattern = re.compile(topics_filter)
        return [topic for topic in self.topics if pattern.search(topic)]

    def pairs(self, topics_filter: str | None = None) -> list[tuple[str, str]]:
        """Предопределённые метки как (key, value) в порядке RESERVED_LABEL_KEYS."""
        values = {
            "org.opencontainers.image.created": self.created,
            "org.opencontainers.image.url": self.url,
            "org.opencontainers.image.revision": self.commit,
            "io.vela.build.author": self.author_email,
            "io.vela.build.number": str(self.number),
            "io.vela.build.repo": self.full_name,
            "io.vela.build.commit": self.commit,
            "io.vela.build.url": self.url,
            "io.vela.build.link": self.build_url,
            "io.vela.build.host": self.host,
        }

        topics = self.effective_topics(topics_filter)
        if topics:
            values[TOPICS_LABEL_KEY] = ",".join(topics)

        return [(key, values[key]) for key in RESERVED_LABEL_KEYS if key in values]

    def render(self, topics_filter: str | None = None) -> list[str]:
        """Все метки в формате KEY=VALUE: сначала предопределённые, потом custom_set."""
        labels = [f"{key}={value}" for key, value in self.pairs(topics_filter)]
        labels.extend(self.custom_set)
        return labels

    def validate_custom_labels(self) -> None:
        """Каждая метка — ровно один "=", непустой ключ, ключ не зарезервирован."""
        for label in self.custom_set:
            parts = label.split("=")
            if len(parts) != 2 or not parts[0]:
                raise InvalidFormatError(
                    f"custom label '{label}' must be in the format KEY=VALUE",
                    field="label.custom_set",
                    value=label,
                )

        for label in self.custom_set:
            key = label.split("=", 1)[0]
            if key in RESERVED_LABEL_KEYS:
                raise ConstraintViolationError(
                    f"custom label '{label}' uses reserved key '{key}'",
                    field="label.custom_set",
                    value=label,
                )
