"""Модель реестра, в который публикуется образ.

https://docs.docker.com/registry/

Запись config.json с авторизацией — в services/credentials.py.
"""

import logging

from pydantic import BaseModel, Field

from vela_kaniko.errors import MissingFieldError

logger = logging.getLogger(__name__)


class RegistryInfo(BaseModel):
    """Настройки реестра.

    name — реестр для публикации (например index.docker.io)
    mirror — зеркало, которое используется вместо index.docker.io
    dry_run — собрать образ без публикации
    push_retry — сколько раз kaniko повторяет push
    insecure_registries — реестры, с которыми можно работать без TLS
    """

    name: str = "index.docker.io"
    mirror: str | None = None
    username: str | None = None
    # repr=False: пароль не должен попасть в логи
    password: str | None = Field(default=None, repr=False)
    dry_run: bool = False
    push_retry: int = Field(default=0, ge=0)
    insecure_registries: list[str] = Field(default_factory=list)
    insecure_pull: bool = False
    insecure_push: bool = False

    @property
    def has_credentials(self) -> bool:
        """Есть всё, что нужно для записи config.json."""
        return bool(self.name and self.username and self.password)

    def validate_config(self) -> None:
        logger.debug("validating registry plugin configuration")

        if not self.name:
            raise MissingFieldError("no registry name provided", field="registry.name")

        # при dry_run логин и пароль не нужны
        if not self.dry_run:
            if not self.username:
                raise MissingFieldError(
                    "no registry username provided", field="registry.username"
                )
            if not self.password:
                raise MissingFieldError(
                    "no registry password provided", field="registry.password"
                )
