"""Модель информации о сборке (CI build).

Эти поля приходят от Vela: событие, коммит, тег, плюс настройки
снапшотов файловой системы для kaniko.

Пример:
    event: tag
    commit_sha: 7fd1a60b01f91b314f59955a4e4d4e80d8edf11d
    tag_ref: v0.0.0
    snapshot_mode: redo
"""

import logging

from pydantic import BaseModel, Field

from vela_kaniko.errors import InvalidEnumError, MissingFieldError

logger = logging.getLogger(__name__)

# https://github.com/GoogleContainerTools/kaniko#flag---snapshot-mode
SNAPSHOT_MODES = ("full", "redo", "time")


class BuildInfo(BaseModel):
    """Информация о сборке.

    event — событие, которое запустило сборку (push, tag, pull_request...)
    commit_sha — SHA-1 коммита
    tag_ref — тег (заполняется только для события tag)
    snapshot_mode — как kaniko снимает снапшоты (full|redo|time)
    ignore_paths — пути, которые kaniko не включает в снапшот
    """

    event: str = ""
    commit_sha: str = ""
    tag_ref: str = ""
    snapshot_mode: str | None = None
    use_new_run: bool = False
    tar_path: str | None = None
    single_snapshot: bool = False
    ignore_var_run: bool = True
    ignore_paths: list[str] = Field(default_factory=list)
    log_timestamps: bool = False

    def validate_config(self) -> None:
        """Проверить что сборка описана полностью."""
        logger.debug("validating build plugin configuration")

        if not self.event:
            raise MissingFieldError("no build event provided", field="build.event")

        if not self.commit_sha:
            raise MissingFieldError("no build sha provided", field="build.commit_sha")

        if self.snapshot_mode and not is_snapshot_mode_valid(self.snapshot_mode):
            raise InvalidEnumError(
                f"snapshot mode '{self.snapshot_mode}' was not a valid value "
                f"- valid options ({'|'.join(SNAPSHOT_MODES)})",
                field="build.snapshot_mode",
                value=self.snapshot_mode,
            )


def is_snapshot_mode_valid(value: str) -> bool:
    return value.lower() in SNAPSHOT_MODES
