"""Уровень логирования плагина.

Значения — как у logrus, потому что тот же уровень уходит в kaniko
флагом --verbosity. Для Python-логов trace сводится к DEBUG, а
fatal/panic к CRITICAL.
"""

import logging
from enum import Enum

import click

PACKAGE_LOGGER = "vela_kaniko"


class LogLevel(str, Enum):
    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"
    PANIC = "panic"


# Сокращения и варианты написания, которые принимает плагин.
_ALIASES = {
    "t": LogLevel.TRACE,
    "trace": LogLevel.TRACE,
    "d": LogLevel.DEBUG,
    "debug": LogLevel.DEBUG,
    "i": LogLevel.INFO,
    "info": LogLevel.INFO,
    "w": LogLevel.WARNING,
    "warn": LogLevel.WARNING,
    "warning": LogLevel.WARNING,
    "e": LogLevel.ERROR,
    "error": LogLevel.ERROR,
    "f": LogLevel.FATAL,
    "fatal": LogLevel.FATAL,
    "p": LogLevel.PANIC,
    "panic": LogLevel.PANIC,
}

_PYTHON_LEVELS = {
    LogLevel.TRACE: logging.DEBUG,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.FATAL: logging.CRITICAL,
    LogLevel.PANIC: logging.CRITICAL,
}


class ClickEchoHandler(logging.Handler):
    """Пишет записи в stderr через click.echo (работает и под CliRunner)."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def parse_log_level(value: str | None) -> LogLevel:
    """Разобрать уровень без учёта регистра; неизвестное значение — info."""
    if not value:
        return LogLevel.INFO
    return _ALIASES.get(value.strip().lower(), LogLevel.INFO)


def configure_logging(level: LogLevel) -> logging.Logger:
    """Настроить логгер пакета; повторный вызов только меняет уровень."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_PYTHON_LEVELS[level])

    if not any(isinstance(h, ClickEchoHandler) for h in logger.handlers):
        handler = ClickEchoHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s level=%(levelname)s msg=%(message)s")
        )
        logger.addHandler(handler)
    return logger
