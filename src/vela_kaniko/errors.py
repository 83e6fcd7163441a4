"""Ошибки плагина.

ConfigError и его наследники — ошибки конфигурации, которые находит
validate_config() у дескрипторов. CredentialsError и ExecutorError —
ошибки ввода-вывода при записи config.json и запуске kaniko.
"""


class PluginError(Exception):
    """Base class for all plugin failures."""


class ConfigError(PluginError, ValueError):
    """Invalid plugin configuration.

    field — setting that failed the check (e.g. "repo.tags")
    value — offending value, if there is one
    """

    def __init__(self, message: str, field: str, value=None):
        super().__init__(message)
        self.field = field
        self.value = value


class MissingFieldError(ConfigError):
    """Required field is empty."""


class InvalidEnumError(ConfigError):
    """Value is outside of a fixed set of options."""


class InvalidFormatError(ConfigError):
    """Malformed tag, custom label or regular expression."""


class OutOfRangeError(ConfigError):
    """Numeric value is outside of the allowed range."""


class ConstraintViolationError(ConfigError):
    """Cross-field rule is broken."""


class CredentialsError(PluginError, OSError):
    """Registry credential file could not be written."""


class ExecutorError(PluginError, RuntimeError):
    """Executor could not be started, streamed, or exited non-zero."""
