"""Проверка документа config.json по JSON Schema до записи на диск."""

import json
from functools import lru_cache
from pathlib import Path

import jsonschema

_SCHEMA_PATH = Path(__file__).parent.parent / "schemas" / "docker-config.schema.json"


@lru_cache(maxsize=1)
def _docker_config_validator() -> jsonschema.Draft7Validator:
    schema = json.loads(_SCHEMA_PATH.read_text(encoding="utf-8"))
    return jsonschema.Draft7Validator(schema)


def validate_docker_config(document: dict) -> list[str]:
    """Вернуть ошибки документа; пустой список — документ валиден.

    Значения auth в сообщения не попадают: там закодированный пароль.
    """
    errors = sorted(
        _docker_config_validator().iter_errors(document),
        key=lambda e: list(e.absolute_path),
    )
    return [_describe(e) for e in errors]


def _describe(error: jsonschema.ValidationError) -> str:
    where = "/".join(str(p) for p in error.absolute_path) or "root"
    if error.validator in ("pattern", "minLength") and error.absolute_path and error.absolute_path[-1] == "auth":
        return f"{where}: auth must be a non-empty base64 string"
    return f"{where}: {error.message}"
