"""Запись config.json с авторизацией в реестре для kaniko.

Формат файла:
{
  "auths": {
    "index.docker.io": {
      "auth": "<base64(username:password)>"
    }
  }
}
"""

import base64
import json
import logging
from pathlib import Path

from vela_kaniko.errors import CredentialsError
from vela_kaniko.models.config import DOCKER_CONFIG_PATH
from vela_kaniko.models.registry import RegistryInfo
from vela_kaniko.services.validator import validate_docker_config

logger = logging.getLogger(__name__)


def basic_auth(username: str, password: str) -> str:
    return base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")


def build_docker_config(registry: RegistryInfo) -> dict:
    return {
        "auths": {
            registry.name: {
                "auth": basic_auth(registry.username, registry.password),
            }
        }
    }


def write_credentials(
    registry: RegistryInfo,
    path: str | Path = DOCKER_CONFIG_PATH,
) -> Path | None:
    """Записать config.json для kaniko.

    Если не хватает name, username или password — ничего не пишем и
    возвращаем None: dry run без авторизации не должен падать.
    Иначе возвращаем путь к записанному файлу.
    """
    if not registry.has_credentials:
        logger.debug("registry credentials not provided, skipping %s", path)
        return None

    document = build_docker_config(registry)
    errors = validate_docker_config(document)
    if errors:
        raise CredentialsError(
            f"invalid registry credential file for {registry.name}: {'; '.join(errors)}"
        )

    out_path = Path(path)
    logger.debug("writing registry configuration file %s", out_path)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)
            f.write("\n")
    except OSError as e:
        raise CredentialsError(f"unable to write registry credentials to {out_path}: {e}") from e

    return out_path
