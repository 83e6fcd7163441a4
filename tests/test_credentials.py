"""Тесты для записи config.json и его проверки по JSON Schema."""

import base64
import json
from unittest.mock import patch

import pytest

from vela_kaniko.errors import CredentialsError
from vela_kaniko.models.registry import RegistryInfo
from vela_kaniko.services.credentials import basic_auth, build_docker_config, write_credentials
from vela_kaniko.services.validator import validate_docker_config


def _registry(**kwargs) -> RegistryInfo:
    defaults = dict(name="index.docker.io", username="octocat", password="superSecretPassword")
    defaults.update(kwargs)
    return RegistryInfo(**defaults)


class TestWriteCredentials:

    def test_round_trip(self, tmp_path):
        path = tmp_path / ".docker" / "config.json"
        written = write_credentials(_registry(), path)

        assert written == path
        data = json.loads(path.read_text(encoding="utf-8"))
        assert list(data["auths"]) == ["index.docker.io"]
        auth = data["auths"]["index.docker.io"]["auth"]
        assert auth == base64.b64encode(b"octocat:superSecretPassword").decode()
        assert base64.b64decode(auth) == b"octocat:superSecretPassword"

    def test_file_layout(self, tmp_path):
        path = tmp_path / "config.json"
        write_credentials(_registry(), path)
        assert path.read_text(encoding="utf-8") == (
            "{\n"
            '  "auths": {\n'
            '    "index.docker.io": {\n'
            '      "auth": "b2N0b2NhdDpzdXBlclNlY3JldFBhc3N3b3Jk"\n'
            "    }\n"
            "  }\n"
            "}\n"
        )

    def test_dry_run_without_credentials_is_noop(self, tmp_path):
        """Пустые name/username/password — успех и никакой записи."""
        path = tmp_path / "config.json"
        registry = RegistryInfo(name="", username="", password="", dry_run=True)

        assert write_credentials(registry, path) is None
        assert not path.exists()
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.parametrize("missing", ["name", "username", "password"])
    def test_any_missing_field_is_noop(self, tmp_path, missing):
        path = tmp_path / "config.json"
        assert write_credentials(_registry(**{missing: ""}), path) is None
        assert not path.exists()

    def test_write_failure_raises(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        with pytest.raises(CredentialsError, match="unable to write registry credentials"):
            write_credentials(_registry(), blocker / "config.json")

    def test_credentials_error_is_os_error(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        with pytest.raises(OSError):
            write_credentials(_registry(), blocker / "config.json")

    def test_schema_errors_stop_the_write(self, tmp_path):
        path = tmp_path / "config.json"
        with patch(
            "vela_kaniko.services.credentials.validate_docker_config",
            return_value=["auths: broken"],
        ):
            with pytest.raises(CredentialsError, match="auths: broken"):
                write_credentials(_registry(), path)
        assert not path.exists()

    def test_unicode_password(self):
        assert base64.b64decode(basic_auth("octo", "pässwörd")).decode("utf-8") == "octo:pässwörd"


class TestValidateDockerConfig:

    def test_valid_document(self):
        assert validate_docker_config(build_docker_config(_registry())) == []

    def test_missing_auths(self):
        errors = validate_docker_config({})
        assert any("auths" in e for e in errors)

    def test_empty_auths(self):
        assert validate_docker_config({"auths": {}}) != []

    def test_extra_top_level_key(self):
        document = build_docker_config(_registry())
        document["credsStore"] = "desktop"
        assert validate_docker_config(document) != []

    def test_auth_not_base64(self):
        errors = validate_docker_config({"auths": {"index.docker.io": {"auth": "not base64!"}}})
        assert errors == ["auths/index.docker.io/auth: auth must be a non-empty base64 string"]

    def test_auth_value_not_leaked(self):
        errors = validate_docker_config({"auths": {"r": {"auth": "secret value"}}})
        assert all("secret value" not in e for e in errors)
