"""Тесты для таблицы настроек и загрузчика конфигурации."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from vela_kaniko.models.config import SETTINGS, PluginConfig, RunOptions, SettingKind
from vela_kaniko.services import config_loader
from vela_kaniko.services.config_loader import (
    build_plugin_config,
    load_plugin_config,
    load_yaml_settings,
    parse_value,
    read_parameter_file,
    resolve_settings,
)

_BY_NAME = {s.name: s for s in SETTINGS}


@pytest.fixture(autouse=True)
def no_parameter_files(monkeypatch):
    """Файлы /vela/... на машине разработчика не должны влиять на тесты."""
    monkeypatch.setattr(config_loader, "read_parameter_file", lambda paths: None)


class TestSettingsTable:

    def test_names_unique(self):
        names = [s.name for s in SETTINGS]
        assert len(names) == len(set(names))

    def test_targets_unique(self):
        targets = [s.target for s in SETTINGS]
        assert len(targets) == len(set(targets))

    def test_parameter_env_and_files(self):
        event = _BY_NAME["build_event"]
        assert event.envvars == ["PARAMETER_EVENT", "KANIKO_EVENT", "VELA_BUILD_EVENT"]
        assert event.files == [
            "/vela/parameters/kaniko/event",
            "/vela/secrets/kaniko/event",
        ]

    def test_vela_labels_from_environment_only(self):
        number = _BY_NAME["label_number"]
        assert number.envvars == ["VELA_BUILD_NUMBER"]
        assert number.files == []
        assert number.kind == SettingKind.INT

    def test_flag_name(self):
        assert _BY_NAME["registry_dry_run"].flag == "--registry-dry-run"

    def test_every_target_exists(self):
        """Каждый target указывает на существующее поле модели."""
        roots = {"run": RunOptions, **{n: f.annotation for n, f in PluginConfig.model_fields.items()}}
        for setting in SETTINGS:
            root, *path = setting.target.split(".")
            model = roots[root]
            for part in path:
                assert part in model.model_fields, setting.target
                model = model.model_fields[part].annotation


class TestParseValue:

    def test_list_from_comma_string(self):
        tags = _BY_NAME["repo_tags"]
        assert parse_value(tags, "latest, 1.0.0,,") == ["latest", "1.0.0"]

    def test_list_from_yaml_list(self):
        assert parse_value(_BY_NAME["repo_tags"], ["latest", 1]) == ["latest", "1"]

    def test_yaml_number_for_string_setting(self):
        assert parse_value(_BY_NAME["registry_password"], 123456) == "123456"
        assert parse_value(_BY_NAME["build_tag"], 1.0) == "1.0"

    def test_yaml_scalar_for_list_setting(self):
        assert parse_value(_BY_NAME["repo_tags"], 1.0) == ["1.0"]

    def test_scalars_untouched(self):
        assert parse_value(_BY_NAME["registry_dry_run"], "true") == "true"


class TestReadParameterFile:

    def test_first_existing_file_wins(self, tmp_path):
        second = tmp_path / "secrets"
        second.write_text("from-secrets\n")
        third = tmp_path / "other"
        third.write_text("other")
        paths = [str(tmp_path / "missing"), str(second), str(third)]
        assert read_parameter_file(paths) == "from-secrets"

    def test_nothing_found(self, tmp_path):
        assert read_parameter_file([str(tmp_path / "missing")]) is None

    def test_directory_is_skipped(self, tmp_path):
        target = tmp_path / "value"
        target.write_text("ok")
        assert read_parameter_file([str(tmp_path), str(target)]) == "ok"


class TestResolveSettings:

    def test_defaults(self):
        values = resolve_settings({})
        assert values["image_context"] == "."
        assert values["image_dockerfile"] == "Dockerfile"
        assert values["registry_name"] == "index.docker.io"
        assert values["repo_tags"] == ["latest"]
        assert values["log_level"] == "info"
        assert "build_event" not in values

    def test_cli_beats_yaml(self):
        values = resolve_settings({"repo_name": "cli/repo"}, {"repo_name": "yaml/repo"})
        assert values["repo_name"] == "cli/repo"

    def test_yaml_beats_default(self):
        values = resolve_settings({}, {"repo_tags": ["stable"]})
        assert values["repo_tags"] == ["stable"]

    def test_files_used_when_nothing_else(self, monkeypatch):
        def fake_read(paths):
            return "from-file" if paths == _BY_NAME["registry_password"].files else None

        monkeypatch.setattr(config_loader, "read_parameter_file", fake_read)
        values = resolve_settings({}, {})
        assert values["registry_password"] == "from-file"

    def test_yaml_beats_files(self, monkeypatch):
        monkeypatch.setattr(config_loader, "read_parameter_file", lambda paths: "from-file")
        values = resolve_settings({}, {"repo_name": "yaml/repo"})
        assert values["repo_name"] == "yaml/repo"
        assert values["build_event"] == "from-file"

    def test_file_list_value_split(self, monkeypatch):
        monkeypatch.setattr(
            config_loader, "read_parameter_file",
            lambda paths: "a,b" if paths == _BY_NAME["repo_tags"].files else None,
        )
        assert resolve_settings({})["repo_tags"] == ["a", "b"]


class TestBuildPluginConfig:

    def test_nested_targets(self):
        config, run = build_plugin_config({
            "build_event": "push",
            "build_sha": "abc",
            "registry_dry_run": "true",
            "registry_push_retry": "2",
            "repo_tags": ["latest"],
            "label_custom": ["team=platform"],
            "label_number": "42",
            "log_level": "debug",
            "executor": "/usr/local/bin/executor",
        })
        assert config.build.commit_sha == "abc"
        assert config.registry.dry_run is True
        assert config.registry.push_retry == 2
        assert config.repo.label.custom_set == ["team=platform"]
        assert config.repo.label.number == 42
        assert run.log_level == "debug"
        assert run.executor == "/usr/local/bin/executor"
        assert run.docker_config == "/kaniko/.docker/config.json"

    def test_bad_bool_rejected(self):
        with pytest.raises(ValidationError):
            build_plugin_config({"registry_dry_run": "maybe"})


class TestYamlSettings:

    def test_sections_flattened(self, tmp_path):
        path = tmp_path / "kaniko.yaml"
        path.write_text(
            "log_level: debug\n"
            "build:\n"
            "  snapshot_mode: redo\n"
            "repo:\n"
            "  name: index.docker.io/octocat/hello-world\n"
            "  tags: [latest, '1.0.0']\n"
            "label:\n"
            "  custom: ['team=platform']\n",
            encoding="utf-8",
        )
        assert load_yaml_settings(path) == {
            "log_level": "debug",
            "build_snapshot_mode": "redo",
            "repo_name": "index.docker.io/octocat/hello-world",
            "repo_tags": ["latest", "1.0.0"],
            "label_custom": ["team=platform"],
        }

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_yaml_settings(path) == {}

    def test_unknown_setting(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("repo:\n  nmae: typo\n", encoding="utf-8")
        with pytest.raises(ValueError, match="repo_nmae"):
            load_yaml_settings(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_yaml_settings(path)

    def test_load_plugin_config(self, tmp_path):
        path = tmp_path / "kaniko.yaml"
        path.write_text(
            "build: {event: push, sha: abc}\n"
            "registry: {dry_run: true}\n"
            "repo: {name: octocat/hello-world, cache: true}\n",
            encoding="utf-8",
        )
        config, _ = load_plugin_config({"repo_name": "octocat/override"}, Path(path))
        assert config.build.event == "push"
        assert config.registry.dry_run is True
        assert config.repo.cache is True
        assert config.repo.name == "octocat/override"
        assert config.repo.tags == ["latest"]

    def test_yaml_numbers_as_strings(self, tmp_path):
        path = tmp_path / "kaniko.yaml"
        path.write_text(
            "registry: {username: octocat, password: 123456}\n"
            "build: {tag: 1.0}\n"
            "repo: {tags: 1.0}\n",
            encoding="utf-8",
        )
        config, _ = load_plugin_config({}, path)
        assert config.registry.password == "123456"
        assert config.build.tag_ref == "1.0"
        assert config.repo.tags == ["1.0"]
