import json
import logging
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from vela_kaniko.errors import PluginError
from vela_kaniko.models.config import SETTINGS, SettingKind
from vela_kaniko.services.command_builder import build_plugin_command, validate_plugin
from vela_kaniko.services.config_loader import load_plugin_config
from vela_kaniko.services.log_level import configure_logging, parse_log_level
from vela_kaniko.services.plugin import run_plugin

logger = logging.getLogger(__name__)

_CLICK_TYPES = {
    SettingKind.STRING: click.STRING,
    SettingKind.BOOL: click.BOOL,
    SettingKind.INT: click.INT,
    SettingKind.LIST: click.STRING,
}


class AliasedGroup(click.Group):
    _aliases = {"b": "build", "exec": "build", "r": "render"}

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, self._aliases.get(cmd_name, cmd_name))


def plugin_options(func):
    """Добавить команде все настройки плагина из SETTINGS и --config."""
    for setting in reversed(SETTINGS):
        func = click.option(
            setting.flag,
            setting.name,
            type=_CLICK_TYPES[setting.kind],
            default=None,
            envvar=setting.envvars or None,
            show_envvar=True,
            help=setting.help,
        )(func)
    return click.option(
        "--config",
        "-c",
        "config_path",
        default=None,
        envvar="PARAMETER_CONFIG",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="YAML file with plugin settings",
    )(func)


@click.group(cls=AliasedGroup)
@click.version_option(package_name="vela-kaniko")
def cli():
    """Vela Kaniko plugin for building and publishing images."""
    pass


@cli.command("build")
@plugin_options
def build(config_path, **values):
    """Build the image with kaniko and publish it to the registry."""
    config, run = _load_config(config_path, values)
    level = parse_log_level(run.log_level)
    configure_logging(level)

    logger.info(
        "Vela Kaniko Plugin (code: https://github.com/go-vela/vela-kaniko, "
        "docs: https://go-vela.github.io/docs/plugins/registry/pipeline/kaniko)"
    )

    try:
        run_plugin(config, level, binary=run.executor, docker_config=run.docker_config)
    except PluginError as e:
        raise click.ClickException(str(e))


@cli.command("render")
@plugin_options
@click.option("--json", "as_json", is_flag=True, default=False, help="Print arguments as a JSON array")
def render(config_path, as_json, **values):
    """Validate the settings and print the kaniko arguments without running anything."""
    config, run = _load_config(config_path, values)
    level = parse_log_level(run.log_level)
    configure_logging(level)

    try:
        args = build_plugin_command(validate_plugin(config), level)
    except PluginError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(args, indent=2))
        return
    for arg in args:
        click.echo(arg)


def _load_config(config_path: Path | None, values: dict):
    try:
        return load_plugin_config(values, config_path)
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML in config file {config_path}: {e}")
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(x) for x in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise click.ClickException(f"Plugin settings validation error: {errors}")
    except ValueError as e:
        raise click.ClickException(str(e))
