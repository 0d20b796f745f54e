from __future__ import annotations

import sys

import click

from openref.cli.commands.data import Data
from openref.cli.commands.resolve import resolve as resolve_command
from openref.config import ConfigError, OpenRefConfig

if sys.version_info < (3, 11):
    from tomli import TOMLDecodeError
else:
    from tomllib import TOMLDecodeError

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(context_settings=CONTEXT_SETTINGS)  # type: ignore[untyped-decorator]
@click.option(  # type: ignore[untyped-decorator]
    "--config-file",
    "config_file",
    help="The path to `openref.toml` file to use for configuration",
    metavar="PATH",
    type=str,
)
@click.pass_context  # type: ignore[untyped-decorator]
@click.version_option(package_name="openref")  # type: ignore[untyped-decorator]
def openref(ctx: click.Context, config_file: str | None) -> None:
    """Resolve `$ref` links in OpenAPI documents."""
    try:
        if config_file is not None:
            config = OpenRefConfig.from_path(config_file)
        else:
            config = OpenRefConfig.discover()
    except FileNotFoundError:
        click.secho(f"❌  Failed to load configuration file from {config_file}", fg="red", bold=True)
        click.echo("\nThe configuration file does not exist")
        ctx.exit(1)
    except PermissionError:
        click.secho(f"❌  Failed to load configuration file from {config_file}", fg="red", bold=True)
        click.echo("\nPermission denied")
        ctx.exit(1)
    except (TOMLDecodeError, ConfigError) as exc:
        click.secho(
            f"❌  Failed to load configuration file{f' from {config_file}' if config_file else ''}",
            fg="red",
            bold=True,
        )
        click.echo(f"\nThe loaded configuration is incorrect\n\n{exc}")
        ctx.exit(1)
    ctx.obj = Data(config=config)


resolve = openref.command(
    short_help="Resolve all references in an API document",
    context_settings=CONTEXT_SETTINGS,
)(resolve_command)
