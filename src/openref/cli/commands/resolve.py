from __future__ import annotations

import logging

import click

from openref.cli.commands.data import Data
from openref.core.errors import LoaderError, OpenRefError, format_exception
from openref.openapi.references import Engine, make_loader

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@click.argument("location", type=str)  # type: ignore[untyped-decorator]
@click.option(  # type: ignore[untyped-decorator]
    "--external-refs/--no-external-refs",
    "external_refs",
    default=None,
    help="Allow references to other documents",
)
@click.option(  # type: ignore[untyped-decorator]
    "--remote-refs/--no-remote-refs",
    "remote_refs",
    default=None,
    help="Allow loading referenced documents over HTTP(S)",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logs")  # type: ignore[untyped-decorator]
@click.pass_obj  # type: ignore[untyped-decorator]
def resolve(
    data: Data,
    location: str,
    external_refs: bool | None,
    remote_refs: bool | None,
    verbose: bool,
) -> None:
    """Load an API document and resolve every reference in it.

    LOCATION is a path or URL of the document.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT)
    config = data.config
    config.update(external_refs=external_refs, remote_refs=remote_refs)

    try:
        # The root document is always loadable from its own location
        document = make_loader(allow_remote=True, encoding=config.encoding)(location)
        context = Engine.from_config(config).resolve(document)
    except OpenRefError as exc:
        _display_error(location, exc, verbose=verbose)
        raise click.exceptions.Exit(1) from None

    components = document.components
    tables = (
        components.headers,
        components.parameters,
        components.request_bodies,
        components.responses,
        components.schemas,
        components.security_schemes,
        components.examples,
    )
    operations = sum(len(item.operations()) for item in document.paths.values() if item is not None)
    click.secho(f"✅  Resolved {location}", fg="green", bold=True)
    click.echo()
    click.echo(f"  Components:          {sum(len(table) for table in tables if table is not None)}")
    click.echo(f"  Operations:          {operations}")
    click.echo(f"  References followed: {context.references}")
    click.echo(f"  Documents loaded:    {len(context.documents)}")


def _display_error(location: str, error: OpenRefError, *, verbose: bool) -> None:
    click.secho(f"❌  Failed to resolve {location}", fg="red", bold=True)
    click.echo(f"\n{error}")
    if isinstance(error, LoaderError):
        for extra in error.extras:
            click.secho(f"  {extra}", fg="red")
    for note in getattr(error, "__notes__", []):
        click.echo(f"\n{note}")
    if verbose:
        click.secho(f"\n{format_exception(error, with_traceback=True)}", fg="red")
