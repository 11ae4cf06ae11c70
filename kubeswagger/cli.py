import asyncio
import functools
import json
from collections.abc import Callable, Collection
from typing import Any

import aiohttp
import click

from kubeswagger._cogs.clients import api, fetching
from kubeswagger._cogs.configs import configuration
from kubeswagger._cogs.helpers import errors, loaders, loggers
from kubeswagger._cogs.structs import credentials, specs
from kubeswagger._core import client as clients


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        if isinstance(value, loggers.LogFormat):
            return value
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='plain')
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.PLAIN,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet, log_format=log_format)
        return fn(*args, **kwargs)

    return wrapper


@click.version_option(prog_name='kubeswagger')
@click.group(name='kubeswagger', context_settings=dict(
    auto_envvar_prefix='KUBESWAGGER',
))
def main() -> None:
    pass


@main.command()
@logging_options
@click.option('-c', '--crd', 'crds', type=click.Path(exists=True, dir_okay=False), multiple=True)
@click.option('-g', '--grep', type=str, default=None)
@click.argument('spec_file', type=click.Path(exists=True, dir_okay=False))
def routes(
        spec_file: str,
        crds: Collection[str],
        grep: str | None,
) -> None:
    """ List the routes of an API spec file, optionally extended with CRDs. """
    try:
        client = clients.Client.from_file(spec_file)
        for crd_file in crds:
            client.add_custom_resource_definition(loaders.load_file(crd_file))
    except (errors.ClientError, ValueError) as e:
        raise click.ClickException(str(e))

    for route in client.routes():
        if grep is None or grep in route.url:
            verbs = ','.join(sorted(route.verbs)) or '-'
            streams = ','.join(route.streams)
            click.echo(f"{route.url}  {verbs}" + (f"  [{streams}]" if streams else ""))


@main.command()
@logging_options
@click.option('-s', '--server', type=str, required=True)
@click.option('-t', '--token', type=str, default=None)
@click.option('--ca', 'ca_path', type=click.Path(exists=True, dir_okay=False), default=None)
@click.option('--insecure', is_flag=True, default=False)
@click.option('-o', '--output', type=click.File('w'), default='-')
def fetch(
        server: str,
        token: str | None,
        ca_path: str | None,
        insecure: bool,
        output: Any,
) -> None:
    """ Download the API spec from the API server. """
    info = credentials.ConnectionInfo(
        server=server,
        ca_path=ca_path,
        insecure=insecure,
        scheme='Bearer' if token else None,
        token=token,
    )
    try:
        spec = asyncio.run(_fetch(info))
    except (fetching.SpecRetrievalError, aiohttp.ClientError) as e:
        raise click.ClickException(str(e))
    json.dump(spec, output)
    output.write('\n')


async def _fetch(info: credentials.ConnectionInfo) -> specs.RawSpec:
    settings = configuration.ClientSettings()
    async with api.AiohttpBackend(info, settings=settings) as backend:
        return await fetching.fetch_spec(backend, settings=settings)
