"""portainer-cli: inspect Portainer stacks, endpoints and containers from the terminal."""

from __future__ import annotations

import click

from . import __version__
from .cli_common import emit_data, exit_with_error, output_option, parse_id, verbose_option
from .config import resolve_portainer_settings, resolve_status_scheme
from .errors import CliToolsError
from .labels import ENDPOINT_STATUS_SCHEMES, endpoint_status_table
from .log import configure_logging
from .portainer import PortainerClient, container_list, endpoint_list, stack_list


def _get_client(ctx: click.Context) -> PortainerClient:
    settings = resolve_portainer_settings(ctx.obj["url"], ctx.obj["token"])
    return PortainerClient(settings.base_url, settings.token)


def _status_labels(ctx: click.Context):
    return endpoint_status_table(resolve_status_scheme(ctx.obj["endpoint_status_labels"]))


@click.group()
@click.version_option(__version__, prog_name="portainer-cli")
@click.option("--url", default=None, help="Portainer URL (or set PORTAINER_URL)")
@click.option("--token", default=None, help="API token (or set PORTAINER_TOKEN)")
@click.option(
    "--endpoint-status-labels",
    default=None,
    type=click.Choice(list(ENDPOINT_STATUS_SCHEMES)),
    help="Endpoint status label scheme (or set PORTAINER_ENDPOINT_STATUS_LABELS). Default: up-down.",
)
@output_option
@verbose_option
@click.pass_context
def main(ctx, url: str | None, token: str | None, endpoint_status_labels: str | None, output: str, verbose: bool):
    """CLI for the Portainer API."""
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["url"] = url
    ctx.obj["token"] = token
    ctx.obj["endpoint_status_labels"] = endpoint_status_labels
    ctx.obj["output"] = output


# ---------------------------------------------------------------------------
# stacks
# ---------------------------------------------------------------------------


@main.group()
def stacks():
    """Manage stacks."""


@stacks.command(name="list")
@click.pass_context
def stacks_list(ctx):
    """List all stacks."""
    try:
        with _get_client(ctx) as client:
            data = stack_list(client.list_stacks())
        emit_data(ctx, data)
    except CliToolsError as e:
        exit_with_error(ctx, e)


@stacks.command(name="show")
@click.argument("stack_id", metavar="ID")
@click.pass_context
def stacks_show(ctx, stack_id):
    """Show a stack by ID, including its env and stack file."""
    try:
        parsed_id = parse_id(stack_id)
        with _get_client(ctx) as client:
            stack = client.show_stack(parsed_id)
        emit_data(ctx, stack.to_dict())
    except CliToolsError as e:
        exit_with_error(ctx, e)


# ---------------------------------------------------------------------------
# endpoints
# ---------------------------------------------------------------------------


@main.group()
def endpoints():
    """Manage endpoints."""


@endpoints.command(name="list")
@click.pass_context
def endpoints_list(ctx):
    """List all endpoints."""
    try:
        status_labels = _status_labels(ctx)
        with _get_client(ctx) as client:
            data = endpoint_list(client.list_endpoints(), status_labels)
        emit_data(ctx, data)
    except CliToolsError as e:
        exit_with_error(ctx, e)


@endpoints.command(name="show")
@click.argument("endpoint_id", metavar="ID")
@click.pass_context
def endpoints_show(ctx, endpoint_id):
    """Show an endpoint by ID."""
    try:
        parsed_id = parse_id(endpoint_id)
        status_labels = _status_labels(ctx)
        with _get_client(ctx) as client:
            endpoint = client.get_endpoint(parsed_id)
        emit_data(ctx, endpoint.to_endpoint(status_labels).to_dict())
    except CliToolsError as e:
        exit_with_error(ctx, e)


@stacks.command(name="containers")
@click.argument("stack_id", metavar="ID")
@click.pass_context
def stacks_containers(ctx, stack_id):
    """List the containers belonging to a stack."""
    try:
        parsed_id = parse_id(stack_id)
        with _get_client(ctx) as client:
            data = container_list(client.stack_containers(parsed_id))
        emit_data(ctx, data)
    except CliToolsError as e:
        exit_with_error(ctx, e)


# ---------------------------------------------------------------------------
# containers
# ---------------------------------------------------------------------------


@main.group()
def containers():
    """Manage containers."""


@containers.command(name="list")
@click.option("--endpoint", "endpoint_id", default=None, metavar="ID", help="Only list containers on this endpoint.")
@click.pass_context
def containers_list(ctx, endpoint_id):
    """List running containers across all endpoints."""
    try:
        parsed_id = parse_id(endpoint_id) if endpoint_id is not None else None
        with _get_client(ctx) as client:
            data = container_list(client.all_containers(parsed_id))
        emit_data(ctx, data)
    except CliToolsError as e:
        exit_with_error(ctx, e)
