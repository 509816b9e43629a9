"""nproxy-cli: inspect nginx-proxy-manager hosts and certificates."""

from __future__ import annotations

import click

from . import __version__
from .cli_common import emit_data, exit_with_error, output_option, parse_id, verbose_option
from .config import NPROXY_URL_ENV, resolve_nproxy_settings, resolve_url
from .errors import CliToolsError, ConfigError
from .log import configure_logging
from .nproxy import NproxyClient, certificate_list, login, proxy_host_list


def _get_client(ctx: click.Context) -> NproxyClient:
    settings = resolve_nproxy_settings(ctx.obj["url"], ctx.obj["token"])
    return NproxyClient(settings.base_url, settings.token, insecure=ctx.obj["insecure"])


class _AliasedGroup(click.Group):
    """Group that resolves ``certs`` to ``certificates``."""

    aliases = {"certs": "certificates"}

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(self, ctx, args):
        _, cmd, args = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, args


@click.group(cls=_AliasedGroup)
@click.version_option(__version__, prog_name="nproxy-cli")
@click.option("--url", default=None, help="nginx-proxy-manager URL (or set NPROXY_URL)")
@click.option("--token", default=None, help="API token (or set NPROXY_TOKEN)")
@click.option("--insecure", "-k", is_flag=True, help="Skip TLS certificate verification")
@output_option
@verbose_option
@click.pass_context
def main(ctx, url: str | None, token: str | None, insecure: bool, output: str, verbose: bool):
    """CLI for the nginx-proxy-manager API."""
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["url"] = url
    ctx.obj["token"] = token
    ctx.obj["insecure"] = insecure
    ctx.obj["output"] = output


# ---------------------------------------------------------------------------
# login
# ---------------------------------------------------------------------------


def _prompt(text: str, hide_input: bool = False) -> str:
    try:
        return click.prompt(text, hide_input=hide_input, err=True)
    except click.Abort as exc:
        raise ConfigError(f"failed to read {text.lower()}") from exc


@main.command(name="login")
@click.pass_context
def login_cmd(ctx):
    """Authenticate and print a bearer token.

    Prompts go to stderr so the token can be captured, e.g.
    export NPROXY_TOKEN=$(nproxy-cli login)
    """
    try:
        url = resolve_url(ctx.obj["url"], NPROXY_URL_ENV, require_scheme=True)
        email = _prompt("Email").strip()
        password = _prompt("Password", hide_input=True)
        token = login(url, email, password, insecure=ctx.obj["insecure"])
        click.echo(token)
    except CliToolsError as e:
        exit_with_error(ctx, e)


# ---------------------------------------------------------------------------
# hosts
# ---------------------------------------------------------------------------


@main.group()
def hosts():
    """Manage proxy hosts."""


@hosts.command(name="list")
@click.pass_context
def hosts_list(ctx):
    """List all proxy hosts."""
    try:
        with _get_client(ctx) as client:
            data = proxy_host_list(client.list_proxy_hosts())
        emit_data(ctx, data)
    except CliToolsError as e:
        exit_with_error(ctx, e)


@hosts.command(name="show")
@click.argument("host_id", metavar="ID")
@click.pass_context
def hosts_show(ctx, host_id):
    """Show proxy host details."""
    try:
        parsed_id = parse_id(host_id)
        with _get_client(ctx) as client:
            host = client.get_proxy_host(parsed_id)
        emit_data(ctx, host.to_proxy_host().to_dict())
    except CliToolsError as e:
        exit_with_error(ctx, e)


# ---------------------------------------------------------------------------
# certificates
# ---------------------------------------------------------------------------


@main.group()
def certificates():
    """Manage certificates (alias: certs)."""


@certificates.command(name="list")
@click.pass_context
def certificates_list(ctx):
    """List all certificates."""
    try:
        with _get_client(ctx) as client:
            data = certificate_list(client.list_certificates())
        emit_data(ctx, data)
    except CliToolsError as e:
        exit_with_error(ctx, e)


@certificates.command(name="show")
@click.argument("cert_id", metavar="ID")
@click.pass_context
def certificates_show(ctx, cert_id):
    """Show certificate details."""
    try:
        parsed_id = parse_id(cert_id)
        with _get_client(ctx) as client:
            cert = client.get_certificate(parsed_id)
        emit_data(ctx, cert.to_certificate().to_dict())
    except CliToolsError as e:
        exit_with_error(ctx, e)
