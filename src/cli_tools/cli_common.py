"""Helpers shared by the portainer-cli and nproxy-cli command trees."""

from __future__ import annotations

import sys

import click
import yaml

from .errors import ApiError, CliToolsError, ConfigError
from .formatters import OUTPUT_FORMATS, format_error, render

output_option = click.option(
    "--output",
    "-o",
    default="yaml",
    show_default=True,
    type=click.Choice(OUTPUT_FORMATS),
    help="Output format.",
)

verbose_option = click.option("--verbose", "-v", is_flag=True, help="Log HTTP requests to stderr.")


def _resolve_output_mode(ctx: click.Context) -> str:
    return (ctx.obj or {}).get("output", "yaml")


def emit_data(ctx: click.Context, data: dict) -> None:
    """Serialize a normalized payload to stdout.

    Rendering happens before anything is written, so a payload that cannot be
    serialized produces an error and no partial output.
    """
    try:
        text = render(data, _resolve_output_mode(ctx))
    except (yaml.YAMLError, TypeError, ValueError) as exc:
        raise ApiError(f"failed to serialize: {exc}") from exc
    click.echo(text)


def exit_with_error(ctx: click.Context, err: CliToolsError) -> None:
    click.echo(format_error(err, _resolve_output_mode(ctx)), err=True)
    sys.exit(err.exit_code)


def parse_id(raw_value: str) -> int:
    try:
        parsed = int(raw_value)
    except ValueError as exc:
        raise ConfigError(f"invalid ID: {raw_value}") from exc
    if parsed <= 0:
        raise ConfigError("ID must be positive")
    return parsed
