"""Output formatters for CLI.

Payloads are plain dicts built by the ``to_dict`` methods of the normalized
records, so key order here is the order the record chose.
"""

from __future__ import annotations

import json

import yaml

from .errors import CliToolsError

OUTPUT_FORMATS = ("yaml", "json")


class _BlockDumper(yaml.SafeDumper):
    pass


def _represent_str(dumper: yaml.SafeDumper, value: str):
    # Multi-line values (compose files, nginx snippets) are emitted as literal blocks.
    if "\n" in value:
        return dumper.represent_scalar("tag:yaml.org,2002:str", value, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", value)


_BlockDumper.add_representer(str, _represent_str)


def format_yaml(data: dict) -> str:
    return yaml.dump(
        data,
        Dumper=_BlockDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        indent=2,
    )


def format_json(data: dict) -> str:
    """Full JSON passthrough."""
    return json.dumps(data, indent=2)


def render(data: dict, output: str = "yaml") -> str:
    if output == "json":
        return format_json(data)
    return format_yaml(data).rstrip("\n")


def error_envelope(err: CliToolsError) -> dict:
    return {"error": {"code": err.code, "message": err.message}}


def format_error(err: CliToolsError, output: str = "yaml") -> str:
    """Render the error envelope, or a plain ``error: ...`` line if that fails."""
    try:
        return render(error_envelope(err), output)
    except (yaml.YAMLError, TypeError, ValueError):
        return f"error: {err.message}"
