"""Integer enum code to label tables.

Every lookup is total: codes missing from a table render as ``unknown(<code>)``.
"""

from types import MappingProxyType
from typing import Mapping

STACK_TYPES: Mapping[int, str] = MappingProxyType(
    {
        1: "swarm",
        2: "compose",
        3: "kubernetes",
    }
)

STACK_STATUSES: Mapping[int, str] = MappingProxyType(
    {
        1: "active",
        2: "inactive",
    }
)

ENDPOINT_TYPES: Mapping[int, str] = MappingProxyType(
    {
        1: "docker",
        2: "agent",
        3: "azure",
        4: "edge-agent",
        5: "kubernetes",
    }
)

# Portainer endpoint status codes have been rendered two ways; the scheme is picked
# by name rather than hard-coded.
ENDPOINT_STATUS_SCHEMES: Mapping[str, Mapping[int, str]] = MappingProxyType(
    {
        "up-down": MappingProxyType({1: "up", 2: "down"}),
        "active-inactive": STACK_STATUSES,
    }
)

DEFAULT_ENDPOINT_STATUS_SCHEME = "up-down"


def label(table: Mapping[int, str], code: int) -> str:
    """Return the label for ``code`` or ``unknown(<code>)``."""
    try:
        return table[code]
    except (KeyError, TypeError):
        return f"unknown({code})"


def endpoint_status_table(scheme: str) -> Mapping[int, str]:
    return ENDPOINT_STATUS_SCHEMES[scheme]
