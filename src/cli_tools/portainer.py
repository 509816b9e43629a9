"""Portainer stacks, endpoints and containers: raw API records, normalized output, and client."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Mapping

import httpx
import structlog

from .client import DEFAULT_TIMEOUT, Resource, RestClient, api_key_headers, text_field
from .errors import NotFoundError
from .labels import (
    DEFAULT_ENDPOINT_STATUS_SCHEME,
    ENDPOINT_TYPES,
    STACK_STATUSES,
    STACK_TYPES,
    endpoint_status_table,
    label,
)

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Raw records (Portainer JSON)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RawEnvVar:
    name: str
    value: str

    @classmethod
    def from_api(cls, data: dict) -> RawEnvVar:
        return cls(name=text_field(data, "name"), value=str(data.get("value") or ""))

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value}


@dataclass(frozen=True)
class RawStack:
    id: int
    name: str
    type: int
    status: int
    endpoint_id: int
    env: tuple[RawEnvVar, ...] = ()

    @classmethod
    def from_api(cls, data: dict) -> RawStack:
        # Portainer sends "Env": null for stacks without variables.
        env = data.get("Env") or []
        return cls(
            id=int(data["Id"]),
            name=text_field(data, "Name"),
            type=int(data["Type"]),
            status=int(data["Status"]),
            endpoint_id=int(data["EndpointId"]),
            env=tuple(RawEnvVar.from_api(item) for item in env),
        )

    def to_list_item(self) -> StackListItem:
        return StackListItem(
            id=self.id,
            name=self.name,
            type=label(STACK_TYPES, self.type),
            status=label(STACK_STATUSES, self.status),
            endpoint_id=self.endpoint_id,
        )

    def to_stack(self, stack_file: str | None = None) -> Stack:
        return Stack(
            id=self.id,
            name=self.name,
            type=label(STACK_TYPES, self.type),
            status=label(STACK_STATUSES, self.status),
            endpoint_id=self.endpoint_id,
            env=self.env,
            stack_file=stack_file,
        )


@dataclass(frozen=True)
class RawStackFile:
    content: str

    @classmethod
    def from_api(cls, data: dict) -> RawStackFile:
        return cls(content=text_field(data, "StackFileContent"))


@dataclass(frozen=True)
class RawEndpoint:
    id: int
    name: str
    type: int
    status: int
    url: str

    @classmethod
    def from_api(cls, data: dict) -> RawEndpoint:
        return cls(
            id=int(data["Id"]),
            name=text_field(data, "Name"),
            type=int(data["Type"]),
            status=int(data["Status"]),
            url=str(data.get("URL") or ""),
        )

    def to_endpoint(self, status_labels: Mapping[int, str] | None = None) -> Endpoint:
        if status_labels is None:
            status_labels = endpoint_status_table(DEFAULT_ENDPOINT_STATUS_SCHEME)
        return Endpoint(
            id=self.id,
            name=self.name,
            type=label(ENDPOINT_TYPES, self.type),
            status=label(status_labels, self.status),
            url=self.url,
        )


COMPOSE_PROJECT_LABEL = "com.docker.compose.project"


def _format_created(unix: int) -> str:
    if not unix:
        return ""
    return datetime.fromtimestamp(unix, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _health(status: str) -> str:
    # Docker folds health into the status text, e.g. "Up 2 hours (healthy)".
    status = status.lower()
    if "(healthy)" in status:
        return "healthy"
    if "(unhealthy)" in status:
        return "unhealthy"
    if "(health: starting)" in status:
        return "starting"
    return "none"


@dataclass(frozen=True)
class RawPort:
    private_port: int
    public_port: int
    type: str

    @classmethod
    def from_api(cls, data: dict) -> RawPort:
        return cls(
            private_port=int(data.get("PrivatePort") or 0),
            public_port=int(data.get("PublicPort") or 0),
            type=str(data.get("Type") or ""),
        )


@dataclass(frozen=True)
class RawContainer:
    """One entry of the Docker ``containers/json`` listing proxied by Portainer."""

    id: str
    names: tuple[str, ...]
    image: str
    state: str
    status: str
    created: int
    ports: tuple[RawPort, ...] = ()
    labels: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict) -> RawContainer:
        return cls(
            id=text_field(data, "Id"),
            names=tuple(str(name) for name in data.get("Names") or []),
            image=str(data.get("Image") or ""),
            state=str(data.get("State") or ""),
            status=str(data.get("Status") or ""),
            created=int(data.get("Created") or 0),
            ports=tuple(RawPort.from_api(port) for port in data.get("Ports") or []),
            labels=dict(data.get("Labels") or {}),
        )

    @property
    def compose_project(self) -> str:
        return self.labels.get(COMPOSE_PROJECT_LABEL, "")

    def to_list_item(self, endpoint_id: int) -> ContainerListItem:
        name = self.names[0].removeprefix("/") if self.names else ""
        return ContainerListItem(
            id=self.id[:12],
            name=name,
            image=self.image,
            state=self.state,
            stack=self.compose_project,
            endpoint=endpoint_id,
            ports=tuple(Port(host=p.public_port, container=p.private_port, protocol=p.type) for p in self.ports),
            created=_format_created(self.created),
            health=_health(self.status),
        )


# ---------------------------------------------------------------------------
# Normalized output records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StackListItem:
    id: int
    name: str
    type: str
    status: str
    endpoint_id: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "status": self.status,
            "endpointId": self.endpoint_id,
        }


@dataclass(frozen=True)
class Stack:
    """Stack detail; ``env`` and ``stackFile`` are dropped from output when empty."""

    id: int
    name: str
    type: str
    status: str
    endpoint_id: int
    env: tuple[RawEnvVar, ...] = ()
    stack_file: str | None = None

    def to_dict(self) -> dict:
        out = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "status": self.status,
            "endpointId": self.endpoint_id,
        }
        if self.env:
            out["env"] = [var.to_dict() for var in self.env]
        if self.stack_file:
            out["stackFile"] = self.stack_file
        return out


@dataclass(frozen=True)
class Endpoint:
    id: int
    name: str
    type: str
    status: str
    url: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "status": self.status,
            "url": self.url,
        }


@dataclass(frozen=True)
class Port:
    host: int
    container: int
    protocol: str

    def to_dict(self) -> dict:
        # Unpublished ports have no host side.
        out = {"host": self.host} if self.host else {}
        out.update({"container": self.container, "protocol": self.protocol})
        return out


@dataclass(frozen=True)
class ContainerListItem:
    id: str
    name: str
    image: str
    state: str
    stack: str
    endpoint: int
    ports: tuple[Port, ...]
    created: str
    health: str

    def to_dict(self) -> dict:
        out = {
            "id": self.id,
            "name": self.name,
            "image": self.image,
            "state": self.state,
            "stack": self.stack,
            "endpoint": self.endpoint,
        }
        if self.ports:
            out["ports"] = [p.to_dict() for p in self.ports]
        out["created"] = self.created
        out["health"] = self.health
        return out


def stack_list(stacks: list[RawStack]) -> dict:
    return {"stacks": [s.to_list_item().to_dict() for s in stacks]}


def endpoint_list(endpoints: list[RawEndpoint], status_labels: Mapping[int, str] | None = None) -> dict:
    return {"endpoints": [e.to_endpoint(status_labels).to_dict() for e in endpoints]}


def container_list(items: list[ContainerListItem]) -> dict:
    return {"containers": [c.to_dict() for c in items]}


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

STACKS = Resource("stack", "/api/stacks", RawStack.from_api)
ENDPOINTS = Resource("endpoint", "/api/endpoints", RawEndpoint.from_api)


def containers_resource(endpoint_id: int) -> Resource:
    """Running containers of one endpoint, via Portainer's Docker API proxy."""
    return Resource("container", f"{ENDPOINTS.item_path(endpoint_id)}/docker/containers/json", RawContainer.from_api)


class PortainerClient(RestClient):
    """Portainer API client authenticated with an ``X-API-Key`` token."""

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        super().__init__(
            base_url,
            headers=api_key_headers(token),
            timeout=timeout,
            transport=transport,
        )

    def list_stacks(self) -> list[RawStack]:
        return self.fetch_all(STACKS)

    def get_stack_file(self, stack_id: int) -> RawStackFile:
        return self.get_as(f"{STACKS.item_path(stack_id)}/file", RawStackFile.from_api)

    def find_stack(self, stack_id: int) -> RawStack:
        """Resolve a stack from the full list; its endpoint is only known from there."""
        stack = next((s for s in self.list_stacks() if s.id == stack_id), None)
        if stack is None:
            raise NotFoundError(f"{STACKS.name} with ID {stack_id}")
        log.debug("stack_resolved", stack_id=stack_id, endpoint_id=stack.endpoint_id)
        return stack

    def show_stack(self, stack_id: int) -> Stack:
        """Resolve a stack from the list, then fetch its compose file.

        The list lookup runs first so an unknown ID fails with NOT_FOUND without
        touching the file endpoint.
        """
        stack = self.find_stack(stack_id)
        stack_file = self.get_stack_file(stack_id)
        return stack.to_stack(stack_file.content)

    def stack_containers(self, stack_id: int) -> list[ContainerListItem]:
        """Containers of one stack, matched by compose project name and sorted by name."""
        stack = self.find_stack(stack_id)
        items = [
            c.to_list_item(stack.endpoint_id)
            for c in self.list_containers(stack.endpoint_id)
            if c.compose_project == stack.name
        ]
        return sorted(items, key=lambda c: c.name)

    def list_endpoints(self) -> list[RawEndpoint]:
        return self.fetch_all(ENDPOINTS)

    def get_endpoint(self, endpoint_id: int) -> RawEndpoint:
        return self.fetch(ENDPOINTS, endpoint_id)

    def list_containers(self, endpoint_id: int) -> list[RawContainer]:
        return self.fetch_all(containers_resource(endpoint_id))

    def all_containers(self, endpoint_id: int | None = None) -> list[ContainerListItem]:
        """Containers on one endpoint, or on every endpoint, sorted by endpoint then name."""
        if endpoint_id is not None:
            endpoint_ids = [endpoint_id]
        else:
            endpoint_ids = [e.id for e in self.list_endpoints()]
        items = [c.to_list_item(eid) for eid in endpoint_ids for c in self.list_containers(eid)]
        return sorted(items, key=lambda c: (c.endpoint, c.name))
