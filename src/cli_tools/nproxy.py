"""nginx-proxy-manager proxy hosts and certificates: raw records, output, client."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from .client import DEFAULT_TIMEOUT, Resource, RestClient, bearer_headers, text_field
from .errors import ApiError, AuthError


def _domain_names(data: dict) -> tuple[str, ...]:
    return tuple(str(name) for name in data.get("domain_names") or [])


# ---------------------------------------------------------------------------
# Raw records (proxy manager JSON)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RawProxyHost:
    id: int
    domain_names: tuple[str, ...]
    forward_scheme: str
    forward_host: str
    forward_port: int
    certificate_id: int | None
    ssl_forced: bool
    block_exploits: bool
    caching_enabled: bool
    allow_websocket_upgrade: bool
    enabled: bool
    advanced_config: str = ""

    @classmethod
    def from_api(cls, data: dict) -> RawProxyHost:
        # certificate_id is 0 (older releases) or null when no certificate is attached.
        cert_id = data.get("certificate_id")
        return cls(
            id=int(data["id"]),
            domain_names=_domain_names(data),
            forward_scheme=text_field(data, "forward_scheme"),
            forward_host=text_field(data, "forward_host"),
            forward_port=int(data["forward_port"]),
            certificate_id=int(cert_id) if cert_id else None,
            ssl_forced=bool(data.get("ssl_forced")),
            block_exploits=bool(data.get("block_exploits")),
            caching_enabled=bool(data.get("caching_enabled")),
            allow_websocket_upgrade=bool(data.get("allow_websocket_upgrade")),
            enabled=bool(data.get("enabled")),
            advanced_config=str(data.get("advanced_config") or ""),
        )

    def to_list_item(self) -> ProxyHostListItem:
        return ProxyHostListItem(
            id=self.id,
            domain_names=self.domain_names,
            forward_host=self.forward_host,
            forward_port=self.forward_port,
            ssl_forced=self.ssl_forced,
            enabled=self.enabled,
        )

    def to_proxy_host(self) -> ProxyHost:
        return ProxyHost(
            id=self.id,
            domain_names=self.domain_names,
            forward_scheme=self.forward_scheme,
            forward_host=self.forward_host,
            forward_port=self.forward_port,
            certificate_id=self.certificate_id,
            ssl_forced=self.ssl_forced,
            block_exploits=self.block_exploits,
            caching_enabled=self.caching_enabled,
            websocket=self.allow_websocket_upgrade,
            enabled=self.enabled,
            advanced_config=self.advanced_config,
        )


@dataclass(frozen=True)
class RawCertificate:
    id: int
    provider: str
    nice_name: str
    domain_names: tuple[str, ...]
    expires_on: str

    @classmethod
    def from_api(cls, data: dict) -> RawCertificate:
        return cls(
            id=int(data["id"]),
            provider=text_field(data, "provider"),
            nice_name=str(data.get("nice_name") or ""),
            domain_names=_domain_names(data),
            expires_on=str(data.get("expires_on") or ""),
        )

    def to_list_item(self) -> CertificateListItem:
        return CertificateListItem(
            id=self.id,
            nice_name=self.nice_name,
            provider=self.provider,
            expires_on=self.expires_on,
        )

    def to_certificate(self) -> Certificate:
        return Certificate(
            id=self.id,
            provider=self.provider,
            nice_name=self.nice_name,
            domain_names=self.domain_names,
            expires_on=self.expires_on,
        )


# ---------------------------------------------------------------------------
# Normalized output records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProxyHostListItem:
    id: int
    domain_names: tuple[str, ...]
    forward_host: str
    forward_port: int
    ssl_forced: bool
    enabled: bool

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "domainNames": list(self.domain_names),
            "forwardHost": self.forward_host,
            "forwardPort": self.forward_port,
            "sslForced": self.ssl_forced,
            "enabled": self.enabled,
        }


@dataclass(frozen=True)
class ProxyHost:
    """Proxy host detail; ``certificateId`` and ``advancedConfig`` are optional."""

    id: int
    domain_names: tuple[str, ...]
    forward_scheme: str
    forward_host: str
    forward_port: int
    certificate_id: int | None
    ssl_forced: bool
    block_exploits: bool
    caching_enabled: bool
    websocket: bool
    enabled: bool
    advanced_config: str = ""

    def to_dict(self) -> dict:
        out = {
            "id": self.id,
            "domainNames": list(self.domain_names),
            "forwardScheme": self.forward_scheme,
            "forwardHost": self.forward_host,
            "forwardPort": self.forward_port,
        }
        if self.certificate_id is not None:
            out["certificateId"] = self.certificate_id
        out.update(
            {
                "sslForced": self.ssl_forced,
                "blockExploits": self.block_exploits,
                "cachingEnabled": self.caching_enabled,
                "websocket": self.websocket,
                "enabled": self.enabled,
            }
        )
        if self.advanced_config:
            out["advancedConfig"] = self.advanced_config
        return out


@dataclass(frozen=True)
class CertificateListItem:
    id: int
    nice_name: str
    provider: str
    expires_on: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "niceName": self.nice_name,
            "provider": self.provider,
            "expiresOn": self.expires_on,
        }


@dataclass(frozen=True)
class Certificate:
    id: int
    provider: str
    nice_name: str
    domain_names: tuple[str, ...]
    expires_on: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "provider": self.provider,
            "niceName": self.nice_name,
            "domainNames": list(self.domain_names),
            "expiresOn": self.expires_on,
        }


def proxy_host_list(hosts: list[RawProxyHost]) -> dict:
    return {"hosts": [h.to_list_item().to_dict() for h in hosts]}


def certificate_list(certs: list[RawCertificate]) -> dict:
    return {"certificates": [c.to_list_item().to_dict() for c in certs]}


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

PROXY_HOSTS = Resource("proxy host", "/api/nginx/proxy-hosts", RawProxyHost.from_api)
CERTIFICATES = Resource("certificate", "/api/nginx/certificates", RawCertificate.from_api)

LOGIN_PATH = "/api/tokens"


class NproxyClient(RestClient):
    """Proxy manager API client authenticated with a bearer token."""

    def __init__(
        self,
        base_url: str,
        token: str,
        insecure: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        super().__init__(
            base_url,
            headers=bearer_headers(token),
            timeout=timeout,
            verify=not insecure,
            transport=transport,
        )

    def list_proxy_hosts(self) -> list[RawProxyHost]:
        return self.fetch_all(PROXY_HOSTS)

    def get_proxy_host(self, host_id: int) -> RawProxyHost:
        return self.fetch(PROXY_HOSTS, host_id)

    def list_certificates(self) -> list[RawCertificate]:
        return self.fetch_all(CERTIFICATES)

    def get_certificate(self, cert_id: int) -> RawCertificate:
        return self.fetch(CERTIFICATES, cert_id)


def login(
    base_url: str,
    email: str,
    password: str,
    insecure: bool = False,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Exchange an email/password pair for a bearer token."""
    with RestClient(base_url, timeout=timeout, verify=not insecure, transport=transport) as client:
        resp = client.request("POST", LOGIN_PATH, json={"identity": email, "secret": password})
        if resp.status_code in (401, 403):
            raise AuthError("invalid credentials")
        if resp.status_code != 200:
            raise ApiError(f"login failed with status {resp.status_code}")
        data = client.decode(resp, LOGIN_PATH)

    token = data.get("token") if isinstance(data, dict) else None
    if not token:
        raise ApiError("failed to parse login response: no token")
    return str(token)
