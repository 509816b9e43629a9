"""Base URL and credential resolution (flag > environment)."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ConfigError
from .labels import DEFAULT_ENDPOINT_STATUS_SCHEME, ENDPOINT_STATUS_SCHEMES

PORTAINER_URL_ENV = "PORTAINER_URL"
PORTAINER_TOKEN_ENV = "PORTAINER_TOKEN"
PORTAINER_STATUS_LABELS_ENV = "PORTAINER_ENDPOINT_STATUS_LABELS"
NPROXY_URL_ENV = "NPROXY_URL"
NPROXY_TOKEN_ENV = "NPROXY_TOKEN"


@dataclass(frozen=True)
class Settings:
    base_url: str
    token: str


def resolve_setting(flag_value: str | None, env_name: str) -> str | None:
    if flag_value not in (None, ""):
        return flag_value
    env_value = os.environ.get(env_name)
    if env_value not in (None, ""):
        return env_value
    return None


def normalize_base_url(url: str, *, require_scheme: bool = False) -> str:
    """Strip trailing slashes; optionally insist on an http(s) scheme."""
    url = url.strip().rstrip("/")
    if require_scheme and not url.startswith(("http://", "https://")):
        raise ConfigError("URL must start with http:// or https://")
    return url


def resolve_url(flag_value: str | None, env_name: str, *, require_scheme: bool = False) -> str:
    url = resolve_setting(flag_value, env_name)
    if url is None:
        raise ConfigError(f"missing URL. Use --url or set {env_name}")
    return normalize_base_url(url, require_scheme=require_scheme)


def resolve_token(flag_value: str | None, env_name: str) -> str:
    token = resolve_setting(flag_value, env_name)
    if token is None:
        raise ConfigError(f"missing token. Use --token or set {env_name}")
    return token


def resolve_portainer_settings(url: str | None, token: str | None) -> Settings:
    return Settings(
        base_url=resolve_url(url, PORTAINER_URL_ENV),
        token=resolve_token(token, PORTAINER_TOKEN_ENV),
    )


def resolve_nproxy_settings(url: str | None, token: str | None) -> Settings:
    return Settings(
        base_url=resolve_url(url, NPROXY_URL_ENV, require_scheme=True),
        token=resolve_token(token, NPROXY_TOKEN_ENV),
    )


def resolve_status_scheme(flag_value: str | None) -> str:
    """Pick the endpoint status label scheme by name."""
    scheme = resolve_setting(flag_value, PORTAINER_STATUS_LABELS_ENV) or DEFAULT_ENDPOINT_STATUS_SCHEME
    if scheme not in ENDPOINT_STATUS_SCHEMES:
        choices = ", ".join(ENDPOINT_STATUS_SCHEMES)
        raise ConfigError(f"unknown endpoint status labels: {scheme} (expected one of {choices})")
    return scheme
