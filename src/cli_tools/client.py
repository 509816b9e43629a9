"""Generic REST resource client shared by the Portainer and proxy manager CLIs."""

from dataclasses import dataclass
from typing import Any, Callable

import httpx
import structlog

from .errors import ApiError, AuthError, CliToolsError, ConfigError, NetworkError, NotFoundError

log = structlog.get_logger()

DEFAULT_TIMEOUT = 10.0


def api_key_headers(token: str) -> dict[str, str]:
    return {"X-API-Key": token}


def bearer_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def text_field(data: dict, key: str) -> str:
    """Required string field; a JSON null reads as an empty string."""
    value = data[key]
    return "" if value is None else str(value)


@dataclass(frozen=True)
class Resource:
    """A REST collection: where it lives and how to parse one raw record."""

    name: str
    path: str
    parse: Callable[[dict], Any]

    def item_path(self, resource_id: int) -> str:
        return f"{self.path}/{resource_id}"


class RestClient:
    """Thin wrapper around one REST API.

    Each call is a single request; failures are classified into the error
    taxonomy and never retried.
    """

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        verify: bool = True,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        try:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers=headers or {},
                timeout=timeout,
                verify=verify,
                transport=transport,
            )
        except httpx.InvalidURL as exc:
            raise ConfigError(f"invalid URL {base_url}: {exc}") from exc

    def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            resp = self._client.request(method, path, **kwargs)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise ConfigError(f"invalid URL {self.base_url}: {exc}") from exc
        except httpx.TimeoutException as exc:
            raise NetworkError(f"request to {path} timed out: {exc}") from exc
        except httpx.RequestError as exc:
            raise NetworkError(str(exc)) from exc
        log.debug("http_request", method=method, path=path, status=resp.status_code)
        return resp

    def _check_status(self, resp: httpx.Response, path: str) -> None:
        status = resp.status_code
        if status == 200:
            return
        if status in (401, 403):
            raise AuthError("invalid or expired token")
        if status == 404:
            raise NotFoundError(f"resource not found: {path}")
        raise ApiError(f"unexpected status {status} from {path}")

    def decode(self, resp: httpx.Response, path: str) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise ApiError(f"failed to parse response from {path}: {exc}") from exc

    def get_json(self, path: str) -> Any:
        """GET ``path`` and return the decoded JSON body."""
        resp = self.request("GET", path)
        self._check_status(resp, path)
        return self.decode(resp, path)

    def _parse(self, parse: Callable[[dict], Any], data: Any, path: str) -> Any:
        if not isinstance(data, dict):
            raise ApiError(f"failed to parse response from {path}: expected an object")
        try:
            return parse(data)
        except CliToolsError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            raise ApiError(f"failed to parse response from {path}: {exc!r}") from exc

    def fetch_all(self, resource: Resource) -> list:
        """Fetch a whole collection and parse every record."""
        data = self.get_json(resource.path)
        if not isinstance(data, list):
            raise ApiError(f"failed to parse response from {resource.path}: expected a list")
        return [self._parse(resource.parse, item, resource.path) for item in data]

    def fetch(self, resource: Resource, resource_id: int) -> Any:
        path = resource.item_path(resource_id)
        return self._parse(resource.parse, self.get_json(path), path)

    def get_as(self, path: str, parse: Callable[[dict], Any]) -> Any:
        """GET an arbitrary path and parse the single object it returns."""
        return self._parse(parse, self.get_json(path), path)

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
