"""
Blocking HTTP client for the mirai HTTP API.

Every call is a single attempt. Non-2xx statuses and connection failures are
raised as TransportError; envelope checking is left to the caller.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import httpx

from mirai_client.errors import DecodeError, TransportError

DEFAULT_BASE_URL = "http://localhost:8080"

logger = logging.getLogger(__name__)


def normalize_base_url(base_url: str) -> str:
    """Add a scheme to bare `host:port` addresses and drop the trailing slash."""
    base_url = base_url.rstrip("/")
    if "://" not in base_url:
        base_url = f"http://{base_url}"
    return base_url


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 30.0,
    ):
        self._base_url = normalize_base_url(base_url)
        self._client = httpx.Client(
            base_url=self._base_url,
            headers={"User-Agent": "mirai-client/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s", method, path)
        try:
            resp = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e
        if resp.status_code >= 400:
            raise TransportError(
                f"HTTP {resp.status_code}: {resp.text[:200]}",
                details={"status_code": resp.status_code, "path": path},
            )
        return resp

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise DecodeError(f"Response is not JSON: {resp.text[:200]}") from e

    def get(self, path: str, params: Optional[dict[str, str]] = None) -> Any:
        return self._json(self._send("GET", path, params=params))

    def post(self, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        return self._json(self._send("POST", path, json=body))

    def upload(self, path: str, fields: dict[str, str], file_field: str, file_path: Union[str, Path]) -> Any:
        """Multipart form upload of one local file plus plain form fields."""
        file_path = Path(file_path)
        with file_path.open("rb") as fh:
            resp = self._send(
                "POST", path,
                data=fields,
                files={file_field: (file_path.name, fh)},
            )
        return self._json(resp)

    def close(self) -> None:
        self._client.close()
