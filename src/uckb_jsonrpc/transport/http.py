# uckb_jsonrpc/transport/http.py
import logging
from typing import Dict, Optional

import httpx

from uckb_jsonrpc.errors import TransportError

logger = logging.getLogger("uckb_jsonrpc.transport")

_JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


def build_headers(headers: Optional[Dict[str, str]] = None, auth_token: Optional[str] = None) -> Dict[str, str]:
    merged = dict(_JSON_HEADERS)
    if auth_token:
        merged["Authorization"] = f"Bearer {auth_token}"
    merged.update(headers or {})
    return merged


def _check_status(resp: httpx.Response, url: str) -> bytes:
    if not resp.is_success:
        logger.error(f"HTTP {resp.status_code} from {url}")
        raise TransportError(f"HTTP {resp.status_code} from {url}", status_code=resp.status_code)
    return resp.content


class HttpTransport:
    """
    Blocking HTTP POST transport.

    `timeout=None` disables timeouts entirely. An existing httpx.Client may be
    injected (e.g. one with a MockTransport, or a fastapi TestClient); the
    transport then does not close it unless `owns_client=True`.
    """

    def __init__(
        self,
        url: str,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
        auth_token: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        owns_client: Optional[bool] = None,
    ):
        self.url = url
        self._headers = build_headers(headers, auth_token)
        self._owns_client = client is None if owns_client is None else owns_client
        self.client = client if client is not None else httpx.Client(timeout=timeout)

    def send(self, payload: bytes) -> bytes:
        try:
            resp = self.client.post(self.url, content=payload, headers=self._headers)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout talking to {self.url}: {e}")
            raise TransportError(f"request to {self.url} timed out") from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.error(f"Network error talking to {self.url}: {e}")
            raise TransportError(f"request to {self.url} failed: {e}") from e
        return _check_status(resp, self.url)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()


class AsyncHttpTransport:
    def __init__(
        self,
        url: str,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
        auth_token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        owns_client: Optional[bool] = None,
    ):
        self.url = url
        self._headers = build_headers(headers, auth_token)
        self._owns_client = client is None if owns_client is None else owns_client
        self.client = client if client is not None else httpx.AsyncClient(timeout=timeout)

    async def send(self, payload: bytes) -> bytes:
        try:
            resp = await self.client.post(self.url, content=payload, headers=self._headers)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout talking to {self.url}: {e}")
            raise TransportError(f"request to {self.url} timed out") from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.error(f"Network error talking to {self.url}: {e}")
            raise TransportError(f"request to {self.url} failed: {e}") from e
        return _check_status(resp, self.url)

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()
