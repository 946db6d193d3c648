# uckb_jsonrpc/client/client.py
import itertools
import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

from pydantic import ValidationError

from uckb_jsonrpc.config import default
from uckb_jsonrpc.errors import ClientError, InvalidParams, ProtocolError
from uckb_jsonrpc.methods import CKB_METHODS, MethodDescriptor, MethodRegistry
from uckb_jsonrpc.schemas import RPCRequest, RPCResponse, encode_batch, load_payload, parse_response
from uckb_jsonrpc.transport.base import AsyncTransport, Transport
from uckb_jsonrpc.transport.http import AsyncHttpTransport, HttpTransport

R = TypeVar("R")
MethodRef = Union[MethodDescriptor, str]
BatchCall = Tuple[MethodRef, Sequence[Any]]

logger = logging.getLogger("uckb_jsonrpc.client")


# ──────────────────────────────────────────────────────────────
# Logging
# ──────────────────────────────────────────────────────────────
def _configure_client_logging(level: str | int = "WARNING"):
    logger = logging.getLogger("uckb_jsonrpc")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)


# ──────────────────────────────────────────────────────────────
# Settings
# ──────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class ClientSettings:
    url: str = default.RPC_URL
    timeout: float | None = default.RPC_TIMEOUT
    headers: Dict[str, str] = field(default_factory=dict)
    auth_token: str | None = default.RPC_TOKEN
    log_level: str | int | None = default.LOG_LEVEL


def _normalize_settings(settings: "ClientSettings | dict | str | None", **overrides: Any) -> ClientSettings:
    # accept dataclass, dict, bare url or None
    if settings is None:
        resolved = ClientSettings()
    elif isinstance(settings, ClientSettings):
        resolved = settings
    elif isinstance(settings, dict):
        resolved = ClientSettings(**settings)
    elif isinstance(settings, str):
        resolved = ClientSettings(url=settings)
    else:
        raise TypeError("settings must be ClientSettings | dict | str | None")
    # explicit None is kept, e.g. timeout=None turns a configured timeout off
    return replace(resolved, **overrides) if overrides else resolved


# ──────────────────────────────────────────────────────────────
# Shared request / response handling
# ──────────────────────────────────────────────────────────────
class _ClientCore:
    """
    Transport-independent half of a client: id generation, envelope
    building, response correlation and result decoding.
    """

    def __init__(self, settings: Any = None, registry: MethodRegistry | None = None, **overrides: Any):
        self._settings = _normalize_settings(settings, **overrides)
        self._registry = registry if registry is not None else CKB_METHODS
        self._ids = itertools.count(1)
        self._id_lock = threading.Lock()
        if self._settings.log_level is not None:
            _configure_client_logging(self._settings.log_level)

    # ───── Properties ─────
    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def url(self) -> str:
        return self._settings.url

    @property
    def registry(self) -> MethodRegistry:
        return self._registry

    def next_id(self) -> int:
        with self._id_lock:
            return next(self._ids)

    # ───── Request building ─────
    def _resolve(self, method: MethodRef) -> MethodDescriptor:
        if isinstance(method, MethodDescriptor):
            return method
        return self._registry.get(method)

    def _build(self, method: MethodRef, params: Sequence[Any]) -> Tuple[MethodDescriptor, RPCRequest]:
        descriptor = self._resolve(method)
        encoded = descriptor.encode_params(*params)
        request = RPCRequest(id=self.next_id(), method=descriptor.name, params=encoded)
        logger.debug(f"-> [{request.id}] {request.method} {encoded}")
        return descriptor, request

    def _build_raw(self, name: str, params: Optional[Iterable[Any]]) -> Tuple[MethodDescriptor, RPCRequest]:
        try:
            request = RPCRequest(id=self.next_id(), method=name, params=list(params or []))
        except ValidationError as e:
            raise InvalidParams(f"{name} params are not JSON values: {e}") from e
        logger.debug(f"-> [{request.id}] {request.method} {request.params}")
        return MethodDescriptor(name=name), request

    # ───── Response handling ─────
    def _outcome(self, descriptor: MethodDescriptor, request: RPCRequest, response: RPCResponse) -> Any:
        if response.id is not None and response.id != request.id:
            logger.warning(f"Response id {response.id!r} does not match request id {request.id!r}")
            raise ProtocolError(
                f"response id {response.id!r} does not match request id {request.id!r}"
            )
        if response.is_error:
            logger.debug(f"<- [{request.id}] error {response.error.code}: {response.error.message}")
            raise ProtocolError.from_error(response.error)
        if response.id is None:
            raise ProtocolError(f"response to request {request.id!r} carries no id")
        logger.debug(f"<- [{request.id}] {descriptor.name} ok")
        return descriptor.decode_result(response.result)

    def _finish(self, descriptor: MethodDescriptor, request: RPCRequest, raw: bytes) -> Any:
        payload = load_payload(raw)
        if isinstance(payload, list):
            raise ProtocolError("expected a single response object, got an array")
        return self._outcome(descriptor, request, parse_response(payload))

    def _build_batch(self, calls: Iterable[BatchCall]) -> List[Tuple[MethodDescriptor, RPCRequest]]:
        return [self._build(method, params) for method, params in calls]

    def _finish_batch(self, prepared: List[Tuple[MethodDescriptor, RPCRequest]], raw: bytes) -> List[Any]:
        """
        Match batch responses to requests by id, regardless of order.

        Each slot holds either the decoded result or the ClientError for that
        request. Responses whose id matches no pending request are dropped.
        """
        payload = load_payload(raw)
        if not isinstance(payload, list):
            response = parse_response(payload)
            if response.is_error:
                raise ProtocolError.from_error(response.error)
            raise ProtocolError("expected an array of responses for a batch request")

        pending = {request.id: (index, descriptor, request) for index, (descriptor, request) in enumerate(prepared)}
        results: List[Any] = [None] * len(prepared)
        for item in payload:
            try:
                response = parse_response(item)
            except ProtocolError as e:
                logger.warning(f"Dropping malformed batch entry: {e}")
                continue
            slot = pending.pop(response.id, None)
            if slot is None:
                logger.warning(f"Dropping response with unmatched id {response.id!r}")
                continue
            index, descriptor, request = slot
            try:
                results[index] = self._outcome(descriptor, request, response)
            except ClientError as e:
                results[index] = e

        for request_id, (index, descriptor, _) in pending.items():
            results[index] = ProtocolError(f"no response for request {request_id!r} ({descriptor.name})")
        return results


# ──────────────────────────────────────────────────────────────
# Blocking client
# ──────────────────────────────────────────────────────────────
class JsonRpcClient(_ClientCore):
    def __init__(
        self,
        settings: "ClientSettings | dict | str | None" = None,
        *,
        transport: Transport | None = None,
        registry: MethodRegistry | None = None,
        **overrides: Any,
    ):
        super().__init__(settings, registry, **overrides)
        s = self._settings
        self._transport = transport if transport is not None else HttpTransport(
            s.url, timeout=s.timeout, headers=s.headers, auth_token=s.auth_token
        )

    @property
    def transport(self) -> Transport:
        return self._transport

    def call(self, method: MethodRef, *params: Any) -> Any:
        """Send one request and return its decoded result."""
        descriptor, request = self._build(method, params)
        raw = self._transport.send(request.encode())
        return self._finish(descriptor, request, raw)

    def call_raw(self, name: str, params: Optional[Iterable[Any]] = None) -> Any:
        """Call any method by name with already-encoded params; returns the raw JSON result."""
        descriptor, request = self._build_raw(name, params)
        raw = self._transport.send(request.encode())
        return self._finish(descriptor, request, raw)

    def batch(self, calls: Iterable[BatchCall]) -> List[Any]:
        prepared = self._build_batch(calls)
        if not prepared:
            return []
        raw = self._transport.send(encode_batch([request for _, request in prepared]))
        return self._finish_batch(prepared, raw)

    def close(self) -> None:
        self._transport.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


# ──────────────────────────────────────────────────────────────
# Async client
# ──────────────────────────────────────────────────────────────
class AsyncJsonRpcClient(_ClientCore):
    def __init__(
        self,
        settings: "ClientSettings | dict | str | None" = None,
        *,
        transport: AsyncTransport | None = None,
        registry: MethodRegistry | None = None,
        **overrides: Any,
    ):
        super().__init__(settings, registry, **overrides)
        s = self._settings
        self._transport = transport if transport is not None else AsyncHttpTransport(
            s.url, timeout=s.timeout, headers=s.headers, auth_token=s.auth_token
        )

    @property
    def transport(self) -> AsyncTransport:
        return self._transport

    async def call(self, method: MethodRef, *params: Any) -> Any:
        descriptor, request = self._build(method, params)
        raw = await self._transport.send(request.encode())
        return self._finish(descriptor, request, raw)

    async def call_raw(self, name: str, params: Optional[Iterable[Any]] = None) -> Any:
        descriptor, request = self._build_raw(name, params)
        raw = await self._transport.send(request.encode())
        return self._finish(descriptor, request, raw)

    async def batch(self, calls: Iterable[BatchCall]) -> List[Any]:
        prepared = self._build_batch(calls)
        if not prepared:
            return []
        raw = await self._transport.send(encode_batch([request for _, request in prepared]))
        return self._finish_batch(prepared, raw)

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
