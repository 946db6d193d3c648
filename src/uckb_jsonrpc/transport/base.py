# uckb_jsonrpc/transport/base.py
from typing import Protocol, runtime_checkable


@runtime_checkable
class Transport(Protocol):
    """Sends raw request bytes and returns raw response bytes, or raises TransportError."""

    def send(self, payload: bytes) -> bytes: ...

    def close(self) -> None: ...


@runtime_checkable
class AsyncTransport(Protocol):
    async def send(self, payload: bytes) -> bytes: ...

    async def close(self) -> None: ...
