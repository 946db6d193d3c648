# uckb_jsonrpc/testing/mock_node.py
"""
In-process stand-in for a CKB node, for tests.

Handlers are registered per method name and answer JSON-RPC 2.0 POSTs on
``/``, single or batch. Pair it with ``fastapi.testclient.TestClient`` for the
blocking client or ``httpx.ASGITransport`` for the async one::

    node = MockNode()
    node.respond("get_tip_block_number", "0x400")
    client = CkbClient("http://testserver/", transport=node.transport())
"""
import inspect
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient
from pydantic import ValidationError

from uckb_jsonrpc.errors import INVALID_PARAMS, INVALID_REQUEST, METHOD_NOT_FOUND, PARSE_ERROR, SERVER_ERROR
from uckb_jsonrpc.schemas import RPCErrorObject, RPCRequest
from uckb_jsonrpc.transport.http import AsyncHttpTransport, HttpTransport

logger = logging.getLogger("uckb_jsonrpc.testing")


@dataclass
class NodeError(Exception):
    """Raised by a handler to answer with a JSON-RPC error object."""

    code: int
    message: str
    data: Any = None

    def __post_init__(self):
        super().__init__(f"[{self.code}] {self.message}")

    def to_dict(self):
        return RPCErrorObject(code=self.code, message=self.message, data=self.data).model_dump(exclude_none=True)


async def _call_fn(fn: Callable, params: List[Any]):
    """
    Call `fn` (sync or async) with positional params.
    Always return concrete result (never a coroutine).
    """
    try:
        result = fn(*params)
    except TypeError as e:
        # likely wrong signature / bad params
        raise NodeError(INVALID_PARAMS, "Invalid params", {"reason": str(e)})
    if inspect.isawaitable(result):
        return await result
    return result


class MockNode:
    def __init__(self, name: str = "mock-ckb-node"):
        self._name = name
        self._methods: Dict[str, Callable[..., Any]] = {}
        self.requests: List[RPCRequest] = []
        self.app = FastAPI(title=name)
        self.app.post("/")(self.handle)

    # ───── Register Decorator ─────
    def method(self, name: Optional[str] = None):
        def decorator(fn: Callable) -> Callable:
            self._methods[name or fn.__name__] = fn
            return fn
        return decorator

    def respond(self, name: str, result: Any) -> None:
        """Answer `name` with a fixed wire-form result, ignoring params."""
        self._methods[name] = lambda *params: result

    def fail(self, name: str, code: int, message: str, data: Any = None) -> None:
        def handler(*params):
            raise NodeError(code, message, data)
        self._methods[name] = handler

    def calls(self, method: str) -> List[RPCRequest]:
        return [r for r in self.requests if r.method == method]

    # ───── Transports wired to this app ─────
    def transport(self, url: str = "http://testserver/") -> HttpTransport:
        return HttpTransport(url, client=TestClient(self.app), owns_client=True)

    def async_transport(self, url: str = "http://testserver/") -> AsyncHttpTransport:
        client = httpx.AsyncClient(transport=httpx.ASGITransport(app=self.app))
        return AsyncHttpTransport(url, client=client, owns_client=True)

    # ───── HTTP entry point ─────
    async def handle(self, request: Request) -> Response:
        raw = await request.body()
        if not raw:
            return self._error_response(NodeError(INVALID_REQUEST, "Invalid Request", "empty body"), None)
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            return self._error_response(NodeError(PARSE_ERROR, "Parse error", str(e)), None)

        if isinstance(payload, list):
            if not payload:
                return self._error_response(NodeError(INVALID_REQUEST, "Invalid Request", "empty batch"), None)
            return JSONResponse([await self._handle_single(item) for item in payload])
        return JSONResponse(await self._handle_single(payload))

    async def _handle_single(self, item: Any) -> dict:
        try:
            req = RPCRequest.model_validate(item)
        except ValidationError as e:
            err = NodeError(INVALID_REQUEST, "Invalid Request", str(e))
            return self._make_response(error=err, id=item.get("id") if isinstance(item, dict) else None)

        self.requests.append(req)
        fn = self._methods.get(req.method)
        if fn is None:
            logger.debug(f"Method not found: {req.method}")
            return self._make_response(error=NodeError(METHOD_NOT_FOUND, "Method not found"), id=req.id)
        try:
            result = await _call_fn(fn, req.params)
        except NodeError as e:
            return self._make_response(error=e, id=req.id)
        except Exception as e:
            logger.exception(f"Handler for {req.method} failed")
            return self._make_response(error=NodeError(SERVER_ERROR, "Server error", str(e)), id=req.id)
        return self._make_response(result=result, id=req.id)

    def _make_response(self, result: Any = None, error: Optional[NodeError] = None, id: Any = None) -> dict:
        if error is not None:
            return {"jsonrpc": "2.0", "id": id, "error": error.to_dict()}
        return {"jsonrpc": "2.0", "id": id, "result": result}

    def _error_response(self, error: NodeError, id: Any) -> JSONResponse:
        return JSONResponse(content=self._make_response(error=error, id=id))
