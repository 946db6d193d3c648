# uckb_jsonrpc/errors.py
from typing import Any, Optional

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
SERVER_ERROR = -32000


# ──────────────────────────────────────────────────────────────
# Type layer errors
# ──────────────────────────────────────────────────────────────
class MalformedValue(ValueError):
    """A primitive could not be decoded from its wire form."""


class InvalidParams(ValueError):
    """Arguments passed to a method do not match its descriptor."""


class UnknownMethod(KeyError):
    def __init__(self, method: str):
        super().__init__(method)
        self.method = method

    def __str__(self) -> str:
        return f"unknown RPC method: {self.method}"


# ──────────────────────────────────────────────────────────────
# Client errors
# ──────────────────────────────────────────────────────────────
class ClientError(Exception):
    """Base class for every failure surfaced by a client call."""


class TransportError(ClientError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProtocolError(ClientError):
    """
    The response is not valid JSON-RPC framing, or the node answered with
    an error object. For node errors, code/message/data are kept verbatim.
    """

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        super().__init__(message if code is None else f"[{code}] {message}")
        self.code = code
        self.message = message
        self.data = data

    @classmethod
    def from_error(cls, error: Any) -> "ProtocolError":
        return cls(error.message, code=error.code, data=error.data)

    @property
    def is_node_error(self) -> bool:
        return self.code is not None

    @property
    def is_method_not_found(self) -> bool:
        return self.code == METHOD_NOT_FOUND

    @property
    def is_invalid_params(self) -> bool:
        return self.code == INVALID_PARAMS

    def to_dict(self) -> dict:
        base = {"code": self.code, "message": self.message}
        if self.data is not None:
            base["data"] = self.data
        return base


class DecodeError(ClientError):
    def __init__(self, method: str, reason: str):
        super().__init__(f"cannot decode result of {method}: {reason}")
        self.method = method
        self.reason = reason


class ResultNotFound(ClientError):
    """The node answered null where the caller required a value."""

    def __init__(self, method: str, detail: str = ""):
        message = f"{method} returned null"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.method = method
