# uckb_jsonrpc/schemas.py
import json
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, JsonValue, ValidationError, model_validator

from uckb_jsonrpc.errors import ProtocolError

RequestId = Union[int, str]


class RPCRequest(BaseModel):
    jsonrpc: Literal["2.0"] = Field(default="2.0")
    id: RequestId
    method: str
    params: List[JsonValue] = Field(default_factory=list)

    def encode(self) -> bytes:
        return self.model_dump_json().encode("utf-8")


class RPCErrorObject(BaseModel):
    code: int
    message: str
    data: Optional[JsonValue] = None


class RPCResponse(BaseModel):
    jsonrpc: Literal["2.0"] = Field(default="2.0")
    id: Optional[RequestId] = None
    result: JsonValue = None
    error: Optional[RPCErrorObject] = None

    @model_validator(mode="before")
    @classmethod
    def _exactly_one_outcome(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("response must be a JSON object")
        has_result = "result" in data
        has_error = data.get("error") is not None
        if has_result == has_error:
            raise ValueError("response must carry exactly one of 'result' or 'error'")
        return data

    @property
    def is_error(self) -> bool:
        return self.error is not None


# ──────────────────────────────────────────────────────────────
# Wire helpers
# ──────────────────────────────────────────────────────────────
def load_payload(raw: bytes) -> Any:
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ProtocolError(f"response is not valid JSON: {e}") from e


def parse_response(item: Any) -> RPCResponse:
    """Validate one decoded response object, mapping framing errors to ProtocolError."""
    try:
        return RPCResponse.model_validate(item)
    except ValidationError as e:
        raise ProtocolError(f"invalid JSON-RPC response: {e.errors()[0]['msg']}") from e


def encode_batch(requests: List[RPCRequest]) -> bytes:
    return ("[" + ",".join(r.model_dump_json() for r in requests) + "]").encode("utf-8")
