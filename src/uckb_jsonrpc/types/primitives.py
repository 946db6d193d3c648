# uckb_jsonrpc/types/primitives.py
"""
Shared primitive encodings used across CKB RPC methods.

Every integer travels as a ``0x``-prefixed hex string without leading zeros,
every hash or byte string as ``0x``-prefixed hex. Decoders are strict and
raise :class:`MalformedValue` instead of guessing.

Python callers may pass plain ``int`` / ``bytes`` when building params or
models. Values validated with ``context=WIRE_CONTEXT`` (node results) must be
in the hex string form.
"""
import re
from typing import Annotated, Any, Callable

from pydantic import BeforeValidator, PlainSerializer, ValidationInfo

from uckb_jsonrpc.errors import MalformedValue

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")

WIRE_CONTEXT = {"wire": True}


def _from_wire(info: ValidationInfo) -> bool:
    return bool(info.context and info.context.get("wire"))


def _require_str_on_wire(value: Any, info: ValidationInfo, kind: str) -> None:
    if _from_wire(info) and not isinstance(value, str):
        raise MalformedValue(f"{kind} must be a hex string on the wire, got {type(value).__name__}")


def _strip_prefix(text: Any, kind: str) -> str:
    if not isinstance(text, str):
        raise MalformedValue(f"{kind} must be a hex string, got {type(text).__name__}")
    if not text.startswith("0x"):
        raise MalformedValue(f"{kind} must start with '0x': {text!r}")
    return text[2:]


# ──────────────────────────────────────────────────────────────
# Unsigned integers
# ──────────────────────────────────────────────────────────────
def decode_uint(value: Any, bits: int) -> int:
    """Decode a hex-encoded unsigned integer of the given width."""
    kind = f"Uint{bits}"
    if isinstance(value, bool):
        raise MalformedValue(f"{kind} cannot be a boolean")
    if isinstance(value, int):
        number = value
    else:
        digits = _strip_prefix(value, kind)
        if not digits or not _HEX_DIGITS.fullmatch(digits):
            raise MalformedValue(f"{kind} is not a hex number: {value!r}")
        if len(digits) > 1 and digits[0] == "0":
            raise MalformedValue(f"{kind} has redundant leading zeros: {value!r}")
        number = int(digits, 16)
    if number < 0 or number >= 1 << bits:
        raise MalformedValue(f"{kind} out of range: {value!r}")
    return number


def encode_uint(value: int) -> str:
    return hex(value)


def _uint_validator(bits: int) -> Callable[[Any, ValidationInfo], int]:
    def validate(value: Any, info: ValidationInfo) -> int:
        _require_str_on_wire(value, info, f"Uint{bits}")
        return decode_uint(value, bits)
    return validate


def _uint(bits: int):
    return Annotated[
        int,
        BeforeValidator(_uint_validator(bits)),
        PlainSerializer(encode_uint, return_type=str, when_used="json"),
    ]


Uint32 = _uint(32)
Uint64 = _uint(64)
Uint128 = _uint(128)
Uint256 = _uint(256)

BlockNumber = Uint64
EpochNumber = Uint64
EpochNumberWithFraction = Uint64
Capacity = Uint64
Cycle = Uint64
Timestamp = Uint64
Version = Uint32


# ──────────────────────────────────────────────────────────────
# Byte strings
# ──────────────────────────────────────────────────────────────
def decode_json_bytes(value: Any) -> bytes:
    """Decode an arbitrary-length ``0x`` hex byte string."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    digits = _strip_prefix(value, "bytes")
    if len(digits) % 2:
        raise MalformedValue(f"bytes must have an even number of hex digits: {value!r}")
    if digits and not _HEX_DIGITS.fullmatch(digits):
        raise MalformedValue(f"bytes contain non-hex characters: {value!r}")
    return bytes.fromhex(digits)


def decode_fixed_bytes(value: Any, size: int) -> bytes:
    """Decode a ``0x`` hex string that must hold exactly ``size`` bytes."""
    raw = decode_json_bytes(value)
    if len(raw) != size:
        raise MalformedValue(f"expected {size} bytes, got {len(raw)}: {value!r}")
    return raw


def encode_bytes(value: bytes) -> str:
    return "0x" + value.hex()


def _fixed(size: int):
    def validate(value: Any, info: ValidationInfo) -> bytes:
        _require_str_on_wire(value, info, f"Byte{size}")
        return decode_fixed_bytes(value, size)
    return Annotated[
        bytes,
        BeforeValidator(validate),
        PlainSerializer(encode_bytes, return_type=str, when_used="json"),
    ]


def _json_bytes(value: Any, info: ValidationInfo) -> bytes:
    _require_str_on_wire(value, info, "bytes")
    return decode_json_bytes(value)


H256 = _fixed(32)
Byte32 = _fixed(32)
ProposalShortId = _fixed(10)

JsonBytes = Annotated[
    bytes,
    BeforeValidator(_json_bytes),
    PlainSerializer(encode_bytes, return_type=str, when_used="json"),
]
