# uckb_jsonrpc/methods.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

from pydantic import JsonValue, StrictBool, StrictStr, TypeAdapter, ValidationError

from uckb_jsonrpc.errors import DecodeError, InvalidParams, UnknownMethod
from uckb_jsonrpc.types.chain import (
    BlockView,
    CellWithStatus,
    DryRunResult,
    EpochView,
    HeaderView,
    OutPoint,
    OutputsValidator,
    Transaction,
    TransactionProof,
    TransactionWithStatus,
)
from uckb_jsonrpc.types.node import (
    BanCommand,
    BannedAddr,
    ChainInfo,
    LocalNode,
    RemoteNode,
    SyncState,
    TxPoolInfo,
)
from uckb_jsonrpc.types.primitives import H256, WIRE_CONTEXT, BlockNumber, Capacity, EpochNumber, Timestamp

R = TypeVar("R")

logger = logging.getLogger("uckb_jsonrpc.methods")


# ──────────────────────────────────────────────────────────────
# Param / MethodDescriptor – method name + wire contract
# ──────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Param:
    name: str
    type: Any
    optional: bool = False

    @property
    def adapter(self) -> TypeAdapter:
        return _adapter(Optional[self.type] if self.optional else self.type)


@dataclass(frozen=True)
class MethodDescriptor(Generic[R]):
    """
    Pairs an RPC method name with its parameter and result types.

    Holds everything a client needs to encode a call and decode its result:
    - ordered positional params (trailing optionals may be left out)
    - the result type, validated through a pydantic TypeAdapter
    """

    name: str
    """RPC method name as the node knows it."""

    params: Tuple[Param, ...] = ()
    """Positional parameters in wire order."""

    result: Any = JsonValue
    """Result type; decoding fails with DecodeError when the shape differs."""

    description: str | None = None

    def encode_params(self, *args: Any) -> List[Any]:
        """Validate positional arguments and return their wire form."""
        if len(args) > len(self.params):
            raise InvalidParams(
                f"{self.name} takes at most {len(self.params)} params, got {len(args)}"
            )
        encoded: List[Any] = []
        for index, param in enumerate(self.params):
            if index >= len(args):
                if not param.optional:
                    raise InvalidParams(f"{self.name} missing required param '{param.name}'")
                encoded.append(None)
                continue
            adapter = param.adapter
            try:
                value = adapter.validate_python(args[index])
            except ValidationError as e:
                raise InvalidParams(f"{self.name} param '{param.name}': {e}") from e
            encoded.append(adapter.dump_python(value, mode="json", by_alias=True, exclude_none=True))

        # trailing absent optionals are omitted rather than sent as null
        while encoded and encoded[-1] is None and self.params[len(encoded) - 1].optional:
            encoded.pop()
        return encoded

    def decode_result(self, value: Any) -> R:
        try:
            return _adapter(self.result).validate_python(value, context=WIRE_CONTEXT)
        except ValidationError as e:
            raise DecodeError(self.name, str(e)) from e

    def encode_result(self, value: R) -> Any:
        """Wire form of a typed result; the inverse of decode_result."""
        return _adapter(self.result).dump_python(value, mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "params": [
                {"name": p.name, "type": str(p.type), "optional": p.optional}
                for p in self.params
            ],
            "result": str(self.result),
        }


_ADAPTERS: Dict[Any, TypeAdapter] = {}


def _adapter(tp: Any) -> TypeAdapter:
    try:
        return _ADAPTERS[tp]
    except KeyError:
        adapter = _ADAPTERS[tp] = TypeAdapter(tp)
        return adapter
    except TypeError:
        # unhashable annotation, build it every time
        return TypeAdapter(tp)


# ──────────────────────────────────────────────────────────────
# MethodRegistry
# ──────────────────────────────────────────────────────────────
@dataclass
class MethodRegistry:
    name: str = "registry"
    _methods: Dict[str, MethodDescriptor] = field(default_factory=dict)

    def register(
        self,
        name: str,
        *params: Param,
        result: Any = JsonValue,
        description: str | None = None,
        replace: bool = False,
    ) -> MethodDescriptor:
        if name in self._methods and not replace:
            raise ValueError(f"Method '{name}' already registered")
        descriptor = MethodDescriptor(name=name, params=params, result=result, description=description)
        self._methods[name] = descriptor
        logger.debug(f"Registered: {name}")
        return descriptor

    def add(self, descriptor: MethodDescriptor, replace: bool = False) -> MethodDescriptor:
        if descriptor.name in self._methods and not replace:
            raise ValueError(f"Method '{descriptor.name}' already registered")
        self._methods[descriptor.name] = descriptor
        return descriptor

    def get(self, method_name: str) -> MethodDescriptor:
        try:
            return self._methods[method_name]
        except KeyError:
            raise UnknownMethod(method_name) from None

    def copy(self, name: str | None = None) -> "MethodRegistry":
        return MethodRegistry(name=name or self.name, _methods=dict(self._methods))

    def __contains__(self, method_name: object) -> bool:
        return method_name in self._methods

    def __iter__(self):
        return iter(self._methods.values())

    def __len__(self) -> int:
        return len(self._methods)

    def list_methods(self) -> Dict[str, dict]:
        return {name: d.to_json() for name, d in self._methods.items()}


# ──────────────────────────────────────────────────────────────
# CKB method table
# ──────────────────────────────────────────────────────────────
CKB_METHODS = MethodRegistry(name="ckb")
_reg = CKB_METHODS.register

# Module Chain
GET_BLOCK = _reg("get_block", Param("block_hash", H256), result=Optional[BlockView])
GET_BLOCK_BY_NUMBER = _reg(
    "get_block_by_number", Param("block_number", BlockNumber), result=Optional[BlockView]
)
GET_HEADER = _reg("get_header", Param("block_hash", H256), result=Optional[HeaderView])
GET_HEADER_BY_NUMBER = _reg(
    "get_header_by_number", Param("block_number", BlockNumber), result=Optional[HeaderView]
)
GET_TRANSACTION = _reg(
    "get_transaction", Param("tx_hash", H256), result=Optional[TransactionWithStatus]
)
GET_BLOCK_HASH = _reg("get_block_hash", Param("block_number", BlockNumber), result=Optional[H256])
GET_TIP_HEADER = _reg("get_tip_header", result=HeaderView)
GET_LIVE_CELL = _reg(
    "get_live_cell",
    Param("out_point", OutPoint),
    Param("with_data", StrictBool),
    result=CellWithStatus,
)
GET_TIP_BLOCK_NUMBER = _reg("get_tip_block_number", result=BlockNumber)
GET_CURRENT_EPOCH = _reg("get_current_epoch", result=EpochView)
GET_EPOCH_BY_NUMBER = _reg(
    "get_epoch_by_number", Param("epoch_number", EpochNumber), result=Optional[EpochView]
)
GET_TRANSACTION_PROOF = _reg(
    "get_transaction_proof",
    Param("tx_hashes", List[H256]),
    Param("block_hash", H256, optional=True),
    result=TransactionProof,
)
VERIFY_TRANSACTION_PROOF = _reg(
    "verify_transaction_proof", Param("tx_proof", TransactionProof), result=List[H256]
)

# Module Pool
SEND_TRANSACTION = _reg(
    "send_transaction",
    Param("tx", Transaction),
    Param("outputs_validator", OutputsValidator, optional=True),
    result=H256,
)
TX_POOL_INFO = _reg("tx_pool_info", result=TxPoolInfo)
CLEAR_TX_POOL = _reg("clear_tx_pool", result=None)

# Module Stats
GET_BLOCKCHAIN_INFO = _reg("get_blockchain_info", result=ChainInfo)

# Module Net
LOCAL_NODE_INFO = _reg("local_node_info", result=LocalNode)
GET_PEERS = _reg("get_peers", result=List[RemoteNode])
GET_BANNED_ADDRESSES = _reg("get_banned_addresses", result=List[BannedAddr])
CLEAR_BANNED_ADDRESSES = _reg("clear_banned_addresses", result=None)
SET_BAN = _reg(
    "set_ban",
    Param("address", StrictStr),
    Param("command", BanCommand),
    Param("ban_time", Timestamp, optional=True),
    Param("absolute", StrictBool, optional=True),
    Param("reason", StrictStr, optional=True),
    result=None,
)
SYNC_STATE = _reg("sync_state", result=SyncState)
SET_NETWORK_ACTIVE = _reg("set_network_active", Param("state", StrictBool), result=None)
ADD_NODE = _reg("add_node", Param("peer_id", StrictStr), Param("address", StrictStr), result=None)
REMOVE_NODE = _reg("remove_node", Param("peer_id", StrictStr), result=None)
PING_PEERS = _reg("ping_peers", result=None)

# Module Experiment
DRY_RUN_TRANSACTION = _reg("dry_run_transaction", Param("tx", Transaction), result=DryRunResult)
CALCULATE_DAO_MAXIMUM_WITHDRAW = _reg(
    "calculate_dao_maximum_withdraw",
    Param("out_point", OutPoint),
    Param("block_hash", H256),
    result=Capacity,
)

del _reg
