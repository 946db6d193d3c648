# uckb_jsonrpc/types/chain.py
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from uckb_jsonrpc.types.primitives import (
    H256,
    BlockNumber,
    Byte32,
    Capacity,
    Cycle,
    EpochNumber,
    EpochNumberWithFraction,
    JsonBytes,
    ProposalShortId,
    Timestamp,
    Uint32,
    Uint64,
    Uint128,
    Version,
    WIRE_CONTEXT,
)

ScriptHashType = Literal["data", "type", "data1", "data2"]
DepType = Literal["code", "dep_group"]
TxStatusKind = Literal["pending", "proposed", "committed", "unknown", "rejected"]
CellStatusKind = Literal["live", "dead", "unknown"]
OutputsValidator = Literal["passthrough", "well_known_scripts_only"]


class CkbModel(BaseModel):
    """
    Base for every CKB wire shape.

    Instances are immutable. Unknown fields sent by newer nodes are ignored,
    missing required fields fail validation.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    def to_json(self) -> dict[str, Any]:
        """Wire form: hex encodings, aliased names, absent optionals omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, data: Any):
        return cls.model_validate(data, context=WIRE_CONTEXT)


# ──────────────────────────────────────────────────────────────
# Scripts, cells and transactions
# ──────────────────────────────────────────────────────────────
class Script(CkbModel):
    code_hash: H256
    hash_type: ScriptHashType
    args: JsonBytes


class OutPoint(CkbModel):
    tx_hash: H256
    index: Uint32


class CellInput(CkbModel):
    since: Uint64
    previous_output: OutPoint


class CellOutput(CkbModel):
    capacity: Capacity
    lock: Script
    type_: Optional[Script] = Field(default=None, alias="type")


class CellDep(CkbModel):
    out_point: OutPoint
    dep_type: DepType


class Transaction(CkbModel):
    version: Version
    cell_deps: List[CellDep]
    header_deps: List[H256]
    inputs: List[CellInput]
    outputs: List[CellOutput]
    outputs_data: List[JsonBytes]
    witnesses: List[JsonBytes]


class TransactionView(Transaction):
    hash: H256


class TxStatus(CkbModel):
    status: TxStatusKind
    block_hash: Optional[H256] = None
    reason: Optional[str] = None


class TransactionWithStatus(CkbModel):
    transaction: Optional[TransactionView] = None
    tx_status: TxStatus
    cycles: Optional[Cycle] = None


class CellData(CkbModel):
    content: JsonBytes
    hash: H256


class CellInfo(CkbModel):
    output: CellOutput
    data: Optional[CellData] = None


class CellWithStatus(CkbModel):
    cell: Optional[CellInfo] = None
    status: CellStatusKind

    @property
    def is_live(self) -> bool:
        return self.status == "live"


# ──────────────────────────────────────────────────────────────
# Headers, blocks and epochs
# ──────────────────────────────────────────────────────────────
class Header(CkbModel):
    version: Version
    compact_target: Uint32
    timestamp: Timestamp
    number: BlockNumber
    epoch: EpochNumberWithFraction
    parent_hash: H256
    transactions_root: H256
    proposals_hash: H256
    extra_hash: H256
    dao: Byte32
    nonce: Uint128


class HeaderView(Header):
    hash: H256


class UncleBlockView(CkbModel):
    header: HeaderView
    proposals: List[ProposalShortId]


class BlockView(CkbModel):
    header: HeaderView
    uncles: List[UncleBlockView]
    transactions: List[TransactionView]
    proposals: List[ProposalShortId]
    extension: Optional[JsonBytes] = None

    @property
    def hash(self) -> bytes:
        return self.header.hash

    @property
    def number(self) -> int:
        return self.header.number


class EpochView(CkbModel):
    number: EpochNumber
    start_number: BlockNumber
    length: BlockNumber
    compact_target: Uint32


# ──────────────────────────────────────────────────────────────
# Proofs and experiments
# ──────────────────────────────────────────────────────────────
class MerkleProof(CkbModel):
    indices: List[Uint32]
    lemmas: List[H256]


class TransactionProof(CkbModel):
    block_hash: H256
    witnesses_root: H256
    proof: MerkleProof


class DryRunResult(CkbModel):
    cycles: Cycle
