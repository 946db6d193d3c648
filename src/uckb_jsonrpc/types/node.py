# uckb_jsonrpc/types/node.py
from typing import List, Literal, Optional

from pydantic import StrictBool

from uckb_jsonrpc.types.chain import CkbModel
from uckb_jsonrpc.types.primitives import (
    H256,
    BlockNumber,
    EpochNumberWithFraction,
    Timestamp,
    Uint32,
    Uint64,
    Uint256,
)

BanCommand = Literal["insert", "delete"]


# ──────────────────────────────────────────────────────────────
# Pool
# ──────────────────────────────────────────────────────────────
class TxPoolInfo(CkbModel):
    tip_hash: H256
    tip_number: BlockNumber
    pending: Uint64
    proposed: Uint64
    orphan: Uint64
    total_tx_size: Uint64
    total_tx_cycles: Uint64
    min_fee_rate: Uint64
    last_txs_updated_at: Timestamp


# ──────────────────────────────────────────────────────────────
# Stats
# ──────────────────────────────────────────────────────────────
class AlertMessage(CkbModel):
    id: Uint32
    priority: Uint32
    notice_until: Timestamp
    message: str


class ChainInfo(CkbModel):
    chain: str
    median_time: Timestamp
    epoch: EpochNumberWithFraction
    difficulty: Uint256
    is_initial_block_download: StrictBool
    alerts: List[AlertMessage]


# ──────────────────────────────────────────────────────────────
# Net
# ──────────────────────────────────────────────────────────────
class NodeAddress(CkbModel):
    address: str
    score: Uint64


class LocalNodeProtocol(CkbModel):
    id: Uint64
    name: str
    support_versions: List[str]


class LocalNode(CkbModel):
    version: str
    node_id: str
    active: StrictBool
    addresses: List[NodeAddress]
    protocols: List[LocalNodeProtocol]
    connections: Uint64


class RemoteNodeProtocol(CkbModel):
    id: Uint64
    version: str


class PeerSyncState(CkbModel):
    best_known_header_hash: Optional[H256] = None
    best_known_header_number: Optional[BlockNumber] = None
    last_common_header_hash: Optional[H256] = None
    last_common_header_number: Optional[BlockNumber] = None
    unknown_header_list_size: Uint64
    inflight_count: Uint64
    can_fetch_count: Uint64


class RemoteNode(CkbModel):
    version: str
    node_id: str
    addresses: List[NodeAddress]
    is_outbound: StrictBool
    connected_duration: Uint64
    last_ping_duration: Optional[Uint64] = None
    sync_state: Optional[PeerSyncState] = None
    protocols: List[RemoteNodeProtocol]


class BannedAddr(CkbModel):
    address: str
    ban_until: Timestamp
    ban_reason: str
    created_at: Timestamp


class SyncState(CkbModel):
    ibd: StrictBool
    best_known_block_number: BlockNumber
    best_known_block_timestamp: Timestamp
    orphan_blocks_count: Uint64
    inflight_blocks_count: Uint64
    fast_time: Uint64
    normal_time: Uint64
    low_time: Uint64
