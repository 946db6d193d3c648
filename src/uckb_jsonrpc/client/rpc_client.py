# uckb_jsonrpc/client/rpc_client.py
from typing import List, Optional

from uckb_jsonrpc import methods as m
from uckb_jsonrpc.client.client import AsyncJsonRpcClient, JsonRpcClient
from uckb_jsonrpc.errors import ResultNotFound
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


def _hex(value) -> str:
    return value if isinstance(value, str) else "0x" + bytes(value).hex()


def _required(value, method: str, detail: str):
    if value is None:
        raise ResultNotFound(method, detail)
    return value


class CkbClient(JsonRpcClient):
    """Blocking CKB node client: one typed method per supported RPC call."""

    # ───── Module Chain ─────
    def get_block(self, block_hash: bytes) -> Optional[BlockView]:
        return self.call(m.GET_BLOCK, block_hash)

    def get_block_by_number(self, block_number: int) -> Optional[BlockView]:
        return self.call(m.GET_BLOCK_BY_NUMBER, block_number)

    def get_header(self, block_hash: bytes) -> Optional[HeaderView]:
        return self.call(m.GET_HEADER, block_hash)

    def get_header_by_number(self, block_number: int) -> Optional[HeaderView]:
        return self.call(m.GET_HEADER_BY_NUMBER, block_number)

    def get_transaction(self, tx_hash: bytes) -> Optional[TransactionWithStatus]:
        return self.call(m.GET_TRANSACTION, tx_hash)

    def get_block_hash(self, block_number: int) -> Optional[bytes]:
        return self.call(m.GET_BLOCK_HASH, block_number)

    def get_tip_header(self) -> HeaderView:
        return self.call(m.GET_TIP_HEADER)

    def get_live_cell(self, out_point: OutPoint, with_data: bool) -> CellWithStatus:
        return self.call(m.GET_LIVE_CELL, out_point, with_data)

    def get_tip_block_number(self) -> int:
        return self.call(m.GET_TIP_BLOCK_NUMBER)

    def get_current_epoch(self) -> EpochView:
        return self.call(m.GET_CURRENT_EPOCH)

    def get_epoch_by_number(self, epoch_number: int) -> Optional[EpochView]:
        return self.call(m.GET_EPOCH_BY_NUMBER, epoch_number)

    def get_transaction_proof(
        self, tx_hashes: List[bytes], block_hash: Optional[bytes] = None
    ) -> TransactionProof:
        return self.call(m.GET_TRANSACTION_PROOF, tx_hashes, block_hash)

    def verify_transaction_proof(self, tx_proof: TransactionProof) -> List[bytes]:
        return self.call(m.VERIFY_TRANSACTION_PROOF, tx_proof)

    # ───── Module Pool ─────
    def send_transaction(
        self, tx: Transaction, outputs_validator: Optional[OutputsValidator] = None
    ) -> bytes:
        return self.call(m.SEND_TRANSACTION, tx, outputs_validator)

    def tx_pool_info(self) -> TxPoolInfo:
        return self.call(m.TX_POOL_INFO)

    def clear_tx_pool(self) -> None:
        return self.call(m.CLEAR_TX_POOL)

    # ───── Module Stats ─────
    def get_blockchain_info(self) -> ChainInfo:
        return self.call(m.GET_BLOCKCHAIN_INFO)

    # ───── Module Net ─────
    def local_node_info(self) -> LocalNode:
        return self.call(m.LOCAL_NODE_INFO)

    def get_peers(self) -> List[RemoteNode]:
        return self.call(m.GET_PEERS)

    def get_banned_addresses(self) -> List[BannedAddr]:
        return self.call(m.GET_BANNED_ADDRESSES)

    def clear_banned_addresses(self) -> None:
        return self.call(m.CLEAR_BANNED_ADDRESSES)

    def set_ban(
        self,
        address: str,
        command: BanCommand,
        ban_time: Optional[int] = None,
        absolute: Optional[bool] = None,
        reason: Optional[str] = None,
    ) -> None:
        return self.call(m.SET_BAN, address, command, ban_time, absolute, reason)

    def sync_state(self) -> SyncState:
        return self.call(m.SYNC_STATE)

    def set_network_active(self, state: bool) -> None:
        return self.call(m.SET_NETWORK_ACTIVE, state)

    def add_node(self, peer_id: str, address: str) -> None:
        return self.call(m.ADD_NODE, peer_id, address)

    def remove_node(self, peer_id: str) -> None:
        return self.call(m.REMOVE_NODE, peer_id)

    def ping_peers(self) -> None:
        return self.call(m.PING_PEERS)

    # ───── Module Experiment ─────
    def dry_run_transaction(self, tx: Transaction) -> DryRunResult:
        return self.call(m.DRY_RUN_TRANSACTION, tx)

    def calculate_dao_maximum_withdraw(self, out_point: OutPoint, block_hash: bytes) -> int:
        return self.call(m.CALCULATE_DAO_MAXIMUM_WITHDRAW, out_point, block_hash)

    # ───── Helpers ─────
    def block_hash(self, number: Optional[int] = None) -> bytes:
        """Hash of block `number`, or of the tip block when omitted."""
        if number is None:
            number = self.get_tip_block_number()
        return _required(self.get_block_hash(number), "get_block_hash", f"block {number}")

    def tip_block_hash(self) -> bytes:
        return self.block_hash(None)

    def genesis_hash(self) -> bytes:
        return self.block_hash(0)

    def block_by_hash(self, block_hash: bytes) -> BlockView:
        return _required(self.get_block(block_hash), "get_block", _hex(block_hash))

    def block_by_number(self, number: Optional[int] = None) -> BlockView:
        """Block at height `number`, or the tip block when omitted."""
        if number is None:
            number = self.get_tip_block_number()
        return _required(self.get_block_by_number(number), "get_block_by_number", f"block {number}")

    def last_block(self) -> BlockView:
        return self.block_by_number(None)

    def genesis_block(self) -> BlockView:
        return self.block_by_number(0)

    def transaction(self, tx_hash: bytes) -> TransactionWithStatus:
        return _required(self.get_transaction(tx_hash), "get_transaction", _hex(tx_hash))


class AsyncCkbClient(AsyncJsonRpcClient):
    """Async counterpart of CkbClient; every method is a coroutine."""

    # ───── Module Chain ─────
    async def get_block(self, block_hash: bytes) -> Optional[BlockView]:
        return await self.call(m.GET_BLOCK, block_hash)

    async def get_block_by_number(self, block_number: int) -> Optional[BlockView]:
        return await self.call(m.GET_BLOCK_BY_NUMBER, block_number)

    async def get_header(self, block_hash: bytes) -> Optional[HeaderView]:
        return await self.call(m.GET_HEADER, block_hash)

    async def get_header_by_number(self, block_number: int) -> Optional[HeaderView]:
        return await self.call(m.GET_HEADER_BY_NUMBER, block_number)

    async def get_transaction(self, tx_hash: bytes) -> Optional[TransactionWithStatus]:
        return await self.call(m.GET_TRANSACTION, tx_hash)

    async def get_block_hash(self, block_number: int) -> Optional[bytes]:
        return await self.call(m.GET_BLOCK_HASH, block_number)

    async def get_tip_header(self) -> HeaderView:
        return await self.call(m.GET_TIP_HEADER)

    async def get_live_cell(self, out_point: OutPoint, with_data: bool) -> CellWithStatus:
        return await self.call(m.GET_LIVE_CELL, out_point, with_data)

    async def get_tip_block_number(self) -> int:
        return await self.call(m.GET_TIP_BLOCK_NUMBER)

    async def get_current_epoch(self) -> EpochView:
        return await self.call(m.GET_CURRENT_EPOCH)

    async def get_epoch_by_number(self, epoch_number: int) -> Optional[EpochView]:
        return await self.call(m.GET_EPOCH_BY_NUMBER, epoch_number)

    async def get_transaction_proof(
        self, tx_hashes: List[bytes], block_hash: Optional[bytes] = None
    ) -> TransactionProof:
        return await self.call(m.GET_TRANSACTION_PROOF, tx_hashes, block_hash)

    async def verify_transaction_proof(self, tx_proof: TransactionProof) -> List[bytes]:
        return await self.call(m.VERIFY_TRANSACTION_PROOF, tx_proof)

    # ───── Module Pool ─────
    async def send_transaction(
        self, tx: Transaction, outputs_validator: Optional[OutputsValidator] = None
    ) -> bytes:
        return await self.call(m.SEND_TRANSACTION, tx, outputs_validator)

    async def tx_pool_info(self) -> TxPoolInfo:
        return await self.call(m.TX_POOL_INFO)

    async def clear_tx_pool(self) -> None:
        return await self.call(m.CLEAR_TX_POOL)

    # ───── Module Stats ─────
    async def get_blockchain_info(self) -> ChainInfo:
        return await self.call(m.GET_BLOCKCHAIN_INFO)

    # ───── Module Net ─────
    async def local_node_info(self) -> LocalNode:
        return await self.call(m.LOCAL_NODE_INFO)

    async def get_peers(self) -> List[RemoteNode]:
        return await self.call(m.GET_PEERS)

    async def get_banned_addresses(self) -> List[BannedAddr]:
        return await self.call(m.GET_BANNED_ADDRESSES)

    async def clear_banned_addresses(self) -> None:
        return await self.call(m.CLEAR_BANNED_ADDRESSES)

    async def set_ban(
        self,
        address: str,
        command: BanCommand,
        ban_time: Optional[int] = None,
        absolute: Optional[bool] = None,
        reason: Optional[str] = None,
    ) -> None:
        return await self.call(m.SET_BAN, address, command, ban_time, absolute, reason)

    async def sync_state(self) -> SyncState:
        return await self.call(m.SYNC_STATE)

    async def set_network_active(self, state: bool) -> None:
        return await self.call(m.SET_NETWORK_ACTIVE, state)

    async def add_node(self, peer_id: str, address: str) -> None:
        return await self.call(m.ADD_NODE, peer_id, address)

    async def remove_node(self, peer_id: str) -> None:
        return await self.call(m.REMOVE_NODE, peer_id)

    async def ping_peers(self) -> None:
        return await self.call(m.PING_PEERS)

    # ───── Module Experiment ─────
    async def dry_run_transaction(self, tx: Transaction) -> DryRunResult:
        return await self.call(m.DRY_RUN_TRANSACTION, tx)

    async def calculate_dao_maximum_withdraw(self, out_point: OutPoint, block_hash: bytes) -> int:
        return await self.call(m.CALCULATE_DAO_MAXIMUM_WITHDRAW, out_point, block_hash)

    # ───── Helpers ─────
    async def block_hash(self, number: Optional[int] = None) -> bytes:
        if number is None:
            number = await self.get_tip_block_number()
        return _required(await self.get_block_hash(number), "get_block_hash", f"block {number}")

    async def tip_block_hash(self) -> bytes:
        return await self.block_hash(None)

    async def genesis_hash(self) -> bytes:
        return await self.block_hash(0)

    async def block_by_hash(self, block_hash: bytes) -> BlockView:
        return _required(await self.get_block(block_hash), "get_block", _hex(block_hash))

    async def block_by_number(self, number: Optional[int] = None) -> BlockView:
        if number is None:
            number = await self.get_tip_block_number()
        return _required(
            await self.get_block_by_number(number), "get_block_by_number", f"block {number}"
        )

    async def last_block(self) -> BlockView:
        return await self.block_by_number(None)

    async def genesis_block(self) -> BlockView:
        return await self.block_by_number(0)

    async def transaction(self, tx_hash: bytes) -> TransactionWithStatus:
        return _required(
            await self.get_transaction(tx_hash), "get_transaction", _hex(tx_hash)
        )
