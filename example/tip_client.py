# example/tip_client.py
"""
Print the chain tip of a running CKB node.

Run:    CKB_RPC_URL=http://127.0.0.1:8114 python example/tip_client.py
"""
from uckb_jsonrpc.client.rpc_client import CkbClient
from uckb_jsonrpc.errors import ClientError


def main():
    with CkbClient() as client:
        try:
            info = client.get_blockchain_info()
            tip = client.get_tip_header()
            pool = client.tx_pool_info()
        except ClientError as e:
            print(f"node unreachable or misbehaving: {e}")
            return

        print(f"chain:        {info.chain}")
        print(f"tip number:   {tip.number}")
        print(f"tip hash:     0x{tip.hash.hex()}")
        print(f"genesis hash: 0x{client.genesis_hash().hex()}")
        print(f"pending txs:  {pool.pending}")


if __name__ == "__main__":
    main()
