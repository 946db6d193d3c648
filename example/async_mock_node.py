# example/async_mock_node.py
"""
Async client against the in-process mock node. No real node needed.

Run:    python example/async_mock_node.py
"""
import asyncio

from uckb_jsonrpc import methods as m
from uckb_jsonrpc.client.rpc_client import AsyncCkbClient
from uckb_jsonrpc.errors import ClientError
from uckb_jsonrpc.testing.mock_node import MockNode

GENESIS = "0x" + "92" * 32
TIP = "0x" + "a5" * 32

node = MockNode("demo-node")
node.respond("get_tip_block_number", "0x3e8")


@node.method()
def get_block_hash(number):
    return {"0x0": GENESIS, "0x3e8": TIP}.get(number)


async def main():
    async with AsyncCkbClient("http://testserver/", transport=node.async_transport()) as client:
        print("tip:", await client.get_tip_block_number())
        print("tip hash: 0x" + (await client.tip_block_hash()).hex())

        results = await client.batch(
            [
                (m.GET_BLOCK_HASH, [0]),
                (m.GET_BLOCK_HASH, [7]),
                (m.GET_PEERS, []),
            ]
        )
        for result in results:
            if isinstance(result, ClientError):
                print("failed:", result)
            else:
                print("ok:", result.hex() if result else result)

    print("requests seen by node:", [r.method for r in node.requests])


if __name__ == "__main__":
    asyncio.run(main())
