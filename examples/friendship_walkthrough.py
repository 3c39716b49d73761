"""
好友关系演示

先启动服务器：python friendgraph-server.py
再运行：python examples/friendship_walkthrough.py
"""
import asyncio

from friendgraph.client import ApiError, Client


async def main():
    async with Client("localhost:8000") as client:
        alice = await client.create_user("alice", 25, ["reading", "gaming"])
        bob = await client.create_user("bob", 30, ["gaming", "hiking"])
        carol = await client.create_user("carol", 28, ["reading", "music"])

        alice = await client.link(alice.id, bob.id)
        await client.link(bob.id, carol.id)
        print(f"alice 的好友: {alice.friends}, 受欢迎度: {alice.popularity_score}")

        graph = await client.graph()
        print(f"图: {graph}")
        for id1, id2 in graph.edges:
            print(f"  {id1} -- {id2}")

        # 仍有好友时不能删除
        try:
            await client.delete_user(alice.id)
        except ApiError as e:
            print(f"删除失败（预期）: {e.message}")

        await client.unlink(alice.id, bob.id)
        await client.delete_user(alice.id)
        print("alice 已删除")

        print(f"爱好提示: {await client.hobbies()}")


if __name__ == "__main__":
    asyncio.run(main())
