"""Client - REST API 客户端"""
import time
from typing import List, Optional

import httpx

from .logger import get_logger
from .user import Graph, User

logger = get_logger("Client")


class ApiError(Exception):
    """服务端返回非 2xx 时抛出"""

    def __init__(self, status_code: int, code: Optional[str], message: str):
        super().__init__(f"[{status_code}] {message}")
        self.status_code = status_code
        self.code = code
        self.message = message


class Client:
    """FriendGraph 客户端

    使用示例:
        async with Client("localhost:8000") as client:
            alice = await client.create_user("alice", 25, ["reading", "gaming"])
            bob = await client.create_user("bob", 30, ["gaming", "hiking"])
            await client.link(alice.id, bob.id)
            graph = await client.graph()
    """

    def __init__(self, endpoint: str = "localhost:8000", transport: httpx.AsyncBaseTransport = None,
                 timeout: float = 30.0):
        """初始化

        Args:
            endpoint: 服务器地址
            transport: 自定义 httpx 传输层（测试时可传入 ASGITransport）
            timeout: 请求超时秒数
        """
        if not endpoint.startswith("http"):
            endpoint = "http://" + endpoint
        self.http_url = endpoint.rstrip("/")
        self._http = httpx.AsyncClient(base_url=self.http_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        started = time.perf_counter()
        resp = await self._http.request(method, f"/api{path}", **kwargs)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"{method} {path} -> {resp.status_code} ({elapsed_ms:.1f} ms)")
        if resp.is_success:
            return resp

        code, message = None, resp.text
        try:
            detail = resp.json().get("detail")
        except ValueError:
            detail = None
        if isinstance(detail, dict):
            code, message = detail.get("code"), detail.get("message", message)
        elif detail is not None:
            message = str(detail)

        logger.error(f"❌ {method} {path} 失败: {resp.status_code} {message}")
        raise ApiError(resp.status_code, code, message)

    # ========== API方法 ==========

    async def list_users(self) -> List[User]:
        resp = await self._request("GET", "/users")
        return [User.from_dict(u) for u in resp.json()]

    async def get_user(self, user_id: str) -> User:
        resp = await self._request("GET", f"/users/{user_id}")
        return User.from_dict(resp.json())

    async def create_user(self, username: str, age: int, hobbies: List[str]) -> User:
        resp = await self._request("POST", "/users", json={
            "username": username,
            "age": age,
            "hobbies": hobbies,
        })
        user = User.from_dict(resp.json())
        logger.info(f"✅ 创建用户: {user.username}")
        return user

    async def update_user(self, user_id: str, username: str = None, age: int = None,
                          hobbies: List[str] = None) -> User:
        """只发送提供了的字段"""
        payload = {}
        if username is not None:
            payload["username"] = username
        if age is not None:
            payload["age"] = age
        if hobbies is not None:
            payload["hobbies"] = hobbies
        resp = await self._request("PUT", f"/users/{user_id}", json=payload)
        return User.from_dict(resp.json())

    async def delete_user(self, user_id: str):
        await self._request("DELETE", f"/users/{user_id}")

    async def link(self, user_id: str, friend_id: str) -> User:
        resp = await self._request("POST", f"/users/{user_id}/link", json={"friend_id": friend_id})
        return User.from_dict(resp.json())

    async def unlink(self, user_id: str, friend_id: str) -> User:
        resp = await self._request("DELETE", f"/users/{user_id}/unlink", json={"friend_id": friend_id})
        return User.from_dict(resp.json())

    async def graph(self) -> Graph:
        resp = await self._request("GET", "/graph")
        return Graph.from_dict(resp.json())

    async def hobbies(self) -> List[str]:
        resp = await self._request("GET", "/hobbies")
        return resp.json()
