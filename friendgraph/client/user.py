"""User / Graph - 纯数据类"""
from datetime import datetime
from typing import List, Tuple


class User:
    """用户对象 - 纯数据，零行为"""

    def __init__(self, id: str, username: str, age: int, hobbies: List[str] = None,
                 friends: List[str] = None, created_at: datetime = None, popularity_score: float = 0.0):
        self.id = id
        self.username = username
        self.age = age
        self.hobbies = hobbies or []
        self.friends = friends or []
        self.created_at = created_at
        self.popularity_score = popularity_score

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=data["id"],
            username=data["username"],
            age=data["age"],
            hobbies=list(data.get("hobbies", [])),
            friends=list(data.get("friends", [])),
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else None,
            popularity_score=data.get("popularity_score", 0.0),
        )

    def __repr__(self):
        return f"User(username='{self.username}', friends={len(self.friends)})"

    def __eq__(self, other):
        return isinstance(other, User) and self.id == other.id

    def __hash__(self):
        return hash(self.id)


class Graph:
    """图数据：用户列表 + 去重后的边 (user_id1, user_id2)"""

    def __init__(self, users: List[User], edges: List[Tuple[str, str]]):
        self.users = users
        self.edges = edges

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        return cls(
            users=[User.from_dict(u) for u in data.get("users", [])],
            edges=[(r["user_id1"], r["user_id2"]) for r in data.get("relationships", [])],
        )

    def __repr__(self):
        return f"Graph(users={len(self.users)}, edges={len(self.edges)})"
