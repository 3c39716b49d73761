"""
服务器端数据模型

- 请求/响应模型：pydantic，用于输入校验和对外视图
- UserRecord：从存储层加载出来的可变句柄，好友关系只保存对方的 id
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, List, Optional, Set

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

MIN_AGE = 1
MAX_AGE = 150


def _check_username(value: str) -> str:
    if not value.strip():
        raise ValueError("Username is required")
    return value


Username = Annotated[str, AfterValidator(_check_username)]


# User 相关请求模型
class UserCreate(BaseModel):
    """创建用户的请求模型"""
    username: Username
    age: int = Field(ge=MIN_AGE, le=MAX_AGE)
    hobbies: List[str] = Field(min_length=1)


class UserUpdate(BaseModel):
    """
    更新用户的请求模型

    未提供的字段保持不变；hobbies 为空列表时同样视为不修改。
    """
    username: Optional[Username] = None
    age: Optional[int] = Field(default=None, ge=MIN_AGE, le=MAX_AGE)
    hobbies: Optional[List[str]] = None


class LinkRequest(BaseModel):
    """建立/解除好友关系的请求模型"""
    friend_id: str = Field(min_length=1)


# 对外视图
class User(BaseModel):
    """用户视图，popularity_score 在构建视图时计算，不落库"""
    id: str
    username: str
    age: int
    hobbies: List[str]
    friends: List[str] = []
    created_at: datetime
    popularity_score: float = 0.0

    model_config = ConfigDict(from_attributes=True)


class Relationship(BaseModel):
    """无向好友边，user_id1 总是字典序较小的一端"""
    user_id1: str
    user_id2: str


class GraphView(BaseModel):
    """图数据：全部节点 + 去重后的边"""
    users: List[User]
    relationships: List[Relationship]


# 存储层句柄
@dataclass
class UserRecord:
    """
    已加载的用户记录

    id 和 created_at 在第一次保存时由存储层分配。
    friends 是对方 id 的集合，对称性由 relationships 模块维护。
    """
    username: str
    age: int
    hobbies: List[str]
    friends: Set[str] = field(default_factory=set)
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    def copy(self) -> "UserRecord":
        return UserRecord(
            username=self.username,
            age=self.age,
            hobbies=list(self.hobbies),
            friends=set(self.friends),
            id=self.id,
            created_at=self.created_at,
        )


__all__ = [
    "MIN_AGE",
    "MAX_AGE",
    "UserCreate",
    "UserUpdate",
    "LinkRequest",
    "User",
    "Relationship",
    "GraphView",
    "UserRecord",
]
