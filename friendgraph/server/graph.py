"""
图数据投影

把全部用户转换为对外视图（节点）和去重后的无向边，供前端可视化或导出。
"""
from typing import Iterable, Mapping, Set, Tuple

from .models import GraphView, Relationship, User, UserRecord
from .scoring import popularity_score


def canonical_pair(id_a: str, id_b: str) -> Tuple[str, str]:
    """按字典序排列一条边的两端，两个方向扫描得到同一个结果"""
    if id_a <= id_b:
        return id_a, id_b
    return id_b, id_a


def to_view(record: UserRecord, friends_by_id: Mapping[str, UserRecord]) -> User:
    """构建用户视图，同时计算 popularity_score"""
    return User(
        id=record.id,
        username=record.username,
        age=record.age,
        hobbies=list(record.hobbies),
        friends=sorted(record.friends),
        created_at=record.created_at,
        popularity_score=popularity_score(record, friends_by_id),
    )


def collect_edges(users: Iterable[UserRecord]) -> Set[Tuple[str, str]]:
    edges = set()
    for user in users:
        for friend_id in user.friends:
            edges.add(canonical_pair(user.id, friend_id))
    return edges


def project(users: Iterable[UserRecord]) -> GraphView:
    """
    生成图数据

    每段好友关系只产生一条边，与用户的扫描顺序无关；
    边按 (user_id1, user_id2) 排序，保证导出结果稳定。
    """
    users = list(users)
    by_id = {user.id: user for user in users}

    nodes = [to_view(user, by_id) for user in users]
    relationships = [
        Relationship(user_id1=id1, user_id2=id2)
        for id1, id2 in sorted(collect_edges(users))
    ]
    return GraphView(users=nodes, relationships=relationships)
