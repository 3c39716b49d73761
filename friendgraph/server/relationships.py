"""
好友关系维护

只负责在两个已加载的句柄上修改好友集合，保证：
- 对称：A 在 B 的好友里，当且仅当 B 在 A 的好友里
- 无自环
- 不重复建立、不解除不存在的关系

所有检查都在修改之前完成，失败时两个句柄都保持原样。持久化由调用方负责。
"""
from typing import Iterable, List, Tuple

from .errors import AlreadyLinkedError, NotLinkedError, SelfLinkError
from .models import UserRecord


def link(user_a: UserRecord, user_b: UserRecord) -> UserRecord:
    """建立好友关系，返回 user_a"""
    if user_a.id == user_b.id:
        raise SelfLinkError(user_a.id)
    if user_b.id in user_a.friends:
        raise AlreadyLinkedError(user_a.id, user_b.id)

    user_a.friends.add(user_b.id)
    user_b.friends.add(user_a.id)
    return user_a


def unlink(user_a: UserRecord, user_b: UserRecord) -> UserRecord:
    """解除好友关系，返回 user_a"""
    if user_b.id not in user_a.friends:
        raise NotLinkedError(user_a.id, user_b.id)

    user_a.friends.discard(user_b.id)
    user_b.friends.discard(user_a.id)
    return user_a


def find_asymmetric(users: Iterable[UserRecord]) -> List[Tuple[str, str]]:
    """
    检查一组用户的好友关系是否对称

    Returns:
        (a, b) 列表：a 的好友里有 b，但 b 不存在或 b 的好友里没有 a。
        自环记为 (a, a)。空列表表示一致。
    """
    by_id = {user.id: user for user in users}
    broken = []
    for user in by_id.values():
        for friend_id in sorted(user.friends):
            if friend_id == user.id:
                broken.append((user.id, friend_id))
                continue
            friend = by_id.get(friend_id)
            if friend is None or user.id not in friend.friends:
                broken.append((user.id, friend_id))
    return broken
