"""受欢迎度评分"""
from typing import Mapping, Set

from .models import UserRecord

SHARED_HOBBY_WEIGHT = 0.5


def shared_hobbies(user: UserRecord, other: UserRecord) -> Set[str]:
    return set(user.hobbies) & set(other.hobbies)


def popularity_score(user: UserRecord, friends_by_id: Mapping[str, UserRecord]) -> float:
    """
    score = 好友数 + 0.5 * 与每个好友共同爱好数之和

    共同爱好按集合交集计算，同一用户重复的爱好只算一次。
    friends_by_id 里找不到的好友仍计入好友数，但不贡献共同爱好。
    """
    shared_total = 0
    for friend_id in user.friends:
        friend = friends_by_id.get(friend_id)
        if friend is not None:
            shared_total += len(shared_hobbies(user, friend))

    return float(len(user.friends)) + SHARED_HOBBY_WEIGHT * shared_total
