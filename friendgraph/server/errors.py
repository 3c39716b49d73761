"""
错误类型

核心层的所有失败都以这些异常的形式抛出，由外部的 HTTP 层负责映射为状态码。
"""


class FriendGraphError(Exception):
    """所有业务错误的基类"""
    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FriendGraphError):
    """输入不合法（空用户名、年龄越界、空爱好列表）"""
    code = "validation_error"


class DuplicateUsernameError(FriendGraphError):
    code = "duplicate_username"

    def __init__(self, username: str):
        super().__init__(f"Username already exists: {username}")
        self.username = username


class NotFoundError(FriendGraphError):
    code = "not_found"

    def __init__(self, user_id: str):
        super().__init__(f"User not found with id: {user_id}")
        self.user_id = user_id


class SelfLinkError(FriendGraphError):
    code = "self_link"

    def __init__(self, user_id: str):
        super().__init__("User cannot be friends with themselves")
        self.user_id = user_id


class AlreadyLinkedError(FriendGraphError):
    code = "already_linked"

    def __init__(self, user_id: str, friend_id: str):
        super().__init__("Users are already friends")
        self.user_id = user_id
        self.friend_id = friend_id


class NotLinkedError(FriendGraphError):
    code = "not_linked"

    def __init__(self, user_id: str, friend_id: str):
        super().__init__("Users are not friends")
        self.user_id = user_id
        self.friend_id = friend_id


class HasFriendsError(FriendGraphError):
    code = "has_friends"

    def __init__(self, user_id: str, friend_count: int):
        super().__init__(
            "Cannot delete user with existing friendships. Please unlink all friends first."
        )
        self.user_id = user_id
        self.friend_count = friend_count


class StoreUnavailableError(FriendGraphError):
    """存储层失败，原样向上抛出，核心层不做重试"""
    code = "store_unavailable"


__all__ = [
    "FriendGraphError",
    "ValidationError",
    "DuplicateUsernameError",
    "NotFoundError",
    "SelfLinkError",
    "AlreadyLinkedError",
    "NotLinkedError",
    "HasFriendsError",
    "StoreUnavailableError",
]
