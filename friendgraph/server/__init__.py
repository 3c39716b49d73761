# Server package

# 暴露主要的服务端类和函数
from .db import Database, init_database
from .errors import FriendGraphError
from .models import User, UserRecord, Relationship, GraphView
from .services import UserService
from .server import FriendGraphServer, get_app

__all__ = [
    "Database",
    "init_database",
    "FriendGraphError",
    "User",
    "UserRecord",
    "Relationship",
    "GraphView",
    "UserService",
    "FriendGraphServer",
    "get_app",
]
