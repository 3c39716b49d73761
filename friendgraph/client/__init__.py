"""FriendGraph Client SDK"""
from .client import ApiError, Client
from .user import Graph, User

__all__ = ['ApiError', 'Client', 'Graph', 'User']
