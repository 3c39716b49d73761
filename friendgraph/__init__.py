"""FriendGraph - 用户好友关系图服务"""
