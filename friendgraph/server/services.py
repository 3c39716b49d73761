from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from .db import Database
from .errors import (
    DuplicateUsernameError, HasFriendsError, NotFoundError, SelfLinkError, ValidationError
)
from .graph import project, to_view
from .logger import get_logger
from .models import GraphView, User, UserCreate, UserRecord, UserUpdate
from . import relationships

logger = get_logger("UserService")


def _validate(model, **fields):
    """用请求模型校验输入，把 pydantic 的错误转换为 ValidationError"""
    try:
        return model(**fields)
    except PydanticValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ValidationError(details) from e


class UserService:
    """
    用户生命周期管理

    创建/更新/删除/建立好友/解除好友，每个写操作在一个存储事务内完成：
    读取、校验、修改句柄、写回，任何一步失败都不会留下部分修改。
    """

    def __init__(self, db: Database):
        self.db = db

    async def list_users(self) -> List[User]:
        records = await self.db.list_all()
        by_id = {record.id: record for record in records}
        return [to_view(record, by_id) for record in records]

    async def get_user(self, user_id: str) -> User:
        record = await self._require(user_id)
        return await self._view(record)

    async def create_user(self, username: str, age: int, hobbies: List[str]) -> User:
        data = _validate(UserCreate, username=username, age=age, hobbies=hobbies)

        with self.db.transaction():
            if await self.db.exists_by_username(data.username):
                raise DuplicateUsernameError(data.username)

            record = await self.db.save(UserRecord(
                username=data.username,
                age=data.age,
                hobbies=list(data.hobbies),
            ))

        logger.info(f"创建用户: {record.id} ({record.username})")
        return to_view(record, {})

    async def update_user(
            self,
            user_id: str,
            username: Optional[str] = None,
            age: Optional[int] = None,
            hobbies: Optional[List[str]] = None
    ) -> User:
        """
        更新用户资料

        只修改提供了的字段。hobbies 传入空列表与不传相同，不会清空爱好。
        """
        data = _validate(UserUpdate, username=username, age=age, hobbies=hobbies)

        with self.db.transaction():
            record = await self._require(user_id)

            if data.username is not None and data.username != record.username:
                if await self.db.exists_by_username(data.username):
                    raise DuplicateUsernameError(data.username)
                record.username = data.username

            if data.age is not None:
                record.age = data.age

            if data.hobbies:
                record.hobbies = list(data.hobbies)
            elif data.hobbies is not None:
                logger.debug(f"忽略空的爱好列表更新: {user_id}")

            record = await self.db.save(record)
            view = await self._view(record)

        logger.info(f"更新用户: {record.id}")
        return view

    async def delete_user(self, user_id: str) -> None:
        with self.db.transaction():
            record = await self._require(user_id)
            if record.friends:
                raise HasFriendsError(user_id, len(record.friends))
            await self.db.delete(user_id)

        logger.info(f"删除用户: {user_id}")

    async def link_users(self, user_id: str, friend_id: str) -> User:
        """建立好友关系，返回发起方的最新视图"""
        if user_id == friend_id:
            raise SelfLinkError(user_id)

        with self.db.transaction():
            user = await self._require(user_id)
            friend = await self._require(friend_id)

            relationships.link(user, friend)
            await self.db.save(user)
            await self.db.save(friend)
            view = await self._view(user)

        logger.info(f"建立好友关系: {user_id} <-> {friend_id}")
        return view

    async def unlink_users(self, user_id: str, friend_id: str) -> User:
        """解除好友关系，返回发起方的最新视图"""
        with self.db.transaction():
            user = await self._require(user_id)
            friend = await self._require(friend_id)

            relationships.unlink(user, friend)
            await self.db.save(user)
            await self.db.save(friend)
            view = await self._view(user)

        logger.info(f"解除好友关系: {user_id} <-> {friend_id}")
        return view

    async def graph_view(self) -> GraphView:
        return project(await self.db.list_all())

    async def list_hobbies(self) -> List[str]:
        """所有用户出现过的爱好，去重并排序（用于前端输入提示）"""
        records = await self.db.list_all()
        return sorted({hobby for record in records for hobby in record.hobbies})

    async def _require(self, user_id: str) -> UserRecord:
        record = await self.db.get(user_id)
        if record is None:
            raise NotFoundError(user_id)
        return record

    async def _view(self, record: UserRecord) -> User:
        friends = await self.db.get_many(record.friends)
        return to_view(record, {friend.id: friend for friend in friends})
