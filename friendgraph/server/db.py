"""
数据库模块 - 用户存储

职责：
1. 定义数据库代理（避免循环导入）
2. 定义表结构
3. 提供数据访问层（Database类），在 UserRecord 句柄与数据库行之间转换
"""
import functools
import json
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from peewee import (
    DatabaseProxy, SqliteDatabase, Model, DatabaseError, IntegrityError,
    InterfaceError, CharField, IntegerField, TextField, DateTimeField,
    ForeignKeyField, CompositeKey
)

from .errors import DuplicateUsernameError, StoreUnavailableError
from .logger import get_logger
from .models import UserRecord

logger = get_logger("Database")


# ============================================================================
# 第一部分：数据库代理
# ============================================================================

db_proxy = DatabaseProxy()


def init_database(db_path: str, busy_timeout: float = 5.0):
    """
    初始化数据库代理

    Args:
        db_path: SQLite 数据库文件路径
        busy_timeout: 等待写锁的最长秒数
    """
    db_file = Path(db_path)
    db_file.parent.mkdir(parents=True, exist_ok=True)

    database = SqliteDatabase(db_path, timeout=busy_timeout, pragmas={
        'foreign_keys': 1,
        'journal_mode': 'wal',
    })

    db_proxy.initialize(database)


def is_initialized() -> bool:
    return db_proxy.obj is not None


# ============================================================================
# 第二部分：表定义
# ============================================================================

class BaseTable(Model):
    """所有表模型均继承此类，使用统一的数据库代理"""
    class Meta:
        database = db_proxy


class UserTable(BaseTable):
    """用户数据表"""
    id = CharField(primary_key=True, max_length=36)
    username = CharField(max_length=100, unique=True)
    age = IntegerField()
    hobbies = TextField()  # JSON list，保留顺序
    created_at = DateTimeField(default=datetime.now)

    class Meta:
        table_name = 'users'


class FriendshipTable(BaseTable):
    """
    好友邻接表

    每行是一条有向边 user -> friend，一段对称的好友关系对应两行。
    """
    user = ForeignKeyField(UserTable, backref='friendships', on_delete='CASCADE')
    friend = ForeignKeyField(UserTable, backref='befriended_by', on_delete='CASCADE')
    created_at = DateTimeField(default=datetime.now)

    class Meta:
        table_name = 'user_friends'
        primary_key = CompositeKey('user', 'friend')


def get_all_tables():
    """按依赖顺序返回所有表模型"""
    return [UserTable, FriendshipTable]


def get_database():
    """获取数据库连接"""
    return db_proxy


# ============================================================================
# 第三部分：数据访问层
# ============================================================================

def _store_call(func):
    """把 peewee 的连接/执行错误统一转换为 StoreUnavailableError"""
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except IntegrityError:
            raise
        except (DatabaseError, InterfaceError) as e:
            logger.error(f"❌ 存储操作失败 {func.__name__}: {e}")
            raise StoreUnavailableError(f"User store unavailable: {e}") from e
    return wrapper


def _row_to_record(row: UserTable, friend_ids: Iterable[str]) -> UserRecord:
    return UserRecord(
        id=row.id,
        username=row.username,
        age=row.age,
        hobbies=json.loads(row.hobbies) if row.hobbies else [],
        friends=set(friend_ids),
        created_at=row.created_at,
    )


class Database:
    """
    数据访问层 - 封装所有数据库操作

    使用示例：
        >>> # 方式1：Database 自己初始化
        >>> db = Database("friendgraph.db")
        >>> await db.connect()
        >>>
        >>> # 方式2：外部初始化后使用
        >>> init_database("friendgraph.db")
        >>> db = Database()
        >>> await db.connect()
    """

    def __init__(self, db_path: str = None, busy_timeout: float = 5.0):
        """
        创建 Database 实例

        Args:
            db_path: SQLite 数据库文件路径
                    - 如果提供，则初始化数据库代理
                    - 如果为 None，则使用已初始化的代理
            busy_timeout: 等待写锁的最长秒数
        """
        if db_path:
            init_database(db_path, busy_timeout)

        self.db = db_proxy

    async def connect(self):
        """连接数据库"""
        if self.db.is_closed():
            self.db.connect()

    async def disconnect(self):
        """断开数据库连接"""
        if not self.db.is_closed():
            self.db.close()

    def create_tables(self):
        """创建缺失的表"""
        self.db.create_tables(get_all_tables(), safe=True)

    @contextmanager
    def transaction(self):
        """
        写事务

        以 BEGIN IMMEDIATE 开始，进入时即持有数据库写锁，
        同一时刻只有一个写者能修改任意用户；等待超过 busy_timeout 抛出 StoreUnavailableError。
        嵌套调用时退化为 savepoint。
        """
        try:
            with self.db.atomic("IMMEDIATE"):
                yield
        except (DatabaseError, InterfaceError) as e:
            if isinstance(e, IntegrityError):
                raise
            logger.error(f"❌ 事务失败: {e}")
            raise StoreUnavailableError(f"User store unavailable: {e}") from e

    @_store_call
    async def get(self, user_id: str) -> Optional[UserRecord]:
        """根据ID获取用户，不存在返回 None"""
        row = UserTable.get_or_none(UserTable.id == user_id)
        if row is None:
            return None
        return _row_to_record(row, self._friend_ids(user_id))

    @_store_call
    async def get_many(self, user_ids: Iterable[str]) -> List[UserRecord]:
        """批量获取用户，忽略不存在的 id"""
        ids = list(user_ids)
        if not ids:
            return []
        adjacency = self._adjacency(FriendshipTable.user.in_(ids))
        rows = UserTable.select().where(UserTable.id.in_(ids))
        return [_row_to_record(row, adjacency.get(row.id, ())) for row in rows]

    @_store_call
    async def get_by_username(self, username: str) -> Optional[UserRecord]:
        row = UserTable.get_or_none(UserTable.username == username)
        if row is None:
            return None
        return _row_to_record(row, self._friend_ids(row.id))

    @_store_call
    async def exists_by_username(self, username: str) -> bool:
        return UserTable.select().where(UserTable.username == username).exists()

    @_store_call
    async def list_all(self) -> List[UserRecord]:
        """获取全部用户，按创建时间排序"""
        adjacency = self._adjacency()
        rows = UserTable.select().order_by(UserTable.created_at, UserTable.id)
        return [_row_to_record(row, adjacency.get(row.id, ())) for row in rows]

    @_store_call
    async def save(self, record: UserRecord) -> UserRecord:
        """
        保存用户（upsert）

        第一次保存时分配 id 和 created_at；之后 created_at 不再改写。
        好友邻接行按 record.friends 整体重写，只写从该用户出发的边，
        另一端由调用方保存对方记录时写入。
        """
        try:
            with self.db.atomic():
                if record.id is None:
                    record.id = str(uuid.uuid4())
                    record.created_at = datetime.now()
                    UserTable.create(
                        id=record.id,
                        username=record.username,
                        age=record.age,
                        hobbies=json.dumps(record.hobbies),
                        created_at=record.created_at,
                    )
                else:
                    updated = (UserTable
                               .update(username=record.username,
                                       age=record.age,
                                       hobbies=json.dumps(record.hobbies))
                               .where(UserTable.id == record.id)
                               .execute())
                    if not updated:
                        record.created_at = record.created_at or datetime.now()
                        UserTable.create(
                            id=record.id,
                            username=record.username,
                            age=record.age,
                            hobbies=json.dumps(record.hobbies),
                            created_at=record.created_at,
                        )

                FriendshipTable.delete().where(FriendshipTable.user == record.id).execute()
                if record.friends:
                    FriendshipTable.insert_many(
                        [{"user": record.id, "friend": friend_id} for friend_id in sorted(record.friends)]
                    ).execute()
        except IntegrityError as e:
            if "UNIQUE constraint failed" in str(e) and "username" in str(e):
                raise DuplicateUsernameError(record.username) from e
            logger.error(f"❌ 保存用户失败 {record.id}: {e}")
            raise StoreUnavailableError(f"User store rejected write: {e}") from e

        return record

    @_store_call
    async def delete(self, user_id: str) -> bool:
        """删除用户及所有指向它的邻接行"""
        with self.db.atomic():
            FriendshipTable.delete().where(
                (FriendshipTable.user == user_id) | (FriendshipTable.friend == user_id)
            ).execute()
            deleted = UserTable.delete().where(UserTable.id == user_id).execute()
        return deleted > 0

    @_store_call
    async def list_friendships(self) -> Dict[str, Set[str]]:
        """返回完整的邻接表（用于一致性检查）"""
        return self._adjacency()

    def _friend_ids(self, user_id: str) -> List[str]:
        query = FriendshipTable.select(FriendshipTable.friend).where(FriendshipTable.user == user_id)
        return [row.friend_id for row in query]

    def _adjacency(self, where=None) -> Dict[str, Set[str]]:
        query = FriendshipTable.select(FriendshipTable.user, FriendshipTable.friend)
        if where is not None:
            query = query.where(where)
        adjacency: Dict[str, Set[str]] = {}
        for row in query:
            adjacency.setdefault(row.user_id, set()).add(row.friend_id)
        return adjacency
