"""
服务器初始化模块
职责：数据库初始化、迁移、重置、一致性检查等启动相关操作
"""
import asyncio
from pathlib import Path

from .config import get_settings
from .db import Database, get_database, get_all_tables, init_database, is_initialized
from .logger import get_logger
from .models import UserRecord
from .relationships import find_asymmetric

logger = get_logger("ServerInit")


def ensure_database():
    """数据库代理未初始化时，按配置初始化"""
    if not is_initialized():
        settings = get_settings()
        init_database(settings.sqlite_path, settings.busy_timeout)


def init_database_tables():
    """初始化数据库表 - 删除后重建"""
    ensure_database()
    db = get_database()
    db.connect(reuse_if_open=True)

    try:
        # 按依赖关系逆序删除
        for table in reversed(get_all_tables()):
            if table.table_exists():
                logger.info(f"删除表: {table._meta.table_name}")
                table.drop_table()

        for table in get_all_tables():
            logger.info(f"创建表: {table._meta.table_name}")
            table.create_table()

        logger.info("✅ 数据库初始化完成")

    except Exception as e:
        logger.error(f"❌ 数据库初始化失败: {e}")
        raise
    finally:
        db.close()


def migrate_database():
    """数据库迁移 - 保留数据，只创建缺失的表"""
    ensure_database()
    db = get_database()
    db.connect(reuse_if_open=True)

    try:
        for table in get_all_tables():
            if not table.table_exists():
                logger.info(f"创建新表: {table._meta.table_name}")
                table.create_table()
            else:
                logger.debug(f"表已存在: {table._meta.table_name}")

        logger.info("✅ 数据库迁移完成")

    except Exception as e:
        logger.error(f"❌ 数据库迁移失败: {e}")
        raise
    finally:
        db.close()


def reset_database():
    """重置数据库 - 完全清空重建（仅开发环境使用）"""
    logger.warning("⚠️ 即将完全重置数据库，所有数据将丢失！")
    init_database_tables()


def check_friendships() -> list:
    """
    检查已存储的好友邻接表是否对称

    Returns:
        list: 不对称的 (user_id, friend_id) 列表，空列表表示一致
    """
    async def _load():
        return await Database().list_friendships()

    adjacency = asyncio.run(_load())
    records = [
        UserRecord(username="", age=0, hobbies=[], friends=friends, id=user_id)
        for user_id, friends in adjacency.items()
    ]
    return find_asymmetric(records)


def check_database() -> bool:
    """检查数据库连接、表状态和好友关系一致性"""
    ensure_database()
    db = get_database()
    try:
        db.connect(reuse_if_open=True)

        logger.info("🔍 检查数据库状态...")
        missing = False
        for table in get_all_tables():
            exists = table.table_exists()
            missing = missing or not exists
            logger.info(f"{'✅' if exists else '❌'} {table._meta.table_name}")

        if missing:
            return False

        broken = check_friendships()
        for user_id, friend_id in broken:
            logger.error(f"❌ 好友关系不对称: {user_id} -> {friend_id}")
        return not broken

    except Exception as e:
        logger.error(f"❌ 数据库检查失败: {e}")
        return False
    finally:
        db.close()


def check_sqlite() -> bool:
    """
    检查 SQLite 数据库文件和连接

    Returns:
        bool: SQLite 是否可用
    """
    settings = get_settings()
    db_path = Path(settings.sqlite_path)

    try:
        db_dir = db_path.parent
        if not db_dir.exists():
            db_dir.mkdir(parents=True, exist_ok=True)

        ensure_database()
        db = get_database()
        db.connect(reuse_if_open=True)
        db.close()

        return True

    except PermissionError as e:
        logger.error(f"❌ SQLite 权限错误: 无法访问 {settings.sqlite_path}")
        logger.error(f"   错误信息: {e}")
        return False
    except Exception as e:
        logger.error(f"❌ SQLite 检查失败: {e}")
        return False


def check_environment() -> bool:
    """
    检查所有环境依赖

    Returns:
        bool: 所有检查是否通过
    """
    if check_sqlite():
        return True

    logger.error("=" * 60)
    logger.error("❌ 环境检查失败，SQLite 不可用")
    logger.error("💡 请检查 SQLITE_PATH (.env 文件) 指向的路径是否可写")
    logger.error("=" * 60)
    return False
