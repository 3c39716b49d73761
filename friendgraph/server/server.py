"""
FriendGraph Server - 服务器启动封装

提供开箱即用的服务器启动能力
"""
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .db import init_database
from .endpoints import router
from .init import check_database, migrate_database
from .logger import configure_logging, get_logger

logger = get_logger("FriendGraphServer")

# 全局 app 实例（用于热加载）
_app = None


def get_app() -> FastAPI:
    """获取或创建 FastAPI 应用实例"""
    global _app
    if _app is None:

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            logger.info("FastAPI 应用启动中...")
            migrate_database()
            yield
            logger.info("FastAPI 应用正在关闭...")

        settings = get_settings()
        _app = FastAPI(
            title="FriendGraph Server",
            description="用户与好友关系图服务",
            version="0.1.0",
            lifespan=lifespan
        )

        _app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        _app.include_router(router)

    return _app


class FriendGraphServer:
    """
    FriendGraph 服务器

    Examples:
        >>> server = FriendGraphServer(db_path="friendgraph.db")
        >>> server.run()

        >>> server = FriendGraphServer(
        ...     db_path="data/graph.db",
        ...     host="127.0.0.1",
        ...     port=8080,
        ... )
        >>> server.run()
    """

    def __init__(
        self,
        db_path: str,
        host: str = "0.0.0.0",
        port: int = 8000,
        busy_timeout: float = 5.0,
        debug: bool = False
    ):
        """
        初始化 FriendGraph 服务器

        Args:
            db_path: SQLite 数据库路径（必填）
            host: 服务监听地址，默认 0.0.0.0
            port: 服务监听端口，默认 8000
            busy_timeout: 等待数据库写锁的最长秒数
            debug: 调试模式，日志级别降为 DEBUG
        """
        self.db_path = db_path
        self.host = host
        self.port = port
        self.busy_timeout = busy_timeout
        self.debug = debug

        self._app: Optional[FastAPI] = None

    def _validate_config(self):
        """验证必备配置"""
        errors = []

        if not self.db_path:
            errors.append("❌ 缺少数据库路径配置")

        if self.port < 1 or self.port > 65535:
            errors.append(f"❌ 端口号无效: {self.port}，必须在 1-65535 之间")

        if self.busy_timeout <= 0:
            errors.append(f"❌ busy_timeout 无效: {self.busy_timeout}")

        if errors:
            logger.error("配置验证失败:")
            for error in errors:
                logger.error(f"  {error}")
            raise ValueError("缺少必备配置，服务无法启动")

        logger.info("✅ 配置验证通过")
        logger.info(f"   Database: {self.db_path}")

    def _check_database(self):
        """检查数据库状态，如果表不存在则创建"""
        logger.info("正在检查数据库...")

        init_database(self.db_path, self.busy_timeout)
        migrate_database()

        if not check_database():
            raise RuntimeError(f"数据库检查未通过: {self.db_path}")

        logger.info("✅ 数据库检查完成")

    def run(self):
        """
        启动 FriendGraph 服务器

        Raises:
            ValueError: 配置验证失败
            RuntimeError: 数据库检查失败
        """
        import uvicorn

        try:
            if self.debug:
                configure_logging(level="DEBUG")

            logger.info("=" * 60)
            logger.info("🚀 FriendGraph Server 启动中...")
            logger.info("=" * 60)

            self._validate_config()
            self._check_database()

            logger.info("=" * 60)
            logger.info(f"📍 FastAPI Server: http://{self.host}:{self.port}")
            logger.info("=" * 60)

            self._app = get_app()
            uvicorn.run(self._app, host=self.host, port=self.port,
                        log_level="debug" if self.debug else "info")

        except KeyboardInterrupt:
            logger.info("收到停止信号，正在关闭服务...")

        except Exception as e:
            logger.error(f"❌ 服务启动失败: {str(e)}")
            sys.exit(1)

        logger.info("✅ 服务已关闭")
