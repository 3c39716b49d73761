#!/usr/bin/env python3
"""
FriendGraph Server - 统一启动脚本

读取 .env / 环境变量中的配置，检查 SQLite 后启动 FastAPI 服务器
"""
import sys

from friendgraph.server.config import get_settings
from friendgraph.server.init import check_environment
from friendgraph.server.logger import get_logger
from friendgraph.server.server import FriendGraphServer, get_app

logger = get_logger("FriendGraphServer")

settings = get_settings()

# 供 `uvicorn friendgraph-server:app` 直接加载
app = get_app()

if __name__ == "__main__":
    if not check_environment():
        logger.error("❌ 环境检查失败，无法启动服务")
        sys.exit(1)

    server = FriendGraphServer(
        db_path=settings.sqlite_path,
        host=settings.host,
        port=settings.port,
        busy_timeout=settings.busy_timeout,
        debug=settings.debug,
    )
    server.run()
