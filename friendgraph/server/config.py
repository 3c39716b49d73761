import os
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def find_env_file() -> Optional[str]:
    """
    智能查找.env文件

    查找顺序：
    1. 环境变量 FRIENDGRAPH_ENV_FILE 指定的路径
    2. 当前工作目录
    3. 当前工作目录的父目录（向上最多3级）
    4. 用户home目录下的 .friendgraph/.env
    """
    env_path = os.getenv('FRIENDGRAPH_ENV_FILE')
    if env_path and Path(env_path).exists():
        return env_path

    current = Path.cwd()
    for _ in range(4):
        env_file = current / '.env'
        if env_file.exists():
            return str(env_file)
        if current.parent == current:
            break
        current = current.parent

    home_env = Path.home() / '.friendgraph' / '.env'
    if home_env.exists():
        return str(home_env)

    return '.env'


class Settings(BaseSettings):
    """应用配置管理"""

    model_config = SettingsConfigDict(
        env_file=find_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # 数据库配置
    sqlite_path: str = "friendgraph.db"
    # SQLite 写锁的最长等待时间（秒），超时视为存储不可用
    busy_timeout: float = 5.0

    # 服务器配置
    host: str = "0.0.0.0"
    port: int = 8000

    # 前端跨域来源
    cors_origins: List[str] = ["http://localhost:3000"]

    # 开发环境设置
    debug: bool = False

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._validate_settings()

    def _validate_settings(self):
        """验证配置的有效性"""
        if not self.sqlite_path:
            raise ValueError("SQLITE_PATH must be specified")

        if self.busy_timeout <= 0:
            raise ValueError("BUSY_TIMEOUT must be greater than 0")

        if self.port < 1 or self.port > 65535:
            raise ValueError("PORT must be between 1 and 65535")


# 全局配置实例
settings = Settings()


def get_settings() -> Settings:
    """获取配置实例"""
    return settings
