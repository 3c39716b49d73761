"""
客户端日志

不依赖 server 模块，直接打印到 stdout / stderr。
级别阈值取自 FRIENDGRAPH_CLIENT_LOG_LEVEL（默认 INFO），设为 OFF 可完全静默。
"""
import os
import sys
from datetime import datetime
from typing import Optional

LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40, "off": 100}


def _threshold_from_env() -> int:
    level = os.getenv("FRIENDGRAPH_CLIENT_LOG_LEVEL", "info").lower()
    return LEVELS.get(level, LEVELS["info"])


class ClientLogger:
    """按级别过滤的客户端日志器"""

    def __init__(self, name: Optional[str] = None, level: Optional[str] = None):
        self.name = name or "FriendGraphClient"
        self.threshold = LEVELS[level.lower()] if level else _threshold_from_env()

    def _log(self, level: str, message: str):
        if LEVELS[level] < self.threshold:
            return
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        stream = sys.stderr if level == "error" else sys.stdout
        print(f"[{timestamp}] {level.upper()} [{self.name}] {message}", file=stream)

    def debug(self, message: str):
        self._log("debug", message)

    def info(self, message: str):
        self._log("info", message)

    def warning(self, message: str):
        self._log("warning", message)

    def error(self, message: str):
        self._log("error", message)


def get_logger(name: str = None, level: str = None) -> ClientLogger:
    return ClientLogger(name, level)


__all__ = ["get_logger", "ClientLogger", "LEVELS"]
