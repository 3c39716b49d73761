"""
服务端日志

基于 loguru。每条日志带组件名（UserService / Database / ...），
默认从环境变量读取配置，服务启动时可以用 configure_logging 重新设置：

- LOG_LEVEL: 日志级别，默认 INFO
- LOG_TO_CONSOLE / LOG_TO_FILE: 输出位置
- LOG_FILE_PATH: 文件路径，默认 logs/friendgraph-server.log
- LOG_SERIALIZE: 文件日志按 JSON 行输出，便于采集
"""
import os
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def _env_flag(key: str, default: str) -> bool:
    return os.getenv(key, default).lower() == "true"


# 未绑定组件名的日志记为 friendgraph
logger.configure(extra={"name": "friendgraph"})

_handler_ids: List[int] = []


def configure_logging(
        level: Optional[str] = None,
        to_console: Optional[bool] = None,
        to_file: Optional[bool] = None,
        file_path: Optional[str] = None,
        serialize: Optional[bool] = None,
) -> None:
    """
    (重新)配置日志输出

    未传入的参数从环境变量读取。只移除本模块添加过的 handler，
    其他地方（例如测试）添加的 sink 不受影响。
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if to_console is None:
        to_console = _env_flag("LOG_TO_CONSOLE", "true")
    if to_file is None:
        to_file = _env_flag("LOG_TO_FILE", "false")
    if serialize is None:
        serialize = _env_flag("LOG_SERIALIZE", "false")
    file_path = file_path or os.getenv("LOG_FILE_PATH", "logs/friendgraph-server.log")
    log_format = os.getenv("LOG_FORMAT", DEFAULT_FORMAT)

    while _handler_ids:
        logger.remove(_handler_ids.pop())

    if to_console:
        _handler_ids.append(logger.add(
            sys.stdout,
            format=log_format,
            level=level,
            colorize=True,
            backtrace=True,
            diagnose=True
        ))

    if to_file:
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        _handler_ids.append(logger.add(
            file_path,
            format=log_format,
            level=level,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
            serialize=serialize,
            backtrace=True,
            diagnose=True
        ))

    logger.debug(f"日志已配置 - 级别: {level}, 控制台: {to_console}, 文件: {file_path if to_file else '-'}")


def get_logger(name: str = None):
    """按组件名绑定 logger"""
    if name:
        return logger.bind(name=name)
    return logger


# 去掉 loguru 默认的 stderr handler，再按环境变量初始化
logger.remove()
configure_logging()

__all__ = ["logger", "get_logger", "configure_logging"]
