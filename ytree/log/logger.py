"""
日志工具

ytree 内部统一用 get_logger() 取得以模块名命名的 logger，
处理器由使用方通过 setup_logger / setup_root_logger 配置。
"""

import inspect
import logging
import logging.handlers
import os
import time
from typing import Any, Optional


DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s"


class MicrosecondFormatter(logging.Formatter):
    """时间戳精确到微秒：2024-01-01 12:00:00.123456"""

    def formatTime(self, record, datefmt=None):
        seconds = time.strftime(datefmt or "%Y-%m-%d %H:%M:%S", self.converter(record.created))
        micros = int((record.created % 1) * 1_000_000)
        return f"{seconds}.{micros:06d}"


def create_formatter(
    log_format: str = None,
    datefmt: str = "%Y-%m-%d %H:%M:%S",
    use_microseconds: bool = True
) -> logging.Formatter:
    formatter_class = MicrosecondFormatter if use_microseconds else logging.Formatter
    return formatter_class(fmt=log_format or DEFAULT_LOG_FORMAT, datefmt=datefmt)


def _file_handler(log_file: str, max_bytes: int, backup_count: int, encoding: str) -> logging.Handler:
    """max_bytes > 0 时按大小轮转，否则普通文件"""
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    if max_bytes > 0:
        return logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count, encoding=encoding
        )
    return logging.FileHandler(log_file, encoding=encoding)


def setup_logger(
    name: str = None,
    level: str = "INFO",
    log_file: str = None,
    log_format: str = None,
    console: bool = True,
    use_microseconds: bool = True,
    propagate: bool = True,
    max_bytes: int = 0,
    backup_count: int = 5,
    encoding: str = "utf-8",
) -> logging.Logger:
    """配置日志记录器（重复调用会替换原有处理器）

    Args:
        name: 记录器名称，None 表示根记录器
        level: DEBUG / INFO / WARNING / ERROR / CRITICAL
        log_file: 日志文件路径，不指定则不写文件
        console: 是否输出到控制台
        max_bytes: 单个文件最大字节数，大于 0 时按大小轮转
        backup_count: 轮转保留的备份数量

    使用示例:
        from ytree.log import setup_logger

        setup_logger("ytree", level="DEBUG", log_file="logs/tree.log", max_bytes=10 * 1024 * 1024)
    """
    target = logging.getLogger(name)
    target.setLevel(getattr(logging, level.upper(), logging.INFO))
    target.propagate = propagate
    target.handlers.clear()

    handlers = []
    if console:
        handlers.append(logging.StreamHandler())
    if log_file:
        handlers.append(_file_handler(log_file, max_bytes, backup_count, encoding))

    formatter = create_formatter(log_format, use_microseconds=use_microseconds)
    for handler in handlers:
        handler.setFormatter(formatter)
        target.addHandler(handler)
    return target


def setup_root_logger(
    level: str = "INFO",
    log_file: str = None,
    console: bool = True,
    use_microseconds: bool = True,
    config: Any = None,
    config_path: str = None,
    config_base_dir: str = None,
) -> logging.Logger:
    """配置根记录器，ytree.* 的记录器都会继承

    config（LoggingSettings）或 config_path（YAML 中的 logging 段）提供时，
    level、文件与轮转参数取自配置；config_path 同时决定是否输出到控制台。

        setup_root_logger(level="INFO", log_file="logs/app.log")
        setup_root_logger(config=settings.logging)
        setup_root_logger(config_path="config/settings.yaml")
    """
    if config_path is not None:
        from ..config import ConfigLoader, LoggingSettings

        section = ConfigLoader.load(config_path, base_dir=config_base_dir).get("logging", {})
        config = LoggingSettings(**section)
        console = config.enable_console

    file_options = {}
    if config is not None:
        level = config.level
        log_file = config.file_path or None
        file_options = {
            "max_bytes": config.parsed_file_max_bytes,
            "backup_count": config.file_backup_count,
            "encoding": config.file_encoding,
        }

    return setup_logger(
        None,
        level=level,
        log_file=log_file,
        console=console,
        use_microseconds=use_microseconds,
        propagate=False,
        **file_options,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """获取日志记录器

    不传 name 时使用调用方模块的 __name__；不含点号的简写名加 'ytree.' 前缀。

        get_logger()                     # ytree/orm/tree/tree_mixin.py 中 -> "ytree.orm.tree.tree_mixin"
        get_logger("tree")               # -> "ytree.tree"
        get_logger("sqlalchemy.engine")  # 原样
    """
    if name is None:
        caller = inspect.currentframe().f_back
        name = caller.f_globals.get("__name__", "ytree") if caller is not None else "ytree"
    elif name != "ytree" and "." not in name:
        name = f"ytree.{name}"
    return logging.getLogger(name)
