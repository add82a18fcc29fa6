"""
YTree - 基于 SQLAlchemy 的物化路径树形结构类库

提供树形模型 Mixin、查询构建、树构建、配置、日志等功能
"""

from .version import __version__, __author__, __description__

# 导出异常
from .exceptions import ErrorCode, YTreeException

# 导出配置
from .config import (
    AppSettings,
    DatabaseSettings,
    LoggingSettings,
    TreeSettings,
    ConfigLoader,
    load_yaml_config,
)

# 导出日志
from .log import setup_logger, setup_root_logger, get_logger

# 导出ORM基类
from .orm import (
    Base,
    IdModel,
    CoreModel,
    db_manager,
    init_database,
    get_engine,
    on_request_end,
    db_session_scope,
)

# 导出树形结构
from .orm.tree import (
    TreeMixin,
    TreeFieldsMixin,
    TreeQuery,
    TreeBuilder,
    TreeNode,
    NO_TREE,
    build_tree,
    render_tree,
    configure_tree,
    TreeError,
    SelfReferenceError,
    CircularReferenceError,
    MissingParentError,
    MalformedPathError,
    PathTooLongError,
    NodeNotPersistedError,
)

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    # 异常
    "ErrorCode",
    "YTreeException",
    # 配置
    "AppSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "TreeSettings",
    "ConfigLoader",
    "load_yaml_config",
    # 日志
    "setup_logger",
    "setup_root_logger",
    "get_logger",
    # ORM
    "Base",
    "IdModel",
    "CoreModel",
    "db_manager",
    "init_database",
    "get_engine",
    "on_request_end",
    "db_session_scope",
    # 树形结构
    "TreeMixin",
    "TreeFieldsMixin",
    "TreeQuery",
    "TreeBuilder",
    "TreeNode",
    "NO_TREE",
    "build_tree",
    "render_tree",
    "configure_tree",
    "TreeError",
    "SelfReferenceError",
    "CircularReferenceError",
    "MissingParentError",
    "MalformedPathError",
    "PathTooLongError",
    "NodeNotPersistedError",
]
