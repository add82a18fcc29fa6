"""ORM模块

提供基于 SQLAlchemy 2.0 的模型基类与会话管理：
- Base / IdModel: 声明式基类与自增主键
- CoreModel: 核心模型基类，包含时间戳、CRUD、批量更新等
- 数据库会话管理
- 树形结构扩展（ytree.orm.tree）

使用示例:
    from ytree.orm import CoreModel, init_database, db_session_scope
    from ytree.orm.tree import TreeFieldsMixin, TreeMixin
    
    init_database("sqlite:///./tree.db")
    
    class Menu(CoreModel, TreeFieldsMixin, TreeMixin):
        __tablename__ = "menu"
        title = mapped_column(String(100))
    
    with db_session_scope():
        Menu(title="首页").save()
"""

from .id_model import IdModel, Base
from .core_model import CoreModel
from .db_session import (
    # 管理器单例
    db_manager,
    # 公开 API
    init_database,
    get_engine,
    on_request_end,
    db_session_scope,
)
from .utils import to_snake_case

__all__ = [
    "Base",
    "IdModel",
    "CoreModel",
    "db_manager",
    "init_database",
    "get_engine",
    "on_request_end",
    "db_session_scope",
    "to_snake_case",
]
