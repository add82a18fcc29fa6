"""ID模型基类

提供主键（ID）相关的功能。

树形结构的 path 由各级节点的 ID 拼接而成（如 "1/2/3/"），
因此主键固定为数据库自增整数，分配后不可修改。

使用说明：
    IdModel 是 CoreModel 的父类，专门负责 ID 相关的功能。
    一般情况下，用户应该使用 CoreModel，而不是直接使用 IdModel。
"""

from __future__ import annotations

from typing import dataclass_transform

from sqlalchemy import Integer
from sqlalchemy.orm import declared_attr, declarative_base, Mapped, mapped_column


# 声明基类
Base = declarative_base()


@dataclass_transform(kw_only_default=True, field_specifiers=(mapped_column,))
class IdModel(Base):
    """ID模型基类
    
    提供功能：
    - 自增整数主键 id
    
    使用示例:
        class Category(IdModel):
            __tablename__ = "category"
            title = mapped_column(String(50))
    """
    __abstract__ = True
    
    id: Mapped[int]
    
    @declared_attr
    def id(cls):
        """自增主键字段"""
        return mapped_column(Integer, primary_key=True, autoincrement=True, comment='主键ID')
