"""树形结构字段定义

提供标准的树形字段定义 Mixin，简化模型定义。

使用示例:
    from ytree.orm import CoreModel
    from ytree.orm.tree import TreeFieldsMixin, TreeMixin
    
    class Category(CoreModel, TreeFieldsMixin, TreeMixin):
        __tablename__ = "category"
        
        # path, level, parent_id 由 TreeFieldsMixin 自动提供
        title = mapped_column(String(100))
"""

from typing import Optional
from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column


class TreeFieldsMixin:
    """树形结构字段 Mixin
    
    提供标准的树形字段定义，包括：
    - path: 节点路径（如 "1/2/3/"），新节点首次保存前为空
    - level: 节点层级（根节点为0）
    - parent_id: 父节点ID，外键指向本表，删除父节点时级联删除
    
    注意：
    - 继承顺序：TreeFieldsMixin 应在 TreeMixin 之前
    - path 长度上限需与 TreeConfig.max_path_length 一致
    """
    
    # 节点路径，用于 LIKE 前缀匹配查询子孙节点
    path: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        default=None,
        index=True,
        comment="节点路径（如 1/2/3/）"
    )
    
    level: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        index=True,
        comment="节点层级（根节点为0）"
    )
    
    @declared_attr
    def parent_id(cls) -> Mapped[Optional[int]]:
        """父节点ID（自关联外键）"""
        return mapped_column(
            Integer,
            ForeignKey(f"{cls.__tablename__}.id", ondelete="CASCADE"),
            nullable=True,
            default=None,
            index=True,
            comment="父节点ID"
        )


__all__ = [
    "TreeFieldsMixin",
]
