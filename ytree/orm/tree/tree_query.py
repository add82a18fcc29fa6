"""树形查询构建

根据节点构建查询语句（过滤条件 + 排序），不执行查询。
返回的都是 SQLAlchemy 2.0 风格的 Select 语句，由调用方交给 session 执行：

    planner = TreeQuery(Category)
    stmt = planner.descendants(node)
    nodes = session.execute(stmt).scalars().all()

子孙、祖先、整棵子树均按 level 升序返回，保证父节点先于子节点出现，
级联更新和树构建都依赖这一顺序。
"""

from typing import List, Optional

from sqlalchemy import Select, false, select

from .path_codec import extract_ancestor_ids


class TreeQuery:
    """树形查询构建器
    
    Args:
        model: 具备 id / parent_id / path / level 列的模型类
    """
    
    def __init__(self, model):
        self.model = model
    
    def _order_by(self, stmt: Select) -> Select:
        """level 升序，其次是可选的排序字段，最后按 id 保证顺序稳定"""
        model = self.model
        columns = [model.level]
        sort_field_name = getattr(model, '__tree_sort_field__', None)
        sort_field = getattr(model, sort_field_name, None) if sort_field_name else None
        if sort_field is not None:
            columns.append(sort_field)
        columns.append(model.id)
        return stmt.order_by(*columns)
    
    def _empty(self) -> Select:
        return select(self.model).where(false())
    
    # ==================== 单节点查询 ====================
    
    def children(self, node) -> Select:
        """直接子节点：parent_id == node.id"""
        stmt = select(self.model).where(self.model.parent_id == node.id)
        return self._order_by(stmt)
    
    def descendants(self, node, include_self: bool = False) -> Select:
        """所有子孙节点：path LIKE 'node.path%'，按 level 升序"""
        if not node.path:
            return self._empty()
        stmt = select(self.model).where(self.model.path.like(f"{node.path}%"))
        if not include_self:
            stmt = stmt.where(self.model.id != node.id)
        return self._order_by(stmt)
    
    def ancestor_ids(self, node) -> List[int]:
        """从 path 解析祖先 ID（不含自身），从根开始"""
        ids = extract_ancestor_ids(node.path)
        return [i for i in ids if i != node.id]
    
    def ancestors(self, node) -> Select:
        """所有祖先节点：id IN (path 中的祖先ID)，根在前"""
        ids = self.ancestor_ids(node)
        if not ids:
            return self._empty()
        stmt = select(self.model).where(self.model.id.in_(ids))
        return self._order_by(stmt)
    
    def root(self, node) -> Optional[Select]:
        """所属根节点
        
        节点本身是根时返回 None，由调用方直接使用节点本身。
        """
        if node.parent_id is None:
            return None
        ids = extract_ancestor_ids(node.path)
        if not ids:
            return None
        return select(self.model).where(self.model.id == ids[0])
    
    def siblings(self, node) -> Select:
        """兄弟节点（不包含自己）"""
        if node.parent_id is None:
            condition = self.model.parent_id.is_(None)
        else:
            condition = self.model.parent_id == node.parent_id
        stmt = select(self.model).where(condition, self.model.id != node.id)
        return self._order_by(stmt)
    
    # ==================== 全表查询 ====================
    
    def roots(self) -> Select:
        """所有根节点：parent_id IS NULL"""
        stmt = select(self.model).where(self.model.parent_id.is_(None))
        return self._order_by(stmt)
    
    def leaves(self) -> Select:
        """所有叶子节点：id 不在任何记录的 parent_id 中"""
        parent_ids = (
            select(self.model.parent_id)
            .where(self.model.parent_id.is_not(None))
            .distinct()
        )
        stmt = select(self.model).where(self.model.id.not_in(parent_ids))
        return self._order_by(stmt)
    
    def subtree(self, root_id: int) -> Select:
        """以 root_id 为根的整棵树（包含根本身），按 level 升序
        
        root_id 必须是根节点的 ID，路径以 "<root_id>/" 开头。
        """
        stmt = select(self.model).where(self.model.path.like(f"{root_id}/%"))
        return self._order_by(stmt)
    
    def all_nodes(self) -> Select:
        """全表节点，按 id 升序
        
        供路径重建和一致性检查使用，这两处不能信任已存储的 level。
        """
        return select(self.model).order_by(self.model.id)


__all__ = ["TreeQuery"]
