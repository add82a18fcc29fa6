"""树形结构 Mixin

使用物化路径（Materialized Path）模式维护树形结构。

物化路径模式说明：
    - 每个节点存储从根到自身的完整路径，如 "1/2/3/"
    - 查询祖先/子孙只需要 LIKE 前缀匹配或 IN 查询
    - 移动节点时需要级联改写所有子孙的 path 和 level

节点的位置只通过三个操作改变：
    - set_as_root(): 成为根节点
    - set_child_of(parent): 成为 parent 的子节点
    - set_sibling_of(sibling): 成为 sibling 的兄弟节点

新节点直接 save() 时自动成为根节点（path = "<id>/"）。

使用示例:
    from ytree.orm import CoreModel
    from ytree.orm.tree import TreeFieldsMixin, TreeMixin

    class Category(CoreModel, TreeFieldsMixin, TreeMixin):
        __tablename__ = "category"
        title = mapped_column(String(100))

    a = Category(title="A").save()
    b = Category(title="B").save()
    b.set_child_of(a, commit=True)     # b.path == "1/2/"

    a.get_descendants()                # [b]
    tree = Category.fetch_tree(a.id)   # TreeNode(a) -> [TreeNode(b)]
"""

from collections import defaultdict, deque
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy import event, exists, func, inspect, select, update
from sqlalchemy.orm.attributes import set_committed_value

from ytree.log import get_logger

from .exceptions import (
    CircularReferenceError,
    MalformedPathError,
    NodeNotPersistedError,
    SelfReferenceError,
)
from .path_codec import (
    compose_child_path,
    drop_last_segment,
    extract_ancestor_ids,
    is_path_prefix,
    root_path,
)
from .tree_builder import TreeBuilder, TreeResult
from .tree_config import TreeConfig
from .tree_query import TreeQuery

logger = get_logger()


class TreeMixin:
    """树形结构 Mixin

    字段要求（推荐直接使用 TreeFieldsMixin）:
        - id: 整数主键
        - parent_id: 父节点ID
        - path: 路径字符串，如 "1/2/3/"
        - level: 层级，根节点为0

    可配置属性（子类可覆盖）:
        - __tree_sort_field__: 同级排序字段名，默认不排序（按 id）

    所有修改操作默认只 flush，传入 commit=True 时提交事务。
    """

    __tree_sort_field__ = None

    # ==================== 生命周期回调 ====================

    def before_first_persist(self):
        """首次写入数据库前：未做任何定位的节点按根节点初始化"""
        if self.path is None:
            self.path = ""
            self.parent_id = None
            self.level = 0

    def after_first_persist(self, connection, mapper):
        """首次写入数据库后：主键已分配，补写根节点路径"""
        if self.path != "":
            return

        path = root_path(self.id)
        table = mapper.local_table
        connection.execute(
            table.update().where(table.c.id == self.id).values(path=path)
        )
        set_committed_value(self, "path", path)

    # ==================== 内部方法 ====================

    @classmethod
    def tree_query(cls) -> TreeQuery:
        """获取当前模型的查询构建器"""
        return TreeQuery(cls)

    @classmethod
    def _tree_session(cls):
        query = getattr(cls, "query", None)
        if query is not None:
            return query.session
        from ytree.orm.db_session import db_manager
        return db_manager.get_session()

    def _fetch(self, stmt) -> List:
        return list(self.session.execute(stmt).scalars().all())

    def _ensure_persisted(self):
        """确保节点已写入数据库（新节点会先成为根节点）"""
        state = inspect(self)
        if state.transient or state.pending:
            self.save()
            self.session.flush()

    def _snapshot_descendants(self) -> List:
        """在修改自身之前获取子孙节点快照（按 level 升序）"""
        return self._fetch(self.tree_query().descendants(self))

    def _apply_placement(self, path: str, parent_id: Optional[int], level: int, snapshot: List, commit: bool):
        self.path = path
        self.parent_id = parent_id
        self.level = level
        self.save()
        self.session.flush()

        self._cascade(snapshot)
        self._commit_if(commit)
        return self

    def _cascade(self, snapshot: List) -> int:
        """把自身的新 path/level 逐层传递给快照中的子孙

        快照必须按 level 升序，保证父节点先于子节点被处理。
        写入使用直接 UPDATE，不会再次触发定位逻辑。

        Returns:
            实际改写的子孙数量
        """
        cls = self.__class__
        max_length = TreeConfig.get_max_path_length()
        placed: Dict[Any, Tuple[str, int]] = {self.id: (self.path, self.level)}
        rewritten = 0

        for node in snapshot:
            parent = placed.get(node.parent_id)
            if parent is None:
                logger.warning(
                    f"级联更新跳过节点 {node.id}：父节点 {node.parent_id} 不在子孙快照中"
                )
                continue

            parent_path, parent_level = parent
            new_path = compose_child_path(parent_path, node.id, max_length)
            new_level = parent_level + 1
            placed[node.id] = (new_path, new_level)

            if node.path == new_path and node.level == new_level:
                continue

            self.session.execute(
                update(cls).where(cls.id == node.id).values(path=new_path, level=new_level)
            )
            rewritten += 1

        if snapshot:
            logger.debug(f"节点 {self.id} 级联更新了 {rewritten}/{len(snapshot)} 个子孙节点")
        return rewritten

    def _commit_if(self, commit: bool):
        if commit:
            self.session.commit()

    def _check_target(self, target, as_parent: bool):
        """校验参照节点：不能是自身，且必须已保存"""
        if as_parent and (target is self or (target.id is not None and target.id == self.id)):
            raise SelfReferenceError(self.id)
        if target.id is None or not target.path:
            raise NodeNotPersistedError(target)

    # ==================== 定位操作 ====================

    def set_as_root(self, commit: bool = False):
        """将节点设置为根节点

        已经是根节点时不做任何修改。

        Returns:
            节点自身，可链式调用
        """
        self._ensure_persisted()
        if self.parent_id is None:
            self._commit_if(commit)
            return self

        snapshot = self._snapshot_descendants()
        logger.debug(f"节点 {self.id} 设置为根节点")
        return self._apply_placement(root_path(self.id), None, 0, snapshot, commit)

    def set_child_of(self, parent, commit: bool = False):
        """将节点移动到 parent 之下

        Args:
            parent: 新的父节点（必须已保存）
            commit: 是否提交事务

        Returns:
            节点自身

        Raises:
            SelfReferenceError: parent 就是节点自身
            CircularReferenceError: parent 是节点的子孙
            NodeNotPersistedError: parent 尚未保存
            PathTooLongError: 新路径超过长度上限
        """
        self._check_target(parent, as_parent=True)
        self._ensure_persisted()

        if parent.path.startswith(self.path):
            raise CircularReferenceError(self.id, parent.id)

        if parent.path == drop_last_segment(self.path):
            self._commit_if(commit)
            return self

        snapshot = self._snapshot_descendants()
        path = compose_child_path(parent.path, self.id, TreeConfig.get_max_path_length())
        logger.debug(f"节点 {self.id} 移动到节点 {parent.id} 之下")
        return self._apply_placement(path, parent.id, parent.level + 1, snapshot, commit)

    def set_sibling_of(self, sibling, commit: bool = False):
        """将节点移动为 sibling 的兄弟节点

        sibling 是根节点时节点也成为根节点。

        Raises:
            CircularReferenceError: sibling 是节点的子孙
            NodeNotPersistedError: sibling 尚未保存
        """
        self._check_target(sibling, as_parent=False)
        self._ensure_persisted()

        parent_path = drop_last_segment(sibling.path)
        if parent_path == drop_last_segment(self.path):
            self._commit_if(commit)
            return self

        if is_path_prefix(self.path, sibling.path):
            raise CircularReferenceError(self.id, sibling.id)

        snapshot = self._snapshot_descendants()
        path = compose_child_path(parent_path, self.id, TreeConfig.get_max_path_length())
        logger.debug(f"节点 {self.id} 移动为节点 {sibling.id} 的兄弟节点")
        return self._apply_placement(path, sibling.parent_id, sibling.level, snapshot, commit)

    # ==================== 节点查询方法 ====================

    def get_children(self) -> List:
        """获取直接子节点"""
        return self._fetch(self.tree_query().children(self))

    def get_descendants(self, include_self: bool = False) -> List:
        """获取所有子孙节点，按 level 升序"""
        return self._fetch(self.tree_query().descendants(self, include_self=include_self))

    def get_ancestors(self) -> List:
        """获取所有祖先节点，根节点在前"""
        return self._fetch(self.tree_query().ancestors(self))

    def get_parent(self):
        """获取父节点，根节点返回 None"""
        if self.parent_id is None:
            return None
        return self.session.get(self.__class__, self.parent_id)

    def get_root(self):
        """获取所属根节点，自身是根节点时返回自身"""
        stmt = self.tree_query().root(self)
        if stmt is None:
            return self
        return self.session.execute(stmt).scalars().first() or self

    def get_siblings(self) -> List:
        """获取兄弟节点（不包含自己）"""
        return self._fetch(self.tree_query().siblings(self))

    def get_path_ids(self) -> List[int]:
        """路径上的全部 ID（从根到自身）"""
        return extract_ancestor_ids(self.path)

    def get_descendant_count(self) -> int:
        stmt = self.tree_query().descendants(self).order_by(None).subquery()
        return self.session.execute(select(func.count()).select_from(stmt)).scalar_one()

    # ==================== 节点状态判断 ====================

    def is_root(self) -> bool:
        return self.parent_id is None

    def is_leaf(self) -> bool:
        """判断是否为叶子节点（无子节点），未保存的节点总是叶子"""
        if self.id is None:
            return True
        cls = self.__class__
        stmt = select(exists().where(cls.parent_id == self.id))
        return not self.session.execute(stmt).scalar()

    def is_ancestor_of(self, node) -> bool:
        """当前节点是否为 node 的祖先"""
        return is_path_prefix(self.path, node.path)

    def is_descendant_of(self, node) -> bool:
        """当前节点是否为 node 的子孙"""
        return is_path_prefix(node.path, self.path)

    # ==================== 全表查询 ====================

    @classmethod
    def get_roots(cls) -> List:
        """获取所有根节点"""
        return list(cls._tree_session().execute(cls.tree_query().roots()).scalars().all())

    @classmethod
    def get_leaves(cls) -> List:
        """获取所有叶子节点"""
        return list(cls._tree_session().execute(cls.tree_query().leaves()).scalars().all())

    # ==================== 树构建 ====================

    @classmethod
    def build_tree(
        cls,
        records,
        strict: Optional[bool] = None,
        node_factory: Optional[Callable[[Any], Any]] = None,
    ) -> TreeResult:
        """把记录集构建为内存树，参见 TreeBuilder"""
        return TreeBuilder(strict=strict, node_factory=node_factory).build(records)

    @classmethod
    def fetch_tree(
        cls,
        root_id: int,
        strict: Optional[bool] = None,
        node_factory: Optional[Callable[[Any], Any]] = None,
    ) -> TreeResult:
        """读取以 root_id 为根的整棵树

        root_id 必须是根节点，否则结果为 NO_TREE。

        使用示例:
            tree = Category.fetch_tree(1)
            print(render_tree(tree, label="title"))
        """
        records = cls._tree_session().execute(cls.tree_query().subtree(root_id)).scalars().all()
        return cls.build_tree(records, strict=strict, node_factory=node_factory)

    # ==================== 维护方法 ====================

    @classmethod
    def rebuild_paths(cls, commit: bool = False) -> int:
        """根据 parent_id 关系重新计算全表的 path 和 level

        从根节点开始逐层处理，只改写与计算结果不一致的记录。
        从根节点无法到达的记录（父节点缺失或存在环）保持不变并记录警告。

        Returns:
            改写的记录数量
        """
        session = cls._tree_session()
        nodes = session.execute(cls.tree_query().all_nodes()).scalars().all()

        children_map = defaultdict(list)
        for node in nodes:
            children_map[node.parent_id].append(node)

        max_length = TreeConfig.get_max_path_length()
        queue = deque((node, "", 0) for node in children_map.get(None, []))
        visited = set()
        rewritten = 0

        while queue:
            node, parent_path, level = queue.popleft()
            visited.add(node.id)
            path = compose_child_path(parent_path, node.id, max_length)

            if node.path != path or node.level != level:
                session.execute(
                    update(cls).where(cls.id == node.id).values(path=path, level=level)
                )
                rewritten += 1

            for child in children_map.get(node.id, []):
                if child.id not in visited:
                    queue.append((child, path, level + 1))

        unreachable = len(nodes) - len(visited)
        if unreachable:
            logger.warning(f"{cls.__name__} 有 {unreachable} 个节点无法从根节点到达，未重建路径")
        logger.info(f"{cls.__name__} 重建路径完成，改写 {rewritten} 条记录")

        if commit:
            session.commit()
        return rewritten

    @classmethod
    def check_integrity(cls) -> List[int]:
        """检查 path / level / parent_id 的一致性

        Returns:
            不一致记录的 ID 列表（升序），全部一致时为空列表
        """
        session = cls._tree_session()
        nodes = session.execute(cls.tree_query().all_nodes()).scalars().all()
        path_by_id = {node.id: node.path for node in nodes}
        invalid = []

        for node in nodes:
            try:
                ids = extract_ancestor_ids(node.path)
            except MalformedPathError:
                invalid.append(node.id)
                continue

            expected_parent = ids[-2] if len(ids) > 1 else None
            if (
                not ids
                or ids[-1] != node.id
                or node.level != len(ids) - 1
                or node.parent_id != expected_parent
            ):
                invalid.append(node.id)
                continue

            prefix = ""
            for ancestor_id in ids[:-1]:
                prefix = compose_child_path(prefix, ancestor_id)
                if path_by_id.get(ancestor_id) != prefix:
                    invalid.append(node.id)
                    break

        if invalid:
            logger.warning(f"{cls.__name__} 发现 {len(invalid)} 条路径不一致的记录: {invalid}")
        return invalid


@event.listens_for(TreeMixin, "before_insert", propagate=True)
def _tree_before_insert(mapper, connection, target):
    target.before_first_persist()


@event.listens_for(TreeMixin, "after_insert", propagate=True)
def _tree_after_insert(mapper, connection, target):
    target.after_first_persist(connection, mapper)


__all__ = ["TreeMixin"]
