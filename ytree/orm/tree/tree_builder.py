"""树形结构构建

将数据库中取出的扁平记录集还原为内存中的树（节点 + 有序 children 列表）。

构建规则：
    1. 第一条记录无条件作为根
    2. 之后的记录如果与已有根节点的 parent_id 相同（都为 None 也算），
       视为另一个根（多棵树 / 子树的兄弟）
    3. 否则挂到已登记的父节点的 children 下；找不到父节点时，
       严格模式抛出 MissingParentError，宽松模式丢弃该记录
    4. 每条记录处理完都按自身 id 登记，供后续记录查找父节点

记录应按 level 升序提供（TreeQuery 返回的顺序即满足要求）。

使用示例:
    from ytree.orm.tree import build_tree, NO_TREE
    
    records = session.execute(TreeQuery(Category).subtree(1)).scalars().all()
    tree = build_tree(records)
    if tree is NO_TREE:
        ...
    elif isinstance(tree, list):   # 多个根
        ...
    else:                          # 单个根
        print(tree.children)
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from ytree.log import get_logger

from .exceptions import MissingParentError
from .tree_config import TreeConfig

logger = get_logger()


class NoTreeResult:
    """空结果哨兵：记录集中没有任何根节点
    
    与"空树"区分使用：`build_tree([]) is NO_TREE`。
    """
    _instance = None
    
    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
    
    def __bool__(self):
        return False
    
    def __repr__(self):
        return "NO_TREE"


NO_TREE = NoTreeResult()


def _read_field(record: Any, field: str) -> Any:
    """读取记录字段，兼容 ORM 对象与字典"""
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


class TreeNode:
    """内存树节点
    
    包装一条记录，持有自己的 children 列表；其余属性访问委托给被包装的记录。
    
    Attributes:
        record: 原始记录（ORM 对象或字典）
        children: 子节点列表（按记录出现顺序）
    """
    
    def __init__(self, record: Any, id_field: str = "id", parent_field: str = "parent_id"):
        self.record = record
        self.children: List["TreeNode"] = []
        self._id_field = id_field
        self._parent_field = parent_field
    
    @property
    def id(self):
        return _read_field(self.record, self._id_field)
    
    @property
    def parent_id(self):
        return _read_field(self.record, self._parent_field)
    
    def __getattr__(self, name):
        # 仅在常规属性查找失败时调用
        if name.startswith('_') or name in ('record', 'children'):
            raise AttributeError(name)
        record = self.__dict__.get('record')
        if isinstance(record, Mapping):
            try:
                return record[name]
            except KeyError:
                raise AttributeError(name) from None
        return getattr(record, name)
    
    def is_leaf(self) -> bool:
        return not self.children
    
    def to_dict(self, children_field: str = "children") -> Dict[str, Any]:
        """转换为嵌套字典"""
        if isinstance(self.record, Mapping):
            data = dict(self.record)
        elif hasattr(self.record, 'to_dict'):
            data = self.record.to_dict()
        else:
            data = {
                self._id_field: self.id,
                self._parent_field: self.parent_id,
            }
        data[children_field] = [child.to_dict(children_field) for child in self.children]
        return data
    
    def __iter__(self):
        """先序遍历（包含自身）"""
        yield self
        for child in self.children:
            yield from child
    
    def __repr__(self):
        return f"<TreeNode id={self.id} children={len(self.children)}>"


TreeResult = Union[TreeNode, List[TreeNode], NoTreeResult]


class TreeBuilder:
    """扁平记录集 -> 内存树
    
    Args:
        strict: 找不到父节点时是否抛出 MissingParentError，None 表示使用全局配置
        id_field: ID 字段名
        parent_field: 父节点 ID 字段名
        node_factory: 包装记录的工厂，签名 factory(record) -> 具有 children 列表的对象，
                      默认 TreeNode
    """
    
    def __init__(
        self,
        strict: Optional[bool] = None,
        id_field: str = "id",
        parent_field: str = "parent_id",
        node_factory: Optional[Callable[[Any], Any]] = None,
    ):
        self.strict = TreeConfig.get_strict_build() if strict is None else strict
        self.id_field = id_field
        self.parent_field = parent_field
        self.node_factory = node_factory or (
            lambda record: TreeNode(record, id_field=id_field, parent_field=parent_field)
        )
    
    def build(self, records: Iterable[Any]) -> TreeResult:
        """构建树
        
        Returns:
            - NO_TREE: 没有任何记录
            - TreeNode: 只有一个根
            - List[TreeNode]: 多个根，按出现顺序
            
        Raises:
            MissingParentError: 严格模式下记录的父节点不在记录集中
        """
        refs: Dict[Any, Any] = {}
        roots: List[Any] = []
        root_parent_ids = set()
        dropped = 0
        
        for index, record in enumerate(records):
            record_id = _read_field(record, self.id_field)
            parent_id = _read_field(record, self.parent_field)
            item = self.node_factory(record)
            
            if index == 0 or parent_id in root_parent_ids:
                roots.append(item)
                root_parent_ids.add(parent_id)
            elif parent_id in refs:
                refs[parent_id].children.append(item)
            elif self.strict:
                raise MissingParentError(record_id, parent_id)
            else:
                dropped += 1
                logger.debug(f"丢弃孤立记录 {record_id}，父节点 {parent_id} 不在记录集中")
            
            refs[record_id] = item
        
        if dropped:
            logger.debug(f"构建树时共丢弃 {dropped} 条孤立记录")
        
        if not roots:
            return NO_TREE
        if len(roots) == 1:
            return roots[0]
        return roots


def build_tree(
    records: Iterable[Any],
    strict: Optional[bool] = None,
    id_field: str = "id",
    parent_field: str = "parent_id",
    node_factory: Optional[Callable[[Any], Any]] = None,
) -> TreeResult:
    """将扁平记录集构建为内存树
    
    参数与返回值见 TreeBuilder。
    
    使用示例:
        tree = build_tree([
            {"id": 1, "parent_id": None, "title": "A"},
            {"id": 2, "parent_id": 1, "title": "A-1"},
        ])
        tree.children[0].title  # "A-1"
    """
    builder = TreeBuilder(
        strict=strict,
        id_field=id_field,
        parent_field=parent_field,
        node_factory=node_factory,
    )
    return builder.build(records)


__all__ = [
    "NoTreeResult",
    "NO_TREE",
    "TreeNode",
    "TreeResult",
    "TreeBuilder",
    "build_tree",
]
