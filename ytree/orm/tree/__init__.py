"""树形结构扩展模块

使用物化路径（Materialized Path）模式提供树形结构支持。

主要组件:
- TreeFieldsMixin: 树形字段定义（path / level / parent_id）
- TreeMixin: 定位操作（set_as_root / set_child_of / set_sibling_of）与查询方法
- TreeQuery: 树形查询语句构建
- TreeBuilder / build_tree: 扁平记录集 -> 内存树
- path_codec: 路径编解码纯函数
- 工具函数: render_tree / flatten_tree 等

使用示例:
    from ytree.orm import CoreModel
    from ytree.orm.tree import TreeFieldsMixin, TreeMixin, render_tree
    
    class Category(CoreModel, TreeFieldsMixin, TreeMixin):
        __tablename__ = "category"
        title = mapped_column(String(100))
    
    root = Category(title="全部").save()
    phone = Category(title="手机").save()
    phone.set_child_of(root, commit=True)
    
    print(render_tree(Category.fetch_tree(root.id), label="title"))
    # 全部
    # └── 手机
"""

from .exceptions import (
    TreeError,
    SelfReferenceError,
    CircularReferenceError,
    MissingParentError,
    MalformedPathError,
    PathTooLongError,
    NodeNotPersistedError,
)
from .path_codec import (
    PATH_SEPARATOR,
    extract_ancestor_ids,
    drop_last_segment,
    compose_child_path,
    root_path,
    path_level,
    is_path_prefix,
)
from .tree_config import TreeConfig, configure_tree, get_tree_config
from .tree_fields import TreeFieldsMixin
from .tree_query import TreeQuery
from .tree_builder import (
    NoTreeResult,
    NO_TREE,
    TreeNode,
    TreeResult,
    TreeBuilder,
    build_tree,
)
from .tree_mixin import TreeMixin
from .tree_utils import (
    render_tree,
    flatten_tree,
    find_node_in_tree,
    calculate_tree_depth,
    tree_to_dict_list,
)

__all__ = [
    # Mixin 类
    "TreeMixin",
    "TreeFieldsMixin",
    # 查询与构建
    "TreeQuery",
    "TreeBuilder",
    "TreeNode",
    "TreeResult",
    "NoTreeResult",
    "NO_TREE",
    "build_tree",
    # 路径编解码
    "PATH_SEPARATOR",
    "extract_ancestor_ids",
    "drop_last_segment",
    "compose_child_path",
    "root_path",
    "path_level",
    "is_path_prefix",
    # 配置
    "TreeConfig",
    "configure_tree",
    "get_tree_config",
    # 工具函数
    "render_tree",
    "flatten_tree",
    "find_node_in_tree",
    "calculate_tree_depth",
    "tree_to_dict_list",
    # 异常
    "TreeError",
    "SelfReferenceError",
    "CircularReferenceError",
    "MissingParentError",
    "MalformedPathError",
    "PathTooLongError",
    "NodeNotPersistedError",
]
