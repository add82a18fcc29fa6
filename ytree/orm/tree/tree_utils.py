"""树形结构工具函数

处理 build_tree() 返回的内存树（TreeNode）。

使用示例:
    from ytree.orm.tree import build_tree, render_tree, flatten_tree
    
    tree = build_tree(records)
    print(render_tree(tree, label="title"))
    # A
    # ├── A-1
    # │   └── A-1-1
    # └── A-2
    
    flat = flatten_tree(tree)
"""

from typing import Any, Callable, Dict, List, Optional, Union

from .tree_builder import NoTreeResult, TreeNode


TreeLike = Union[TreeNode, List[TreeNode], NoTreeResult, None]
LabelType = Union[str, Callable[[Any], Any]]


def _as_list(tree: TreeLike) -> List[TreeNode]:
    """统一为根节点列表"""
    if not tree:
        return []
    if isinstance(tree, list):
        return tree
    return [tree]


def _label_of(node: TreeNode, label: LabelType) -> str:
    if callable(label):
        return str(label(node))
    return str(getattr(node, label, ""))


def render_tree(
    tree: TreeLike,
    label: LabelType = "id",
    indent: str = "    ",
) -> str:
    """将树渲染为文本大纲
    
    Args:
        tree: build_tree() 的结果
        label: 显示的字段名，或接收 TreeNode 返回文本的函数
        indent: 每层缩进宽度（至少 4 个字符时连接线对齐）
        
    Returns:
        多行文本；NO_TREE 返回空字符串
    """
    width = max(len(indent), 4)
    branch = "├──".ljust(width)
    last_branch = "└──".ljust(width)
    pipe = "│".ljust(width)
    blank = " " * width
    
    lines: List[str] = []
    
    def _walk(node: TreeNode, prefix: str, is_last: bool, is_top: bool):
        if is_top:
            lines.append(_label_of(node, label))
            child_prefix = ""
        else:
            lines.append(f"{prefix}{last_branch if is_last else branch}{_label_of(node, label)}")
            child_prefix = prefix + (blank if is_last else pipe)
        
        children = node.children
        for i, child in enumerate(children):
            _walk(child, child_prefix, i == len(children) - 1, False)
    
    for root in _as_list(tree):
        _walk(root, "", True, True)
    
    return "\n".join(lines)


def flatten_tree(tree: TreeLike, with_depth: bool = False) -> List[Any]:
    """先序展平为列表
    
    Args:
        tree: build_tree() 的结果
        with_depth: 为 True 时返回 (node, depth) 元组，根的 depth 为 0
    """
    result: List[Any] = []
    
    def _walk(node: TreeNode, depth: int):
        result.append((node, depth) if with_depth else node)
        for child in node.children:
            _walk(child, depth + 1)
    
    for root in _as_list(tree):
        _walk(root, 0)
    
    return result


def find_node_in_tree(tree: TreeLike, target_id: Any) -> Optional[TreeNode]:
    """在树中查找指定 ID 的节点，未找到返回 None"""
    for root in _as_list(tree):
        for node in root:
            if node.id == target_id:
                return node
    return None


def calculate_tree_depth(tree: TreeLike) -> int:
    """计算树的最大深度（只有根为 1，NO_TREE 为 0）"""
    def _depth(node: TreeNode) -> int:
        if not node.children:
            return 1
        return 1 + max(_depth(child) for child in node.children)
    
    return max((_depth(root) for root in _as_list(tree)), default=0)


def tree_to_dict_list(tree: TreeLike, children_field: str = "children") -> List[Dict[str, Any]]:
    """转换为嵌套字典列表（适合直接序列化为 JSON）"""
    return [root.to_dict(children_field) for root in _as_list(tree)]


__all__ = [
    "render_tree",
    "flatten_tree",
    "find_node_in_tree",
    "calculate_tree_depth",
    "tree_to_dict_list",
]
