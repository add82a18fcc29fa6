"""物化路径编解码

path 由根节点到当前节点的各级 ID 拼接而成，每段以 "/" 结尾：

    根节点      "1/"
    子节点      "1/2/"
    孙节点      "1/2/3/"

本模块只包含纯函数，不访问数据库。
"""

import re
from typing import List, Optional

from .exceptions import MalformedPathError, PathTooLongError


PATH_SEPARATOR = "/"

# 路径末尾的 "<数字ID>/"
_LAST_SEGMENT_RE = re.compile(r"(?:^|(?<=/))[0-9]+/$")


def extract_ancestor_ids(path: Optional[str]) -> List[int]:
    """解析路径中的全部 ID（从根到当前节点，包含节点自身）
    
    Args:
        path: 节点路径，如 "1/2/3/"
        
    Returns:
        ID 列表，如 [1, 2, 3]；空路径返回 []
        
    Raises:
        MalformedPathError: 路径包含非数字段或缺少结尾分隔符
    """
    if not path:
        return []
    if not path.endswith(PATH_SEPARATOR):
        raise MalformedPathError(path, "缺少结尾分隔符")
    
    segments = path.split(PATH_SEPARATOR)[:-1]
    ids = []
    for segment in segments:
        if not (segment.isascii() and segment.isdigit()):
            raise MalformedPathError(path, f"非法的路径段 {segment!r}")
        ids.append(int(segment))
    return ids


def drop_last_segment(path: Optional[str]) -> str:
    """去掉路径最后一段（节点自身），得到父节点的路径
    
    "1/2/3/" -> "1/2/"，根节点 "1/" -> ""，空路径 -> ""
    
    Raises:
        MalformedPathError: 路径末尾不是 "<数字>/"
    """
    if not path:
        return ""
    trimmed, count = _LAST_SEGMENT_RE.subn("", path, count=1)
    if count == 0:
        raise MalformedPathError(path, "末尾不是 '<ID>/'")
    return trimmed


def compose_child_path(parent_path: str, child_id: int, max_length: Optional[int] = None) -> str:
    """拼接子节点路径
    
    Args:
        parent_path: 父节点路径，根级别传 ""
        child_id: 子节点 ID
        max_length: 可选，路径最大长度
        
    Raises:
        PathTooLongError: 超过 max_length
    """
    path = f"{parent_path or ''}{child_id}{PATH_SEPARATOR}"
    if max_length is not None and len(path) > max_length:
        raise PathTooLongError(path, max_length)
    return path


def root_path(node_id: int) -> str:
    """根节点路径，如 "7/" """
    return compose_child_path("", node_id)


def path_level(path: str) -> int:
    """由路径推算层级（根节点为 0）"""
    return len(extract_ancestor_ids(path)) - 1


def is_path_prefix(ancestor_path: Optional[str], path: Optional[str]) -> bool:
    """ancestor_path 是否为 path 的严格前缀（即祖先路径）"""
    if not ancestor_path or not path:
        return False
    return path != ancestor_path and path.startswith(ancestor_path)


__all__ = [
    "PATH_SEPARATOR",
    "extract_ancestor_ids",
    "drop_last_segment",
    "compose_child_path",
    "root_path",
    "path_level",
    "is_path_prefix",
]
