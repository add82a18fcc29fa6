"""树形结构异常定义

提供树形结构相关的异常类。
"""

from typing import Any

from ytree.exceptions import YTreeException, ErrorCode


class TreeError(YTreeException):
    """树形结构基础异常"""
    
    def __init__(self, message: str = "树形结构操作失败", code=ErrorCode.TREE_ERROR, **extra: Any):
        super().__init__(message, code=code, **extra)


class SelfReferenceError(TreeError):
    """自引用异常
    
    当节点被指定为自己的父节点时抛出，在任何修改之前检查。
    
    Attributes:
        node_id: 节点ID
    """
    
    def __init__(self, node_id: Any, message: str = None, code=ErrorCode.SELF_REFERENCE, **extra: Any):
        self.node_id = node_id
        super().__init__(
            message or f"节点 {node_id} 不能作为自己的父节点",
            code=code,
            node_id=node_id,
            **extra
        )


class CircularReferenceError(SelfReferenceError):
    """循环引用异常
    
    当节点被移动到自己的子孙节点之下时抛出。
    
    Attributes:
        node_id: 被移动的节点ID
        target_id: 目标节点ID（被移动节点的子孙）
    """
    
    def __init__(self, node_id: Any, target_id: Any):
        self.target_id = target_id
        super().__init__(
            node_id,
            message=f"不能将节点 {node_id} 移动到其子孙节点 {target_id} 之下",
            code=ErrorCode.CIRCULAR_REFERENCE,
            target_id=target_id,
        )


class MissingParentError(TreeError):
    """缺失父节点异常
    
    严格模式构建树时，非根记录的 parent_id 在给定记录集中找不到。
    
    Attributes:
        record_id: 记录ID
        parent_id: 找不到的父节点ID
    """
    
    def __init__(self, record_id: Any, parent_id: Any):
        self.record_id = record_id
        self.parent_id = parent_id
        super().__init__(
            f"记录 {record_id} 的父节点 {parent_id} 不在记录集中",
            code=ErrorCode.MISSING_PARENT,
            record_id=record_id,
            parent_id=parent_id,
        )


class MalformedPathError(TreeError):
    """路径格式错误异常
    
    path 应形如 "1/2/3/"：由数字ID和 "/" 组成，并以 "/" 结尾。
    
    Attributes:
        path: 错误的路径
    """
    
    def __init__(self, path: Any, reason: str = None):
        self.path = path
        msg = f"路径格式错误: {path!r}"
        if reason:
            msg += f"（{reason}）"
        super().__init__(msg, code=ErrorCode.MALFORMED_PATH, path=path)


class PathTooLongError(TreeError):
    """路径超长异常
    
    Attributes:
        path: 超长的路径
        max_length: 允许的最大长度
    """
    
    def __init__(self, path: str, max_length: int):
        self.path = path
        self.max_length = max_length
        super().__init__(
            f"路径长度 {len(path)} 超过上限 {max_length}",
            code=ErrorCode.PATH_TOO_LONG,
            path=path,
            max_length=max_length,
        )


class NodeNotPersistedError(TreeError):
    """节点未持久化异常
    
    作为父节点或兄弟节点的目标节点必须已经保存到数据库。
    """
    
    def __init__(self, node: Any):
        super().__init__(
            f"目标节点（{type(node).__name__}）尚未保存，无法作为参照节点",
            code=ErrorCode.NODE_NOT_PERSISTED,
        )


__all__ = [
    "TreeError",
    "SelfReferenceError",
    "CircularReferenceError",
    "MissingParentError",
    "MalformedPathError",
    "PathTooLongError",
    "NodeNotPersistedError",
]
