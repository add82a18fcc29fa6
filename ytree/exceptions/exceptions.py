"""异常类定义

定义框架使用的异常类体系。
"""

import copy
from enum import Enum
from typing import Optional, List, Any, Dict, Union


class ErrorCode(str, Enum):
    """错误代码枚举
    
    继承自 str，可以直接作为字符串使用。
    
    使用示例:
        from ytree.exceptions import ErrorCode
        
        try:
            node.set_child_of(node)
        except YTreeException as e:
            if e.code == ErrorCode.SELF_REFERENCE:
                ...
    """
    
    # ==================== 通用错误 ====================
    YTREE_ERROR = "YTREE_ERROR"
    
    # ==================== 树形结构 ====================
    TREE_ERROR = "TREE_ERROR"
    SELF_REFERENCE = "SELF_REFERENCE"
    CIRCULAR_REFERENCE = "CIRCULAR_REFERENCE"
    MISSING_PARENT = "MISSING_PARENT"
    MALFORMED_PATH = "MALFORMED_PATH"
    PATH_TOO_LONG = "PATH_TOO_LONG"
    NODE_NOT_PERSISTED = "NODE_NOT_PERSISTED"


# 类型别名，支持枚举和字符串
ErrorCodeType = Union[str, ErrorCode]


class YTreeException(Exception):
    """异常基类

    所有 ytree 抛出的异常都继承此类。

    属性:
        message: 错误消息
        code: 错误代码（支持 ErrorCode 枚举或字符串）
        details: 详细错误信息列表
        extra: 额外的上下文信息

    使用示例:
        raise YTreeException(
            message="路径格式错误",
            code=ErrorCode.MALFORMED_PATH,
            details=["path 必须以 '/' 结尾"],
            path="1/2",
        )
    """

    def __init__(
        self,
        message: str,
        code: ErrorCodeType = ErrorCode.YTREE_ERROR,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        self.message = message
        self.code = code
        self.details = details or []
        self.extra = extra
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式

        Returns:
            包含异常信息的字典
        """
        return {
            "message": self.message,
            "code": self.code,
            "details": copy.deepcopy(self.details),
            "extra": copy.deepcopy(self.extra)
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r})"
        )
