"""异常处理模块

使用示例:
    from ytree.exceptions import YTreeException, ErrorCode
"""

from .exceptions import (
    ErrorCode,
    ErrorCodeType,
    YTreeException,
)

__all__ = [
    "ErrorCode",
    "ErrorCodeType",
    "YTreeException",
]
