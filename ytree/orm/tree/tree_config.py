"""
树形结构全局配置管理

提供全局配置接口，用于设置和获取树形结构的运行参数。
"""

from typing import Any, Optional


class TreeConfig:
    """树形结构全局配置类

    使用类变量存储全局配置：
    - strict_build: 构建树时遇到缺失父节点的记录是否抛出 MissingParentError
    - max_path_length: path 最大长度（需与数据库列长度一致）
    """
    _strict_build: bool = True
    _max_path_length: int = 255

    @classmethod
    def configure(
        cls,
        strict_build: bool = True,
        max_path_length: int = 255,
    ):
        """配置树形结构参数

        Raises:
            ValueError: 参数验证失败
        """
        if max_path_length <= 0:
            raise ValueError(f"max_path_length 必须大于 0，当前值: {max_path_length}")
        cls._strict_build = strict_build
        cls._max_path_length = max_path_length

    @classmethod
    def get_strict_build(cls) -> bool:
        return cls._strict_build

    @classmethod
    def get_max_path_length(cls) -> int:
        return cls._max_path_length

    @classmethod
    def reset(cls):
        """重置为默认配置（主要用于测试）"""
        cls._strict_build = True
        cls._max_path_length = 255


def configure_tree(
    strict_build: Optional[bool] = None,
    max_path_length: Optional[int] = None,
    settings: Any = None,
):
    """配置树形结构参数

    Args:
        strict_build: 构建树时是否严格检查父节点
        max_path_length: path 最大长度
        settings: TreeSettings 配置对象，提供后从中读取未显式传入的参数

    Examples:
        >>> configure_tree(strict_build=False)
        >>> configure_tree(settings=app_settings.tree)
    """
    if settings is not None:
        if strict_build is None:
            strict_build = getattr(settings, "strict_build", None)
        if max_path_length is None:
            max_path_length = getattr(settings, "max_path_length", None)

    TreeConfig.configure(
        strict_build=TreeConfig.get_strict_build() if strict_build is None else strict_build,
        max_path_length=TreeConfig.get_max_path_length() if max_path_length is None else max_path_length,
    )


def get_tree_config() -> dict:
    """获取当前树形结构配置"""
    return {
        "strict_build": TreeConfig.get_strict_build(),
        "max_path_length": TreeConfig.get_max_path_length(),
    }


__all__ = ["TreeConfig", "configure_tree", "get_tree_config"]
