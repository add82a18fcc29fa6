"""YAML 配置加载

    from ytree.config import ConfigLoader, load_yaml_config, AppSettings

    raw = ConfigLoader.load("config/settings.yaml")        # dict，按绝对路径缓存
    settings = load_yaml_config("config/settings.yaml", AppSettings)
"""

import os
from typing import Any, Dict, Optional, Type, TypeVar

import yaml


T = TypeVar("T")


def _read_yaml(path: str) -> Dict[str, Any]:
    """读取 YAML 文件，空文件视为 {}"""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"配置文件不存在: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


class ConfigLoader:
    """YAML 配置加载器

    缓存不会自动感知文件变化，修改文件后需调用 reload()。
    """

    _cache: Dict[str, Dict[str, Any]] = {}

    @staticmethod
    def resolve(config_path: str, base_dir: Optional[str] = None) -> str:
        """相对路径优先相对 base_dir，否则相对当前工作目录"""
        if not os.path.isabs(config_path) and base_dir:
            config_path = os.path.join(base_dir, config_path)
        return os.path.abspath(config_path)

    @classmethod
    def load(
        cls,
        config_path: str,
        base_dir: Optional[str] = None,
        use_cache: bool = True
    ) -> Dict[str, Any]:
        """加载配置文件

        Raises:
            FileNotFoundError: 配置文件不存在
            yaml.YAMLError: YAML 解析错误
        """
        path = cls.resolve(config_path, base_dir)
        if not use_cache:
            return _read_yaml(path)
        if path not in cls._cache:
            cls._cache[path] = _read_yaml(path)
        return cls._cache[path]

    @classmethod
    def reload(cls, config_path: str, base_dir: Optional[str] = None) -> Dict[str, Any]:
        """丢弃缓存后重新读取"""
        cls._cache.pop(cls.resolve(config_path, base_dir), None)
        return cls.load(config_path, base_dir)

    @classmethod
    def clear_cache(cls):
        cls._cache.clear()


def load_yaml_config(
    config_path: str,
    settings_class: Type[T],
    base_dir: Optional[str] = None,
    **overrides
) -> T:
    """读取 YAML 并构造 Settings 实例，overrides 覆盖文件中的同名项"""
    values = {**ConfigLoader.load(config_path, base_dir), **overrides}
    return settings_class(**values)
