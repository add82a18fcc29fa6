"""
配置模块
提供基础库的默认配置，业务项目可以继承并覆盖
"""

from pydantic_settings import BaseSettings
from pydantic import Field, computed_field

from ..utils import parse_file_size


class DatabaseSettings(BaseSettings):
    """数据库配置
    
    使用示例:
        from ytree.config import DatabaseSettings
        
        db_config = DatabaseSettings(
            url="sqlite:///./tree.db"
        )
    """
    url: str = Field(default="", description="数据库连接URL")
    echo: bool = Field(default=False, description="是否打印SQL语句")
    
    class Config:
        env_prefix = "YTREE_DB_"


class LoggingSettings(BaseSettings):
    """日志配置
    
    使用示例:
        from ytree.config import LoggingSettings
        
        log_config = LoggingSettings(
            level="DEBUG",
            file_path="logs/tree.log",
            file_max_bytes="10MB",
        )
        
        max_bytes = log_config.parsed_file_max_bytes
    """
    level: str = Field(default="INFO", description="日志级别")
    file_path: str = Field(default="", description="日志文件路径，为空则不写文件")
    file_max_bytes: str = Field(default="10MB", description="单个日志文件最大大小，0 表示不轮转")
    file_backup_count: int = Field(default=5, description="保留的备份文件数量")
    file_encoding: str = Field(default="utf-8", description="文件编码")
    enable_console: bool = Field(default=True, description="是否启用控制台输出")
    
    @computed_field
    @property
    def parsed_file_max_bytes(self) -> int:
        """解析文件最大字节数字符串为整数"""
        return parse_file_size(self.file_max_bytes)
    
    class Config:
        env_prefix = "YTREE_LOG_"


class TreeSettings(BaseSettings):
    """树形结构配置
    
    使用示例:
        from ytree.config import TreeSettings
        from ytree.orm.tree import configure_tree
        
        configure_tree(settings=TreeSettings(strict_build=False))
    
    环境变量:
        YTREE_TREE_STRICT_BUILD=false
        YTREE_TREE_MAX_PATH_LENGTH=500
    """
    strict_build: bool = Field(default=True, description="构建树时遇到缺失父节点的记录是否抛出异常")
    max_path_length: int = Field(default=255, description="path 字段最大长度，需与数据库列长度一致")
    
    class Config:
        env_prefix = "YTREE_TREE_"


class AppSettings(BaseSettings):
    """应用基础配置
    
    将各子配置类聚合为嵌套结构，业务项目继承后只需添加项目特有的配置项。
    
    配置优先级（从高到低）:
        load_yaml_config 的 overrides > YAML 配置文件 > 环境变量 > 代码中的默认值
    
    内置子配置及环境变量前缀:
        - database: DatabaseSettings (YTREE_DB_)
        - logging:  LoggingSettings  (YTREE_LOG_)
        - tree:     TreeSettings     (YTREE_TREE_)
    
    YAML 配置示例 (config/settings.yaml):
        database:
          url: "sqlite:///./tree.db"
        logging:
          level: "INFO"
        tree:
          strict_build: true
    """
    database: DatabaseSettings = DatabaseSettings()
    logging: LoggingSettings = LoggingSettings()
    tree: TreeSettings = TreeSettings()
