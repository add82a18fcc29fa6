"""版本信息"""

__version__ = "0.3.0"
__author__ = "yafo-ai"
__description__ = "基于 SQLAlchemy 的物化路径树形结构扩展"
