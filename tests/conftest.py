"""
Pytest 公共配置和 Fixtures

提供测试所需的公共资源：
- 临时目录 / 临时文件
- 数据库连接
- 树形结构全局配置重置
"""

import os
import tempfile
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool


# ==================== 基础 Fixtures ====================

@pytest.fixture(scope="session")
def temp_dir():
    """创建临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def temp_file(temp_dir):
    """创建临时文件的工厂函数"""
    created_files = []
    
    def _create_file(filename: str, content: str = "") -> str:
        filepath = os.path.join(temp_dir, filename)
        if os.path.dirname(filepath):
            os.makedirs(os.path.dirname(filepath), exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(content)
        created_files.append(filepath)
        return filepath
    
    yield _create_file
    
    # 清理
    for f in created_files:
        if os.path.exists(f):
            os.remove(f)


# ==================== 数据库 Fixtures ====================

@pytest.fixture(scope="function")
def memory_engine():
    """创建内存数据库引擎
    
    使用 StaticPool 和 check_same_thread=False，所有操作共用同一个连接。
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(memory_engine) -> Generator[Session, None, None]:
    """创建数据库会话"""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=memory_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


# ==================== 配置 Fixtures ====================

@pytest.fixture(autouse=True)
def reset_tree_config():
    """每个测试前后重置树形结构全局配置"""
    from ytree.orm.tree import TreeConfig
    
    TreeConfig.reset()
    yield
    TreeConfig.reset()


@pytest.fixture
def sample_yaml_config(temp_file):
    """创建示例 YAML 配置文件"""
    yaml_content = """
database:
  url: "sqlite:///test.db"
  echo: true

logging:
  level: "DEBUG"
  file_path: "logs/test.log"
  file_max_bytes: "5MB"

tree:
  strict_build: false
  max_path_length: 500
"""
    return temp_file("config/settings.yaml", yaml_content)
