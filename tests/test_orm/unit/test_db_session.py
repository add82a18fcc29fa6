"""数据库会话管理测试"""

import os

import pytest
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.pool import StaticPool

from ytree.config import DatabaseSettings
from ytree.orm import (
    CoreModel,
    Base,
    db_manager,
    init_database,
    get_engine,
    db_session_scope,
    on_request_end,
)
from ytree.orm.tree import TreeFieldsMixin, TreeMixin


class SessionNode(CoreModel, TreeFieldsMixin, TreeMixin):
    __tablename__ = "test_session_node"
    __table_args__ = {'extend_existing': True}

    title: Mapped[str] = mapped_column(String(50))


@pytest.fixture
def database():
    """使用全局管理器初始化内存数据库"""
    engine, session_scope = init_database("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    yield engine
    db_manager.dispose()


class TestInitDatabase:
    """init_database 测试"""

    def test_memory_uses_static_pool(self, database):
        assert isinstance(database.pool, StaticPool)
        assert get_engine() is database
        assert db_manager.is_initialized

    def test_init_from_config(self):
        engine, _ = init_database(config=DatabaseSettings(url="sqlite:///:memory:", echo=True))
        try:
            assert engine.url.get_backend_name() == "sqlite"
            assert engine.url.database == ":memory:"
            assert engine.echo is True
            assert isinstance(engine.pool, StaticPool)
        finally:
            db_manager.dispose()

    def test_file_database(self, temp_dir):
        """文件数据库使用默认连接池，数据在 session 之间保留"""
        db_file = os.path.join(temp_dir, "tree.db")
        engine, _ = init_database(f"sqlite:///{db_file}")
        try:
            assert not isinstance(engine.pool, StaticPool)
            assert engine.url.database == db_file
            Base.metadata.create_all(bind=engine)

            with db_session_scope():
                SessionNode(title="root").save()
            with db_session_scope():
                assert [n.path for n in SessionNode.get_all()] == ["1/"]
        finally:
            db_manager.dispose()

    def test_missing_url(self):
        with pytest.raises(ValueError):
            init_database()

    def test_not_initialized(self):
        db_manager.dispose()
        with pytest.raises(RuntimeError):
            get_engine()
        with pytest.raises(RuntimeError):
            db_manager.get_session()


class TestSessionScope:
    """db_session_scope 测试"""

    def test_commit_on_success(self, database):
        with db_session_scope():
            root = SessionNode(title="root").save()
            child = SessionNode(title="child").save()
            child.set_child_of(root)

        with db_session_scope():
            nodes = SessionNode.get_all()
            assert [n.path for n in nodes] == ["1/", "1/2/"]

    def test_rollback_on_error(self, database):
        with pytest.raises(RuntimeError):
            with db_session_scope():
                SessionNode(title="x").save()
                raise RuntimeError("boom")

        with db_session_scope():
            assert SessionNode.get_all() == []

    def test_on_request_end_is_idempotent(self, database):
        on_request_end()
        on_request_end()

    def test_without_auto_commit(self, database):
        with db_session_scope(auto_commit=False):
            SessionNode(title="x").save()

        with db_session_scope():
            assert SessionNode.get_all() == []
