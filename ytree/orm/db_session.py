"""
数据库会话管理

一个进程内只维护一个引擎和一个 scoped_session（按线程隔离）。
树的移动操作与其子孙级联更新应放在同一个 db_session_scope() 中完成。

公开 API:
- db_manager: 管理器单例
- init_database(): 创建引擎与 scoped_session
- get_engine(): 当前引擎
- db_session_scope(): 自动提交/回滚/清理的上下文管理器
- on_request_end(): 清理当前线程的 session
"""

from contextlib import contextmanager
from typing import Any, Callable, Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, scoped_session, Session
from sqlalchemy.pool import StaticPool

from ytree.log import get_logger

logger = get_logger()

__all__ = [
    'db_manager',
    'init_database',
    'get_engine',
    'db_session_scope',
    'on_request_end',
]

_NOT_INITIALIZED = "数据库未初始化，请先调用 init_database()"


def _build_engine(database_url: str, echo: bool) -> Engine:
    """按 URL 创建引擎

    SQLite 内存库只有一个连接（StaticPool），否则每个连接都是一个新的空库；
    其余 SQLite 库关闭同线程检查，由 scoped_session 负责线程隔离。
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(url, echo=echo)

    connect_args = {"check_same_thread": False}
    if url.database in (None, "", ":memory:"):
        return create_engine(url, echo=echo, connect_args=connect_args, poolclass=StaticPool)
    return create_engine(url, echo=echo, connect_args=connect_args)


class DatabaseManager:
    """数据库管理器（单例）

        from ytree.orm import db_manager

        db_manager.init("sqlite:///./tree.db")
        session = db_manager.get_session()
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._engine = None
            instance._sessions = None
            cls._instance = instance
        return cls._instance

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError(_NOT_INITIALIZED)
        return self._engine

    @property
    def session_scope(self) -> scoped_session:
        if self._sessions is None:
            raise RuntimeError(_NOT_INITIALIZED)
        return self._sessions

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    def init(
        self,
        database_url: Optional[str] = None,
        echo: bool = False,
        scopefunc: Optional[Callable] = None,
        config: Any = None,
        auto_setup_query: bool = True,
    ):
        """初始化数据库连接

        Args:
            database_url: 数据库连接URL
            echo: 是否输出SQL语句
            scopefunc: session 作用域函数，默认按线程隔离
            config: DatabaseSettings，提供时其 url / echo 优先
            auto_setup_query: 是否把 query_property 绑定到 CoreModel.query

        Returns:
            (engine, scoped_session)

        Raises:
            ValueError: 没有提供 URL
        """
        if config is not None:
            database_url = config.url or database_url
            echo = config.echo
        if not database_url:
            raise ValueError("database_url 是必需的，请通过参数或 config 提供")

        self._engine = _build_engine(database_url, echo)
        self._sessions = scoped_session(
            sessionmaker(bind=self._engine, autoflush=True),
            scopefunc=scopefunc,
        )
        logger.info(f"数据库引擎已创建: {self._engine.url!r}")

        if auto_setup_query:
            from .core_model import CoreModel
            CoreModel.query = self._sessions.query_property()

        return self._engine, self._sessions

    def get_session(self) -> Session:
        """当前线程的 session"""
        return self.session_scope()

    def cleanup(self):
        """移除当前线程的 session（幂等）"""
        if self._sessions is not None and self._sessions.registry.has():
            self._sessions.remove()
            logger.debug("session 已移除")

    def dispose(self):
        """释放引擎与会话，之后需重新 init"""
        self.cleanup()
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._sessions = None


db_manager = DatabaseManager()


def init_database(
    database_url: Optional[str] = None,
    echo: bool = False,
    scopefunc: Optional[Callable] = None,
    config: Any = None,
    auto_setup_query: bool = True,
):
    """db_manager.init() 的便捷函数

        engine, session = init_database("sqlite:///./tree.db")
        engine, session = init_database(config=settings.database)
    """
    return db_manager.init(
        database_url,
        echo=echo,
        scopefunc=scopefunc,
        config=config,
        auto_setup_query=auto_setup_query,
    )


def get_engine() -> Engine:
    return db_manager.engine


def on_request_end():
    db_manager.cleanup()


@contextmanager
def db_session_scope(auto_commit: bool = True) -> Generator[Session, None, None]:
    """session 上下文管理器

    正常退出时提交（auto_commit=False 时不提交），异常时回滚并重新抛出，
    最后总是移除当前 session。

        with db_session_scope():
            node.set_child_of(parent)
    """
    session = db_manager.get_session()
    try:
        yield session
        if auto_commit:
            session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        on_request_end()
