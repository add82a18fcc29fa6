"""
ORM 核心模型

树形模型的行存储层：保存、按 ID 读取、条件查询和直接 UPDATE。
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Dict, Iterable, List, Optional, TYPE_CHECKING

from sqlalchemy import DateTime, func, update, inspect
from sqlalchemy.orm import Mapped, mapped_column, declared_attr, Session, Query

if TYPE_CHECKING:
    from typing_extensions import Self

from .id_model import IdModel
from .utils import to_snake_case


class CoreModel(IdModel):
    """模型基类

    在 IdModel 的自增主键之上提供：
    - 由类名推导的表名（TreeNode -> tree_node）
    - created_at / updated_at 时间戳
    - save / update / delete 等实例方法，commit 参数控制是否提交
    - get / get_all 等按类查询的方法
    - bulk_update 系列：直接执行 UPDATE，不经过实例，也不触发 ORM 更新事件

    使用示例:
        from ytree.orm import CoreModel, init_database

        init_database("sqlite:///./tree.db")

        class Region(CoreModel):
            name: Mapped[str] = mapped_column(String(50))

        Region(name="华东").save(commit=True)
        Region.get(1)
    """
    __abstract__ = True

    # init_database() 会把 scoped_session.query_property() 绑定到这里
    if TYPE_CHECKING:
        query: ClassVar[Query[Self]]

    _session: Session = None

    @declared_attr.directive
    def __tablename__(cls) -> str:
        name = cls.__name__
        if '_' in name:
            raise ValueError(f'类名 {name} 含有下划线，请显式指定 __tablename__')
        return to_snake_case(name)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=func.now(),
        comment="创建时间"
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=False),
        nullable=True,
        onupdate=func.now(),
        comment="更新时间"
    )

    # 由数据库维护的字段，构造参数中出现时直接丢弃
    _system_fields: ClassVar[set] = {'id', 'created_at', 'updated_at'}

    def __init__(self, **kwargs):
        for field in self._system_fields:
            kwargs.pop(field, None)
        super().__init__(**kwargs)

    def __repr__(self):
        return f"<{type(self).__name__} id={self.id}>"

    def __getattribute__(self, name):
        """读取 pending 对象的 id 时先 flush，保证主键立即可用

            node = Region(name="华东").save()
            node.id    # 已分配
        """
        value = super().__getattribute__(name)
        if name != 'id' or value is not None:
            return value

        try:
            state = super().__getattribute__('_sa_instance_state')
        except AttributeError:
            return value

        session = state.session
        # insert 事件回调期间 session 正在 flush，不能重入
        if session is not None and state.pending and not session._flushing:
            session.flush()
            return super().__getattribute__(name)
        return value

    @property
    def session(self) -> Session:
        """实例使用的 session：优先取 query 绑定的 session，否则取全局 scoped_session"""
        if self._session is None:
            if getattr(type(self), 'query', None) is not None:
                self._session = type(self).query.session
            else:
                from .db_session import db_manager
                self._session = db_manager.get_session()
        return self._session

    # ==================== 实例方法 ====================

    def save(self, commit: bool = False) -> Self:
        """加入 session（新增和修改相同），commit=True 时立即提交"""
        self.session.add(self)
        self._commit(commit)
        return self

    def update(self, commit: bool = False, **kwargs) -> Self:
        """批量设置属性，忽略模型上不存在的字段

            region.update(name="华南", commit=True)
        """
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
        self._commit(commit)
        return self

    def delete(self, commit: bool = False):
        """物理删除；树形模型的子孙由外键 ON DELETE CASCADE 处理"""
        self.session.delete(self)
        self._commit(commit)

    def refresh(self, attribute_names: Optional[List[str]] = None) -> Self:
        self.session.refresh(self, attribute_names or None)
        return self

    @property
    def is_persisted(self) -> bool:
        """是否已写入数据库"""
        state = inspect(self)
        return state.persistent or state.detached

    def to_dict(self, exclude: Optional[set] = None) -> Dict[str, Any]:
        """列字段 -> 字典"""
        exclude = exclude or set()
        return {
            attr.key: getattr(self, attr.key)
            for attr in inspect(type(self)).column_attrs
            if attr.key not in exclude
        }

    def _commit(self, commit: bool):
        if commit:
            self.session.commit()

    # ==================== 类方法 ====================

    @classmethod
    def get(cls, id: int):
        """按主键读取，不存在时返回 None"""
        return cls.query.filter_by(id=id).first()

    @classmethod
    def get_all(cls) -> List:
        return cls.query.all()

    @classmethod
    def get_list_by_conditions(cls, conditions: Dict[str, Any]) -> List:
        """等值条件查询，如 {"name": "华东"}"""
        return cls.query.filter_by(**conditions).all()

    @classmethod
    def save_all(cls, objects: Iterable, commit: bool = False):
        objects = list(objects)
        if objects:
            cls.query.session.add_all(objects)
            cls._cls_commit(commit)
        return objects

    @classmethod
    def bulk_update(cls, filters: Dict[str, Any], values: Dict[str, Any], commit: bool = False) -> int:
        """按等值条件直接执行 UPDATE

        不经过实例的 flush 流程，before_update / after_update 等 ORM 事件不会触发；
        session 中已加载的对象会同步为新值。

        Args:
            filters: 等值条件，模型上不存在的字段被忽略
            values: 要写入的字段
            commit: 是否提交

        Returns:
            受影响的行数
        """
        stmt = update(cls)
        for key, value in filters.items():
            column = getattr(cls, key, None)
            if column is not None:
                stmt = stmt.where(column == value)
        return cls._execute_update(stmt.values(**values), commit)

    @classmethod
    def bulk_update_by_ids(cls, ids: Iterable[int], values: Dict[str, Any], commit: bool = False) -> int:
        """按主键列表直接执行 UPDATE，空列表返回 0"""
        ids = list(ids)
        if not ids:
            return 0
        return cls._execute_update(update(cls).where(cls.id.in_(ids)).values(**values), commit)

    @classmethod
    def _execute_update(cls, stmt, commit: bool) -> int:
        result = cls.query.session.execute(stmt)
        cls._cls_commit(commit)
        return result.rowcount

    @classmethod
    def _cls_commit(cls, commit: bool):
        if commit:
            cls.query.session.commit()


__all__ = ["CoreModel"]
