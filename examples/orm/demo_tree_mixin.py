"""树形结构 Mixin 使用示例

演示 TreeMixin 的各种使用场景：
1. 创建节点与定位（根 / 子节点 / 兄弟节点）
2. 移动子树与级联更新
3. 查询与树构建、文本渲染
4. 路径检查与修复
"""

import sys
from pathlib import Path

# 添加项目根目录到 path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ytree.log import setup_logger
from ytree.orm import CoreModel, Base, init_database, db_session_scope
from ytree.orm.tree import (
    TreeFieldsMixin,
    TreeMixin,
    CircularReferenceError,
    render_tree,
)


class Category(CoreModel, TreeFieldsMixin, TreeMixin):
    """商品分类"""
    __tablename__ = "demo_category"
    __tree_sort_field__ = "sort_order"

    title: Mapped[str] = mapped_column(String(100), comment="分类名称")
    sort_order: Mapped[int] = mapped_column(Integer, default=0, comment="同级排序")


def show(root, caption):
    print(f"\n--- {caption} ---")
    print(render_tree(Category.fetch_tree(root.id), label=lambda n: f"{n.title} ({n.path})"))


def main():
    setup_logger("ytree", level="DEBUG")
    engine, _ = init_database("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)

    # ==================== 1. 创建与定位 ====================
    with db_session_scope():
        goods = Category(title="全部商品").save()
        digital = Category(title="数码", sort_order=1).save()
        phone = Category(title="手机", sort_order=1).save()
        laptop = Category(title="笔记本", sort_order=2).save()
        home = Category(title="家居", sort_order=2).save()

        digital.set_child_of(goods)
        phone.set_child_of(digital)
        laptop.set_sibling_of(phone)
        home.set_sibling_of(digital)

        show(goods, "初始结构")

    # ==================== 2. 移动子树 ====================
    with db_session_scope():
        digital = Category.get_list_by_conditions({"title": "数码"})[0]
        home = Category.get_list_by_conditions({"title": "家居"})[0]

        digital.set_child_of(home)
        print(f"\n移动 数码 -> 家居，子孙数量 {digital.get_descendant_count()}")
        show(digital.get_root(), "移动后")

        try:
            home.set_child_of(digital)
        except CircularReferenceError as e:
            print(f"\n拒绝循环移动: {e.message}")

    # ==================== 3. 查询 ====================
    with db_session_scope():
        phone = Category.get_list_by_conditions({"title": "手机"})[0]
        print("\n手机的祖先:", [c.title for c in phone.get_ancestors()])
        print("所有根节点:", [c.title for c in Category.get_roots()])
        print("所有叶子节点:", [c.title for c in Category.get_leaves()])

    # ==================== 4. 检查与修复 ====================
    with db_session_scope():
        phone = Category.get_list_by_conditions({"title": "手机"})[0]
        Category.bulk_update_by_ids([phone.id], {"path": "99/", "level": 0})
        print("\n不一致的记录:", Category.check_integrity())
        print("修复记录数:", Category.rebuild_paths())
        print("修复后不一致的记录:", Category.check_integrity())


if __name__ == "__main__":
    main()
