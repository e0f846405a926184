"""测试辅助工具模块

提供测试专用的辅助函数，避免在核心代码中添加测试专用方法。
"""

from .tree_helpers import (
    node,
    menu,
    category,
    apply_updates,
    orders_by_parent,
    menu_documents,
)

__all__ = [
    'node',
    'menu',
    'category',
    'apply_updates',
    'orders_by_parent',
    'menu_documents',
]
