"""
YCMS - 内容管理后台的导航树引擎

提供菜单树的构建/展平、拖拽移动规划、顺序集合排序、级联更新解析和批量提交
"""

from .version import __version__, __author__, __description__

# 导出响应模块
from .response import (
    Resp,
    OK,
    BadRequest,
    NotFound,
    Warning,
    ItemResponse,
    OkResponse,
)

# 导出异常处理
from .exceptions import (
    Err,
    ErrorCode,
    BusinessException,
    ValidationException,
    CycleException,
    ReferentialIntegrityException,
    BatchCommitException,
    ResourceNotFoundException,
    ResourceConflictException,
    register_exception_handlers,
)

# 导出日志
from .log import setup_logger, setup_root_logger, get_logger

# 导出配置
from .config import (
    AppSettings,
    TreeSettings,
    DatabaseSettings,
    LoggingSettings,
    ConfigLoader,
    load_yaml_config,
)

# 导出导航树
from .tree import (
    ROOT_PARENT_ID,
    TreeNode,
    MenuRecord,
    PageRecord,
    SequentialItem,
    CategoryRecord,
    FaqRecord,
    OrderUpdate,
    NodeUpdate,
    ForestNode,
    TreeSnapshot,
    build_forest,
    flatten_forest,
    reorder_within_parent,
    reparent,
    plan_move,
    can_drop,
)

# 导出顺序集合
from .sortable import set_order, plan_insert, normalize_orders, reorder_by_ids

# 导出级联与存储
from .cascade import CascadeResolver
from .store import (
    Mutation,
    MutationOp,
    DocumentStore,
    BatchCommitCoordinator,
    MemoryDocumentStore,
    SqlDocumentStore,
)

# 导出服务
from .services import MenuService, CategoryService

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    # 响应
    "Resp",
    "OK",
    "BadRequest",
    "NotFound",
    "Warning",
    "ItemResponse",
    "OkResponse",
    # 异常
    "Err",
    "ErrorCode",
    "BusinessException",
    "ValidationException",
    "CycleException",
    "ReferentialIntegrityException",
    "BatchCommitException",
    "ResourceNotFoundException",
    "ResourceConflictException",
    "register_exception_handlers",
    # 日志
    "setup_logger",
    "setup_root_logger",
    "get_logger",
    # 配置
    "AppSettings",
    "TreeSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "ConfigLoader",
    "load_yaml_config",
    # 导航树
    "ROOT_PARENT_ID",
    "TreeNode",
    "MenuRecord",
    "PageRecord",
    "SequentialItem",
    "CategoryRecord",
    "FaqRecord",
    "OrderUpdate",
    "NodeUpdate",
    "ForestNode",
    "TreeSnapshot",
    "build_forest",
    "flatten_forest",
    "reorder_within_parent",
    "reparent",
    "plan_move",
    "can_drop",
    # 顺序集合
    "set_order",
    "plan_insert",
    "normalize_orders",
    "reorder_by_ids",
    # 级联与存储
    "CascadeResolver",
    "Mutation",
    "MutationOp",
    "DocumentStore",
    "BatchCommitCoordinator",
    "MemoryDocumentStore",
    "SqlDocumentStore",
    # 服务
    "MenuService",
    "CategoryService",
]
