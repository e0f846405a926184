"""
配置模块
提供导航树引擎的默认配置，业务项目可以继承并覆盖
"""

from pydantic_settings import BaseSettings
from pydantic import Field, computed_field

from ..utils import parse_file_size


class TreeSettings(BaseSettings):
    """导航树配置

    使用示例:
        from ycms.config import TreeSettings

        tree_config = TreeSettings(
            max_depth=4,
            allow_reparent_with_children=False,
        )

    配置说明:
        - root_parent_id: 顶层菜单的 parentId 哨兵值（根本身深度为 0，不存储）
        - max_depth: 菜单最大层级，移动/创建时超过则拒绝
        - allow_reparent_with_children: 是否允许移动有子菜单的节点（允许时递归修正子孙 depth）
        - external_link_page_type: 外部链接类型的 pageType，path 变更时不联动页面 slug
    """
    root_parent_id: str = Field(default="0", description="根节点哨兵 parentId")
    max_depth: int = Field(default=3, ge=1, description="菜单最大层级")
    allow_reparent_with_children: bool = Field(default=True, description="是否允许移动非叶子节点")
    external_link_page_type: str = Field(default="links", description="外部链接 pageType")

    menus_collection: str = Field(default="menus", description="菜单集合名")
    pages_collection: str = Field(default="pages", description="页面集合名")
    categories_collection: str = Field(default="faqCategories", description="FAQ 分类集合名")
    faqs_collection: str = Field(default="faqs", description="FAQ 集合名")

    class Config:
        env_prefix = "YCMS_TREE_"


class DatabaseSettings(BaseSettings):
    """数据库配置（SqlDocumentStore 使用）

    使用示例:
        from ycms.config import DatabaseSettings

        db_config = DatabaseSettings(url="sqlite:///./ycms.db")
    """
    url: str = Field(default="sqlite:///:memory:", description="数据库连接URL")
    echo: bool = Field(default=False, description="是否打印SQL语句")
    pool_pre_ping: bool = Field(default=True, description="连接前检查")

    class Config:
        env_prefix = "YCMS_DB_"


class LoggingSettings(BaseSettings):
    """日志配置

    使用示例:
        from ycms.config import LoggingSettings

        log_config = LoggingSettings(level="DEBUG", file_path="logs/ycms.log")
        max_bytes = log_config.parsed_file_max_bytes
    """
    level: str = Field(default="INFO", description="日志级别")
    file_path: str = Field(default="", description="日志文件路径，为空则不写文件")
    file_max_bytes: str = Field(default="10MB", description="单个日志文件最大大小")
    file_backup_count: int = Field(default=5, description="保留的备份文件数量")
    enable_console: bool = Field(default=True, description="是否启用控制台输出")

    @computed_field
    @property
    def parsed_file_max_bytes(self) -> int:
        """解析文件最大字节数字符串为整数"""
        return parse_file_size(self.file_max_bytes)

    class Config:
        env_prefix = "YCMS_LOG_"


class AppSettings(BaseSettings):
    """应用基础配置

    将各子配置类聚合为嵌套结构。

    内置子配置及环境变量前缀:
        - tree:     TreeSettings      (YCMS_TREE_)
        - database: DatabaseSettings  (YCMS_DB_)
        - logging:  LoggingSettings   (YCMS_LOG_)

    使用示例:
        from ycms.config import AppSettings, load_yaml_config

        settings = load_yaml_config("config/settings.yaml", AppSettings)

    YAML 配置示例 (config/settings.yaml):
        tree:
          max_depth: 3
          root_parent_id: "0"
        database:
          url: "sqlite:///./ycms.db"
        logging:
          level: "INFO"
    """
    app_name: str = Field(default="ycms", description="应用名称")
    debug: bool = Field(default=False, description="调试模式")

    tree: TreeSettings = TreeSettings()
    database: DatabaseSettings = DatabaseSettings()
    logging: LoggingSettings = LoggingSettings()

    class Config:
        env_prefix = "YCMS_"
