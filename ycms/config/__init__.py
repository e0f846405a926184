"""配置模块

提供配置管理功能：
- AppSettings: 应用基础配置，聚合 tree / database / logging 子配置
- ConfigLoader: YAML 配置加载器

快速开始:
    from ycms.config import AppSettings, load_yaml_config

    settings = load_yaml_config("config/settings.yaml", AppSettings)
"""

from .settings import (
    AppSettings,
    TreeSettings,
    DatabaseSettings,
    LoggingSettings,
)

from .loader import (
    ConfigLoader,
    load_yaml_config,
)

__all__ = [
    "AppSettings",
    "TreeSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "ConfigLoader",
    "load_yaml_config",
]
