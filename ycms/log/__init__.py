"""日志模块

使用示例:
    from ycms.log import setup_logger, get_logger

    logger = setup_logger("ycms", level="DEBUG", log_file="logs/ycms.log")
    planner_logger = get_logger()
"""

from .logger import (
    setup_logger,
    setup_root_logger,
    create_formatter,
    MicrosecondFormatter,
    DEFAULT_LOG_FORMAT,
    logger,
    get_logger,
)

__all__ = [
    "setup_logger",
    "setup_root_logger",
    "create_formatter",
    "MicrosecondFormatter",
    "DEFAULT_LOG_FORMAT",
    "logger",
    "get_logger",
]
