"""异常处理模块

提供业务异常类、全局异常处理器等功能。

使用示例:
    from ycms import Err, register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)

    # 在业务代码中抛出异常（推荐使用 Err）
    if menu is None:
        raise Err.not_found("菜单不存在")
"""

from .exceptions import (
    # ===== 推荐使用 =====
    Err,
    ErrorCode,
    ErrorCodeType,

    # ===== 高级用法 =====
    BusinessException,
    ResourceNotFoundException,      # 404
    ResourceConflictException,      # 409
    ValidationException,            # 422
    CycleException,                 # 422
    ReferentialIntegrityException,  # 409
    BatchCommitException,           # 503
    format_validation_errors,
)

from .handlers import (
    error_response,
    register_exception_handlers,
    business_exception_handler,
    validation_exception_handler,
    record_validation_handler,
    http_exception_handler,
    general_exception_handler,
)

__all__ = [
    "Err",
    "ErrorCode",
    "ErrorCodeType",
    "register_exception_handlers",
    "BusinessException",
    "ResourceNotFoundException",
    "ResourceConflictException",
    "ValidationException",
    "CycleException",
    "ReferentialIntegrityException",
    "BatchCommitException",
    "format_validation_errors",
    "business_exception_handler",
    "validation_exception_handler",
    "record_validation_handler",
    "error_response",
    "http_exception_handler",
    "general_exception_handler",
]
