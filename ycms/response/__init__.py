"""响应模块

推荐使用示例（Resp 快捷类）:
    from ycms import Resp

    return Resp.OK(data=result)
    return Resp.NotFound(message="菜单不存在")
"""

from .base_response import (
    Resp,
    ResponseStatus,
    ItemResponse,
    OkResponse,
    ValidationErrorResponse,
    BaseResponse,
    SuccessResponse,
    ClientErrorResponse,
    OK,
    Warning,
    BadRequest,
    NotFound,
)

__all__ = [
    "Resp",
    "ResponseStatus",
    "ItemResponse",
    "OkResponse",
    "ValidationErrorResponse",
    "BaseResponse",
    "SuccessResponse",
    "ClientErrorResponse",
    "OK",
    "Warning",
    "BadRequest",
    "NotFound",
]
