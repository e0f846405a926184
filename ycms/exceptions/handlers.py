"""全局异常处理器

把业务异常、请求校验错误和记录模型校验错误转换为统一的 Resp 错误信封:

    {
        "status": "error",
        "message": "不能将节点移动到其子孙节点下",
        "msg_details": ["about -> team"],
        "data": {"moved_id": "about", "new_parent_id": "team"},
        "error_code": "TREE_CYCLE"
    }

业务异常的 extra 上下文放在 data 中返回。
"""

from typing import Any, Dict, List, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ycms.log import get_logger
from ycms.response import BaseResponse, ResponseStatus, ValidationErrorResponse
from .exceptions import (
    BatchCommitException,
    BusinessException,
    CycleException,
    ErrorCode,
    ErrorCodeType,
    format_validation_errors,
)

logger = get_logger()


def error_response(
    status_code: int,
    message: str,
    code: ErrorCodeType,
    details: Optional[List[str]] = None,
    data: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """构建错误信封"""
    return JSONResponse(
        status_code=status_code,
        content={
            "status": ResponseStatus.ERROR.value,
            "message": message,
            "msg_details": details or [],
            "data": BaseResponse._serialize_data(data),
            "error_code": getattr(code, "value", code),
        },
    )


def _details_for(exc: BusinessException) -> List[str]:
    """环检测和批量提交失败时，在详情中补充失败位置"""
    details = list(exc.details)
    if details:
        return details

    extra = exc.extra
    if isinstance(exc, CycleException) and "moved_id" in extra:
        details.append(f"{extra['moved_id']} -> {extra.get('new_parent_id')}")
    elif isinstance(exc, BatchCommitException) and "failed_index" in extra:
        details.append(
            f"第 {extra['failed_index'] + 1} 条写入失败: {extra.get('collection')}/{extra.get('doc_id')}"
        )
    return details


async def business_exception_handler(request: Request, exc: BusinessException) -> JSONResponse:
    """业务异常处理器

    4xx 记 WARNING，批量提交失败（503）记 ERROR。
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{request.method} {request.url.path} -> {exc.status_code} {getattr(exc.code, 'value', exc.code)}: {exc.message}")
    return error_response(exc.status_code, exc.message, exc.code, _details_for(exc), exc.extra)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """请求参数校验失败 (422)"""
    errors = format_validation_errors(exc.errors(), strip_location=True)
    logger.warning(f"{request.method} {request.url.path} -> 422 请求参数验证失败: {errors}")
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "请求参数验证失败",
        ErrorCode.VALIDATION_ERROR,
        errors,
    )


async def record_validation_handler(request: Request, exc: PydanticValidationError) -> JSONResponse:
    """记录模型校验失败 (422)

    服务层未转换的 pydantic ValidationError 也按数据校验失败返回。
    """
    errors = format_validation_errors(exc.errors())
    logger.warning(f"{request.method} {request.url.path} -> 422 {exc.title} 校验失败: {errors}")
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "数据验证失败",
        ErrorCode.VALIDATION_ERROR,
        errors,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTP 异常处理器（404 路由不存在、405 方法不允许等）"""
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code} {exc.detail}")
    return error_response(exc.status_code, str(exc.detail), f"HTTP_{exc.status_code}")


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """兜底处理器：记录堆栈，返回 500"""
    logger.exception(f"{request.method} {request.url.path} 未处理异常: {type(exc).__name__}")
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "服务器内部错误",
        ErrorCode.INTERNAL_SERVER_ERROR,
    )


def register_exception_handlers(app) -> None:
    """注册所有异常处理器到 FastAPI 应用

    使用示例:
        from fastapi import FastAPI
        from ycms.exceptions import register_exception_handlers

        app = FastAPI()
        register_exception_handlers(app)
    """
    app.add_exception_handler(BusinessException, business_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PydanticValidationError, record_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    # 兜底处理器必须放在最后
    app.add_exception_handler(Exception, general_exception_handler)

    app.router.responses[422] = {
        "description": "请求参数验证失败",
        "model": ValidationErrorResponse,
    }


__all__ = [
    "error_response",
    "register_exception_handlers",
    "business_exception_handler",
    "validation_exception_handler",
    "record_validation_handler",
    "http_exception_handler",
    "general_exception_handler",
]
