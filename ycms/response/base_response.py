from fastapi import status
from fastapi.responses import JSONResponse
from typing import Any, Optional, List, TypeVar, Generic
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field


# 泛型类型变量
T = TypeVar('T')


class ResponseStatus(str, Enum):
    """响应状态枚举

    用于标识响应的业务状态，与 HTTP 状态码独立。
    """
    SUCCESS = "success"   # 请求成功
    ERROR = "error"       # 请求失败（客户端或服务端错误）
    WARNING = "warning"   # 操作成功但有警告


# ========== 泛型响应模型 ==========

class ItemResponse(BaseModel, Generic[T]):
    """泛型单项响应模型

    使用示例:
        @router.get("/get", response_model=ItemResponse[MenuRecord])
        def get_menu(menu_id: str):
            ...
    """
    status: str = Field(default="success", description="响应状态")
    message: str = Field(default="请求成功", description="响应消息")
    msg_details: List[str] = Field(default=[], description="详细信息")
    data: T = Field(description="数据")


class ValidationErrorResponse(BaseModel):
    """验证错误响应模型（422）

    用于覆盖 FastAPI 默认的 422 OpenAPI Schema。
    """
    status: str = Field(default="error", description="响应状态")
    message: str = Field(default="请求参数验证失败", description="错误消息")
    msg_details: List[str] = Field(default=[], description="各字段验证错误详情")
    data: dict = Field(default={}, description="空数据")
    error_code: str = Field(default="VALIDATION_ERROR", description="错误码")


class OkResponse(BaseModel):
    """通用操作响应模型（移动、删除、排序等简单操作）"""
    status: str = Field(default="success", description="响应状态")
    message: str = Field(default="请求成功", description="响应消息")
    msg_details: List[str] = Field(default=[], description="详细信息")
    data: Any = Field(default={}, description="操作结果")


class BaseResponse:
    """基础响应类"""

    @staticmethod
    def _serialize_data(data: Any, _is_top_level: bool = True) -> Any:
        """递归序列化数据，处理 pydantic 模型、树节点和列表

        Args:
            data: 要序列化的数据
            _is_top_level: 是否为顶层调用，顶层 None 转为 {}，嵌套 None 保持为 None
        """
        if data is None:
            return {} if _is_top_level else None

        if isinstance(data, datetime):
            return data.strftime('%Y-%m-%d %H:%M:%S')

        if isinstance(data, BaseModel):
            return BaseResponse._serialize_data(data.model_dump(by_alias=True), False)

        # ForestNode 等带 to_dict 的对象
        if hasattr(data, 'to_dict') and callable(getattr(data, 'to_dict')):
            return BaseResponse._serialize_data(data.to_dict(), False)

        if isinstance(data, (list, tuple)):
            return [BaseResponse._serialize_data(item, False) for item in data]

        if isinstance(data, dict):
            return {k: BaseResponse._serialize_data(v, False) for k, v in data.items()}

        return data

    @staticmethod
    def _create_response(
        message: str,
        data: Any = None,
        msg_details: Optional[List[str]] = None,
        status_code: int = status.HTTP_200_OK,
        response_status: ResponseStatus = ResponseStatus.SUCCESS
    ) -> JSONResponse:
        """创建标准化响应"""
        content = {
            "status": response_status.value,
            "message": message,
            "msg_details": msg_details if msg_details is not None else [],
            "data": BaseResponse._serialize_data(data)
        }

        return JSONResponse(
            status_code=status_code,
            content=content
        )


class SuccessResponse(BaseResponse):
    """成功响应类"""

    @staticmethod
    def OK(data: Any = None, message: str = "请求成功") -> JSONResponse:
        """200 OK - 请求成功"""
        return BaseResponse._create_response(
            data=data,
            message=message,
            status_code=status.HTTP_200_OK,
            response_status=ResponseStatus.SUCCESS
        )

    @staticmethod
    def Warning(message: str = "操作成功，但有警告", data: Any = None, msg_details: Optional[List[str]] = None) -> JSONResponse:
        """警告响应 - 操作成功但有警告信息"""
        return BaseResponse._create_response(
            message=message,
            data=data,
            msg_details=msg_details,
            status_code=status.HTTP_200_OK,
            response_status=ResponseStatus.WARNING
        )


class ClientErrorResponse(BaseResponse):
    """客户端错误响应类"""

    @staticmethod
    def BadRequest(message: str = "请求参数错误", msg_details: Optional[List[str]] = None) -> JSONResponse:
        """400 Bad Request - 请求参数错误"""
        return BaseResponse._create_response(
            message=message,
            msg_details=msg_details,
            status_code=status.HTTP_400_BAD_REQUEST,
            response_status=ResponseStatus.ERROR
        )

    @staticmethod
    def NotFound(message: str = "资源不存在", msg_details: Optional[List[str]] = None) -> JSONResponse:
        """404 Not Found - 资源不存在"""
        return BaseResponse._create_response(
            message=message,
            msg_details=msg_details,
            status_code=status.HTTP_404_NOT_FOUND,
            response_status=ResponseStatus.ERROR
        )


OK = SuccessResponse.OK
Warning = SuccessResponse.Warning
BadRequest = ClientErrorResponse.BadRequest
NotFound = ClientErrorResponse.NotFound


class Resp:
    """响应快捷类

    只需导入一个类，IDE 自动补全所有响应方法。

    使用示例:
        from ycms import Resp

        return Resp.OK(data=tree)
        return Resp.NotFound(message="菜单不存在")
        return Resp.BadRequest(message="site 参数无效")
    """

    OK = OK
    """200 OK - 请求成功"""

    Warning = Warning
    """警告响应 - 操作成功但有警告信息"""

    BadRequest = BadRequest
    """400 Bad Request - 请求参数错误"""

    NotFound = NotFound
    """404 Not Found - 资源不存在"""
