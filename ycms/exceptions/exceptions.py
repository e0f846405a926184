"""业务异常类定义

定义导航树引擎使用的异常类体系。

异常分类:
    - ValidationException: 规划调用的输入不合法（targetIndex 为负、节点不存在等）
    - CycleException: 移动会使节点成为自己的祖先
    - ReferentialIntegrityException: 写入引用了不存在的父节点
    - BatchCommitException: 存储层未能原子地应用批量写入

任何异常都会中止整个结构变更，不会产生部分写入。
"""

import copy
from typing import Optional, List, Any, Dict, Iterable, Union
from fastapi import status
from enum import Enum

from pydantic import ValidationError as PydanticValidationError


class ErrorCode(str, Enum):
    """错误代码枚举

    继承自 str，可以直接作为字符串使用。

    使用示例:
        from ycms.exceptions import ErrorCode, CycleException

        raise CycleException("不能将菜单移动到其子孙菜单下", code=ErrorCode.TREE_CYCLE)
    """

    # ==================== 通用错误 ====================
    BUSINESS_ERROR = "BUSINESS_ERROR"
    OPERATION_FAILED = "OPERATION_FAILED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

    # ==================== 资源相关 (404) ====================
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    MENU_NOT_FOUND = "MENU_NOT_FOUND"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"

    # ==================== 冲突相关 (409) ====================
    RESOURCE_CONFLICT = "RESOURCE_CONFLICT"
    HAS_CHILDREN = "HAS_CHILDREN"
    HAS_BOUND_PAGES = "HAS_BOUND_PAGES"
    CATEGORY_IN_USE = "CATEGORY_IN_USE"
    REFERENTIAL_INTEGRITY = "REFERENTIAL_INTEGRITY"

    # ==================== 验证相关 (422) ====================
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    TREE_CYCLE = "TREE_CYCLE"
    MAX_DEPTH_EXCEEDED = "MAX_DEPTH_EXCEEDED"

    # ==================== 存储相关 (503) ====================
    BATCH_COMMIT_FAILED = "BATCH_COMMIT_FAILED"


# 类型别名，支持枚举和字符串
ErrorCodeType = Union[str, ErrorCode]

# 错误位置中不属于字段路径的部分
REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")


class BusinessException(Exception):
    """业务异常基类

    所有业务异常都应该继承此类。

    属性:
        message: 错误消息（面向用户）
        code: 错误代码（用于程序判断，支持 ErrorCode 枚举或字符串）
        status_code: HTTP 状态码
        details: 详细错误信息列表
        extra: 额外的上下文信息

    使用示例:
        raise BusinessException(
            message="菜单移动失败",
            code=ErrorCode.OPERATION_FAILED,
            extra={"menu_id": "m1"}
        )
    """

    def __init__(
        self,
        message: str,
        code: ErrorCodeType = ErrorCode.BUSINESS_ERROR,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or []
        self.extra = extra
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式

        Returns:
            包含异常信息的字典
        """
        return {
            "message": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "details": copy.deepcopy(self.details),
            "extra": copy.deepcopy(self.extra)
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"status_code={self.status_code})"
        )


class ResourceNotFoundException(BusinessException):
    """资源不存在异常

    使用示例:
        raise ResourceNotFoundException("菜单不存在", code=ErrorCode.MENU_NOT_FOUND, menu_id="m1")
    """

    def __init__(
        self,
        message: str = "资源不存在",
        code: ErrorCodeType = ErrorCode.RESOURCE_NOT_FOUND,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            **extra
        )


class ResourceConflictException(BusinessException):
    """资源冲突异常

    删除仍有子菜单的菜单、删除仍被 FAQ 使用的分类等场景。
    """

    def __init__(
        self,
        message: str = "资源冲突",
        code: ErrorCodeType = ErrorCode.RESOURCE_CONFLICT,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_409_CONFLICT,
            details=details,
            **extra
        )


class ValidationException(BusinessException):
    """数据验证异常

    规划器输入不合法时抛出，调用方不得继续提交。

    使用示例:
        raise ValidationException("targetIndex 不能为负数", target_index=-1)
    """

    def __init__(
        self,
        message: str = "数据验证失败",
        code: ErrorCodeType = ErrorCode.VALIDATION_ERROR,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            **extra
        )


class CycleException(ValidationException):
    """循环引用异常

    移动会使节点成为自己的祖先时抛出，在生成任何更新之前检测。
    """

    def __init__(
        self,
        message: str = "不能将节点移动到其自身或子孙节点下",
        code: ErrorCodeType = ErrorCode.TREE_CYCLE,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(message=message, code=code, details=details, **extra)


class ReferentialIntegrityException(BusinessException):
    """引用完整性异常

    读取时悬空的 parentId 会被修复为根节点；写入时显式设置不存在的
    parentId 则抛出此异常。
    """

    def __init__(
        self,
        message: str = "父节点不存在",
        code: ErrorCodeType = ErrorCode.REFERENTIAL_INTEGRITY,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_409_CONFLICT,
            details=details,
            **extra
        )


class BatchCommitException(BusinessException):
    """批量提交异常

    存储层未能原子地应用一个批次时抛出。不会自动重试：
    调用方应重新读取快照并重新规划。
    """

    def __init__(
        self,
        message: str = "批量写入失败",
        code: ErrorCodeType = ErrorCode.BATCH_COMMIT_FAILED,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
            **extra
        )


def format_validation_errors(
    errors: Iterable[Dict[str, Any]],
    strip_location: bool = False,
) -> List[str]:
    """把 pydantic 错误列表转换为 "字段: 原因" 形式的详情

    Args:
        errors: ValidationError.errors() 或 RequestValidationError.errors()
        strip_location: 去掉请求错误开头的 body/query 等位置
    """
    details = []
    for error in errors:
        loc = list(error.get("loc", ()))
        if strip_location and loc and loc[0] in REQUEST_LOCATIONS:
            loc = loc[1:]
        loc_parts = [str(part) for part in loc]
        field = ".".join(loc_parts) if loc_parts else "请求体"
        details.append(f"{field}: {error.get('msg', '')}")
    return details


class Err:
    """异常快捷创建类

    使用示例:
        from ycms import Err

        raise Err.not_found("菜单不存在", menu_id="m1")
        raise Err.invalid("targetIndex 不能为负数")
        raise Err.cycle(moved_id="A", new_parent_id="C")
        raise Err.integrity("父菜单不存在", parent_id="x")
        raise Err.batch("写入超时")
    """

    @staticmethod
    def not_found(message: str = "资源不存在", **kwargs) -> ResourceNotFoundException:
        """资源不存在 (404)"""
        return ResourceNotFoundException(message, **kwargs)

    @staticmethod
    def conflict(message: str = "资源冲突", **kwargs) -> ResourceConflictException:
        """资源冲突 (409)"""
        return ResourceConflictException(message, **kwargs)

    @staticmethod
    def invalid(message: str = "数据验证失败", **kwargs) -> ValidationException:
        """数据验证失败 (422)

        适用场景: 规划器参数不合法、节点不在快照中等
        """
        return ValidationException(message, **kwargs)

    @staticmethod
    def cycle(message: str = "不能将节点移动到其自身或子孙节点下", **kwargs) -> CycleException:
        """循环引用 (422)"""
        return CycleException(message, **kwargs)

    @staticmethod
    def integrity(message: str = "父节点不存在", **kwargs) -> ReferentialIntegrityException:
        """引用完整性错误 (409)"""
        return ReferentialIntegrityException(message, **kwargs)

    @staticmethod
    def batch(message: str = "批量写入失败", **kwargs) -> BatchCommitException:
        """批量提交失败 (503)"""
        return BatchCommitException(message, **kwargs)

    @staticmethod
    def from_pydantic(
        error: PydanticValidationError,
        message: str = "数据验证失败",
        **kwargs,
    ) -> ValidationException:
        """pydantic 校验错误转换为 ValidationException (422)

        使用示例:
            try:
                menu = MenuRecord.model_validate(data)
            except PydanticValidationError as e:
                raise Err.from_pydantic(e, "菜单数据不合法") from e
        """
        kwargs.setdefault("details", format_validation_errors(error.errors()))
        return ValidationException(message, **kwargs)

    @staticmethod
    def fail(message: str = "操作失败", **kwargs) -> BusinessException:
        """通用业务异常 (400)"""
        return BusinessException(message, **kwargs)
