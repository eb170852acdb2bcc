"""
File: app/core/exceptions.py
Description: 业务异常类与全局异常处理器

1. AppException 携带 BaseErrorCode 枚举 (HTTP 状态 + 字符串业务码 + 默认文案)
2. 全局处理器把各类异常统一渲染为 ResponseModel.fail 信封
3. 未捕获异常一律 500，堆栈只写服务端日志

Author: jinmozhe
Created: 2026-03-02
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.error_code import BaseErrorCode, SystemErrorCode
from app.core.logging import logger
from app.core.response import ResponseModel
from app.utils.masking import mask_sensitive_data


class AppException(Exception):
    """
    应用基础异常类。

    用法:
        raise AppException(PostError.NOT_FOUND_OR_FORBIDDEN)
        raise AppException(GroupError.NOT_MEMBER, message="请先加入小组")
    """

    def __init__(
        self,
        error: BaseErrorCode,
        message: str = "",
        data: Any = None,
    ):
        self.error = error
        self.http_status = error.http_status
        self.code = error.code
        self.message = message or error.msg
        self.data = data
        super().__init__(self.message)


def _get_request_id(request: Request) -> str:
    return str(getattr(request.state, "request_id", "unknown"))


def _render(
    status_code: int,
    code: str,
    message: str,
    request_id: str,
    data: Any = None,
) -> ORJSONResponse:
    body = ResponseModel.fail(
        code=code, message=message, data=data, request_id=request_id
    )
    return ORJSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def app_exception_handler(request: Request, exc: AppException) -> ORJSONResponse:
    """业务异常：直接映射为枚举中定义的 HTTP 状态码与业务码"""
    request_id = _get_request_id(request)

    logger.bind(
        request_id=request_id,
        code=exc.code,
        http_status=exc.http_status,
    ).warning(f"Business exception: {exc.message}")

    return _render(exc.http_status, exc.code, exc.message, request_id, exc.data)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> ORJSONResponse:
    """
    参数校验异常 (FastAPI 默认 422)，统一映射为 400 system.invalid_params。
    路径参数中的非法 id (如 /posts/abc) 也走这里。
    """
    request_id = _get_request_id(request)

    errors = exc.errors()
    first_error = errors[0] if errors else {}
    loc = first_error.get("loc", ())
    field_name = str(loc[-1]) if loc else "unknown"
    readable_message = f"{field_name}: {first_error.get('msg', 'Invalid parameter')}"

    logger.bind(
        request_id=request_id,
        raw_errors=mask_sensitive_data(list(errors)),
    ).warning(f"Request validation failed: {readable_message}")

    # 只回传可序列化的关键字段，不回显 input (可能含密码)
    public_errors = [
        {
            "loc": [str(part) for part in err.get("loc", ())],
            "msg": err.get("msg"),
            "type": err.get("type"),
        }
        for err in errors
    ]

    return _render(
        SystemErrorCode.INVALID_PARAMS.http_status,
        SystemErrorCode.INVALID_PARAMS.code,
        readable_message,
        request_id,
        {"errors": public_errors},
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> ORJSONResponse:
    """框架层 HTTP 异常 (路由不存在 404 / 方法不允许 405 等)"""
    request_id = _get_request_id(request)
    code = "system.not_found" if exc.status_code == 404 else "system.http_error"

    logger.bind(
        request_id=request_id,
        status_code=exc.status_code,
    ).warning(f"HTTP exception: {exc.detail}")

    return _render(exc.status_code, code, str(exc.detail), request_id)


async def general_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """兜底：存储故障等未预期异常，返回通用 500，不暴露内部细节"""
    request_id = _get_request_id(request)

    logger.opt(exception=exc).bind(request_id=request_id).error(
        "Unhandled exception"
    )

    return _render(
        SystemErrorCode.INTERNAL_ERROR.http_status,
        SystemErrorCode.INTERNAL_ERROR.code,
        SystemErrorCode.INTERNAL_ERROR.msg,
        request_id,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """在 create_app 中调用"""
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)
