"""
File: app/core/response.py
Description: 统一响应信封 (Unified Response Envelope)

全站 HTTP 接口 (健康检查除外的所有业务接口) 均返回:
{code, message, data, request_id, timestamp}

Author: jinmozhe
Created: 2026-03-02
"""

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar, cast

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

SUCCESS_CODE = "success"


class ResponseBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str = Field(default=SUCCESS_CODE, description="业务状态码")
    message: str = Field(default="Success", description="响应消息")
    request_id: str | None = Field(default=None, description="请求追踪ID")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="响应生成时间 (UTC)",
    )


class ResponseModel(ResponseBase, Generic[T]):
    """
    统一响应信封

    用法:
        return ResponseModel.success(data=PostRead.model_validate(post))
    """

    data: T | None = Field(default=None, description="业务数据")

    @classmethod
    def success(
        cls,
        data: T | None = None,
        message: str = "Success",
        request_id: str | None = None,
    ) -> "ResponseModel[T]":
        # Pydantic 模型统一转成 JSON 安全的 dict，列表内元素同理
        if hasattr(data, "model_dump"):
            data = cast(Any, data).model_dump(mode="json")
        elif isinstance(data, list):
            data = cast(
                Any,
                [
                    item.model_dump(mode="json") if hasattr(item, "model_dump") else item
                    for item in data
                ],
            )

        return cls(
            code=SUCCESS_CODE,
            message=message,
            data=data,
            request_id=request_id,
        )

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        data: Any = None,
        request_id: str | None = None,
    ) -> "ResponseModel[Any]":
        return cls(
            code=code,
            message=message,
            data=data,
            request_id=request_id,
        )
