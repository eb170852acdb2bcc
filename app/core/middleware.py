"""
File: app/core/middleware.py
Description: 中间件

1. RequestLogMiddleware:
   - 为每个请求生成 UUID v7 request_id，写入 request.state
   - 通过 logger.contextualize 让整条调用链的日志都带上 request_id
   - 记录 Access Log (方法 / 路径 / 状态码 / 耗时)
   - 回写 X-Request-ID 响应头
2. register_middlewares: 注册 CORS 与请求日志中间件

Author: jinmozhe
Created: 2026-03-02
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from uuid6 import uuid7

from app.core.config import settings
from app.core.logging import logger

# 高频低价值路径，不写 Access Log
SKIP_LOG_PATHS: frozenset[str] = frozenset({"/health", "/favicon.ico"})


class RequestLogMiddleware(BaseHTTPMiddleware):
    """请求 ID + Access Log"""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = str(uuid7())
        request.state.request_id = request_id

        with logger.contextualize(request_id=request_id):
            start = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception as exc:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    method=request.method,
                    path=request.url.path,
                    duration_ms=round(duration_ms, 2),
                ).opt(exception=exc).error("Request failed with unhandled exception")
                raise

            response.headers["X-Request-ID"] = request_id

            if request.url.path not in SKIP_LOG_PATHS:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=round(duration_ms, 2),
                    client_ip=request.client.host if request.client else "unknown",
                ).info(
                    f"{request.method} {request.url.path} -> {response.status_code}"
                )

            return response


def register_middlewares(app: FastAPI) -> None:
    """
    注册顺序与执行顺序相反 (洋葱模型)：
    RequestLogMiddleware 最后注册，因此最先拿到请求。
    """
    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[
                str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS
            ],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_middleware(RequestLogMiddleware)
