"""
File: app/core/logging.py
Description: 日志配置 (Loguru)

本模块负责：
1. 接管标准库 logging (uvicorn / fastapi / sqlalchemy)，统一转发到 Loguru
2. 控制台输出：开发环境彩色文本，生产环境 JSON
3. 可选的文件 Sink (轮转 / 保留 / 压缩)
4. 日志行自动附带 request_id (由 RequestLogMiddleware 注入上下文)

Author: jinmozhe
Created: 2026-03-02
"""

import logging
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from app.core.config import settings

# 需要接管的第三方 logger 前缀
_INTERCEPTED_PREFIXES = ("uvicorn", "fastapi", "sqlalchemy")


class InterceptHandler(logging.Handler):
    """把标准库 LogRecord 转交给 Loguru。"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # 跳过 logging 模块自身的栈帧，保证文件名/行号指向真实调用方
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def format_record(record: dict[str, Any]) -> str:
    """文本格式；上下文中存在 request_id / user_id 时追加到行尾。"""
    fmt = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    )

    extra = record["extra"]
    if extra.get("request_id"):
        fmt += " | <magenta>req_id={extra[request_id]}</magenta>"
    if extra.get("user_id"):
        fmt += " | <yellow>user_id={extra[user_id]}</yellow>"

    return fmt + "\n{exception}"


def setup_logging() -> None:
    """
    初始化日志。
    在应用 lifespan 启动阶段调用一次。
    """
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(settings.LOG_LEVEL)

    for name in list(logging.root.manager.loggerDict.keys()):
        if name.startswith(_INTERCEPTED_PREFIXES):
            std_logger = logging.getLogger(name)
            std_logger.handlers = []
            std_logger.propagate = True

    logger.remove()

    base_config: dict[str, Any] = {
        "level": settings.LOG_LEVEL,
        "enqueue": True,
        "backtrace": True,
        "diagnose": settings.LOG_DIAGNOSE and not settings.is_production,
    }

    # Sink 1: stdout
    console_config = dict(base_config)
    if settings.LOG_JSON_FORMAT:
        console_config["serialize"] = True
    else:
        console_config["format"] = format_record
        console_config["colorize"] = True
    logger.add(sys.stdout, **console_config)

    # Sink 2: 文件 (按配置启用)
    if settings.LOG_FILE_ENABLED:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)

        file_config = dict(base_config)
        file_config.update(
            rotation=settings.LOG_ROTATION,
            retention=settings.LOG_RETENTION,
            compression=settings.LOG_COMPRESSION,
        )
        if settings.LOG_JSON_FORMAT:
            file_config["serialize"] = True
        else:
            file_config["format"] = format_record

        logger.add(str(log_dir / "community_{time:YYYY-MM-DD}.log"), **file_config)

    logger.bind(environment=settings.ENVIRONMENT).info("Logging configured")
