"""
File: app/domains/uploads/service.py
Description: 上传领域服务

1. 按 kind 校验 MIME 主类型 (图片类 image/*，音乐 audio/*)
2. 限制文件大小 (UPLOAD_MAX_BYTES)
3. 以 32 位十六进制随机名落盘到 UPLOAD_DIR/<kind>/，保留原扩展名
4. 返回静态文件 URL；数据层只保存 URL 字符串

磁盘写入放到线程池，避免阻塞事件循环。

Author: jinmozhe
Created: 2026-03-09
"""

import secrets
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import AppException
from app.core.logging import logger
from app.domains.uploads.constants import (
    ALLOWED_MIME_PREFIX,
    MAX_EXTENSION_LENGTH,
    UploadError,
    UploadKind,
)
from app.domains.uploads.schemas import UploadRead


def _write_file(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def build_filename(original: str | None) -> str:
    """随机文件名 + 原始扩展名 (小写，过长则丢弃)"""
    suffix = Path(original or "").suffix.lower()
    if len(suffix) > MAX_EXTENSION_LENGTH or not suffix[1:].isalnum():
        suffix = ""
    return f"{secrets.token_hex(16)}{suffix}"


class UploadService:
    def __init__(self, upload_dir: Path, url_prefix: str, max_bytes: int):
        self.upload_dir = upload_dir
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes

    async def save(self, kind: UploadKind, file: UploadFile) -> UploadRead:
        content_type = file.content_type or ""
        if not content_type.startswith(ALLOWED_MIME_PREFIX[kind]):
            raise AppException(
                UploadError.INVALID_TYPE,
                message=f"{kind.value} 只接受 {ALLOWED_MIME_PREFIX[kind]}* 类型",
            )

        # 多读 1 字节即可判断是否超限
        data = await file.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            raise AppException(UploadError.FILE_TOO_LARGE)
        if not data:
            raise AppException(UploadError.EMPTY_FILE)

        filename = build_filename(file.filename)
        await run_in_threadpool(_write_file, self.upload_dir / kind.value / filename, data)

        logger.bind(kind=kind.value, filename=filename, size=len(data)).info(
            "File uploaded"
        )

        return UploadRead(
            kind=kind,
            url=f"{self.url_prefix}/{kind.value}/{filename}",
            filename=filename,
            content_type=content_type,
            size=len(data),
        )
