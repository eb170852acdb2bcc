"""
File: app/domains/uploads/constants.py
Description: 上传领域常量定义
Namespace: uploads.*

Author: jinmozhe
Created: 2026-03-09
"""

from enum import StrEnum

from starlette.status import HTTP_400_BAD_REQUEST, HTTP_413_REQUEST_ENTITY_TOO_LARGE

from app.core.error_code import BaseErrorCode


class UploadKind(StrEnum):
    AVATAR = "avatar"
    COVER = "cover"
    IMAGE = "image"
    MUSIC = "music"


# kind -> 允许的 MIME 主类型
ALLOWED_MIME_PREFIX: dict[UploadKind, str] = {
    UploadKind.AVATAR: "image/",
    UploadKind.COVER: "image/",
    UploadKind.IMAGE: "image/",
    UploadKind.MUSIC: "audio/",
}

# 保留的原始扩展名最大长度 (含点)
MAX_EXTENSION_LENGTH = 10


class UploadError(BaseErrorCode):
    INVALID_TYPE = (HTTP_400_BAD_REQUEST, "uploads.invalid_type", "文件类型不允许")
    EMPTY_FILE = (HTTP_400_BAD_REQUEST, "uploads.empty_file", "文件为空")
    FILE_TOO_LARGE = (
        HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        "uploads.file_too_large",
        "文件超过大小限制",
    )


class UploadMsg:
    UPLOAD_SUCCESS = "上传成功"
