"""
File: app/domains/uploads/schemas.py
Description: 上传领域 Pydantic 模型 (Schema)

Author: jinmozhe
Created: 2026-03-09
"""

from pydantic import BaseModel, Field

from app.domains.uploads.constants import UploadKind


class UploadRead(BaseModel):
    kind: UploadKind
    url: str = Field(..., description="可访问地址，直接写入头像 / 封面 / 帖子媒体字段")
    filename: str = Field(..., description="服务端生成的文件名")
    content_type: str
    size: int = Field(..., description="字节数")
