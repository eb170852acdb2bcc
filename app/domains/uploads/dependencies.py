"""
File: app/domains/uploads/dependencies.py
Description: 上传领域依赖注入 (DI)

测试中通过 dependency_overrides[get_upload_service] 指向临时目录。

Author: jinmozhe
Created: 2026-03-09
"""

from pathlib import Path
from typing import Annotated

from fastapi import Depends

from app.core.config import settings
from app.domains.uploads.service import UploadService


async def get_upload_service() -> UploadService:
    return UploadService(
        upload_dir=Path(settings.UPLOAD_DIR),
        url_prefix=settings.UPLOAD_URL_PREFIX,
        max_bytes=settings.UPLOAD_MAX_BYTES,
    )


UploadServiceDep = Annotated[UploadService, Depends(get_upload_service)]
