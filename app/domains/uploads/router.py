"""
File: app/domains/uploads/router.py
Description: 上传领域 HTTP 路由层

POST /uploads/{kind}: multipart 表单字段名为 file，需登录。
kind ∈ avatar / cover / image / music

Author: jinmozhe
Created: 2026-03-09
"""

from fastapi import APIRouter, File, Request, UploadFile, status

from app.api.deps import CurrentUser
from app.core.response import ResponseModel
from app.domains.uploads.constants import UploadKind, UploadMsg
from app.domains.uploads.dependencies import UploadServiceDep
from app.domains.uploads.schemas import UploadRead

router = APIRouter()


@router.post(
    "/{kind}",
    response_model=ResponseModel[UploadRead],
    status_code=status.HTTP_201_CREATED,
    summary="上传文件",
    description="头像 / 封面 / 图片需为 image/*，音乐需为 audio/*，单文件上限 10 MiB。",
)
async def upload_file(
    request: Request,
    kind: UploadKind,
    current_user: CurrentUser,
    service: UploadServiceDep,
    file: UploadFile = File(...),
) -> ResponseModel[UploadRead]:
    uploaded = await service.save(kind, file)
    req_id = getattr(request.state, "request_id", None)
    return ResponseModel.success(
        data=uploaded, message=UploadMsg.UPLOAD_SUCCESS, request_id=req_id
    )
